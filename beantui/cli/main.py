#!/usr/bin/env python3

import argparse
import sys
from collections.abc import Callable, Sequence

from beantui.domain import EditSession, InvalidTarget
from beantui.ledger_reader import LedgerReader, LedgerWriter
from beantui.runtime import configure_logging, get_logger, load_keymap_overrides
from beantui.tui.keymap import Keymap

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERNAL = 2

SessionRunner = Callable[[EditSession, Keymap], None]


def _default_runner(session: EditSession, keymap: Keymap) -> None:
    from beantui.tui.app import run_session

    run_session(session, keymap)


def _print_error(error: str) -> None:
    for line in error.splitlines():
        print(line, file=sys.stderr)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="beantui",
        description="Edit beancount transactions in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Keys (navigating):
  Ctrl-D/F/N/L               Next transaction
  Ctrl-U/B/P/H               Previous transaction
  Tab / Shift-Tab (j / k)    Next / previous field
  Ctrl-J / Ctrl-K            Jump to postings / metadata (Ctrl-K again: header)
  t or Ctrl-T                Jump to the date, flag, payee and narration line
  Enter or i                 Edit field (Enter confirms, Esc cancels)
  Space                      Choose account, currency or flag from a list
  a                          Add posting
  Esc or q                   Quit and print the transactions

Notes:
  The edited transactions are written to stdout (or --output); the input
  file is never modified.
""",
    )
    parser.add_argument(
        "-f",
        "--file",
        required=True,
        help="The path to the file to handle, use - to read from stdin (must not be a tty)",
    )
    parser.add_argument("-o", "--output", default=None, help="Write transactions here instead of stdout")
    parser.add_argument("--keymap", default=None, help="Key binding overrides TOML (default: config dir keymap.toml)")
    parser.add_argument("--log-file", default=None, help="Write log messages to this file")
    return parser


def main(argv: Sequence[str] | None = None, runner: SessionRunner | None = None) -> int:
    """Main entry point for the CLI."""
    args = _build_parser().parse_args(argv)

    if args.log_file:
        configure_logging(log_file=args.log_file, force=True)

    if args.file == "-" and sys.stdin.isatty():
        _print_error("Refusing to read the ledger from an interactive stdin; pipe a file or use --file PATH.")
        return EXIT_ERROR

    try:
        document = LedgerReader().document(args.file)
    except FileNotFoundError as exc:
        _print_error(str(exc))
        return EXIT_ERROR

    if not document.transactions:
        logger.warning("No transactions found in %s; nothing to edit", args.file)
        return EXIT_OK

    try:
        keymap = Keymap.default().with_overrides(load_keymap_overrides(args.keymap))
    except ValueError as exc:
        _print_error(f"Invalid keymap: {exc}")
        return EXIT_ERROR

    session = EditSession(document)
    try:
        (runner or _default_runner)(session, keymap)
    except InvalidTarget as exc:
        logger.error("Internal consistency error, aborting without output: %s", exc)
        return EXIT_INTERNAL

    writer = LedgerWriter()
    if args.output:
        writer.write_to_path(document, args.output)
    else:
        writer.write(document, sys.stdout)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
