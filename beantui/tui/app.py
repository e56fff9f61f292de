"""prompt_toolkit driver for an EditSession.

The driver owns no editing logic: every key press is translated through the
keymap and handed to the session, and the screen is re-rendered from the
session state afterwards.
"""

from __future__ import annotations

import sys
from typing import Any

from prompt_toolkit.application import Application
from prompt_toolkit.input import create_input
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.output import create_output
from prompt_toolkit.styles import Style

from beantui.domain.session import EditSession
from beantui.runtime import defer_terminal_logging, get_logger
from beantui.tui.keymap import Keymap
from beantui.tui.view import render

logger = get_logger(__name__)

STYLE = Style.from_dict(
    {
        "header": "bold",
        "focus": "reverse",
        "edit": "underline bold",
        "dim": "#888888",
        "status": "fg:ansiyellow",
        "selected": "reverse",
    }
)


def _key_name(key: Any) -> str:
    return key.value if isinstance(key, Keys) else str(key)


def build_application(session: EditSession, keymap: Keymap) -> Application[None]:
    """Create the full-screen application bound to one session."""
    kb = KeyBindings()

    @kb.add(Keys.Any)
    def _dispatch(event: Any) -> None:  # pragma: no cover - interactive
        press = event.key_sequence[0]
        key = _key_name(press.key)
        translated = keymap.resolve(session.mode, key, press.data)
        if translated is None:
            return
        session.handle(translated)
        if session.terminated:
            event.app.exit()

    control = FormattedTextControl(lambda: render(session), focusable=True, show_cursor=False)
    root = HSplit([Window(content=control, wrap_lines=False)])

    # Draw on stderr and read from whichever standard stream is a tty, so
    # stdout stays free for the projected ledger even when stdin is a pipe.
    return Application(
        layout=Layout(root),
        key_bindings=kb,
        style=STYLE,
        full_screen=True,
        input=create_input(always_prefer_tty=True),
        output=create_output(stdout=sys.stderr),
    )


def run_session(session: EditSession, keymap: Keymap | None = None) -> None:
    """Run the interactive loop until the session terminates."""
    app = build_application(session, keymap or Keymap.default())
    logger.debug("Starting editor on %d transaction(s)", len(session.document.transactions))
    with defer_terminal_logging():
        app.run()  # blocks until a key binding calls exit()
