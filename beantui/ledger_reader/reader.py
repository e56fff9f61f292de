"""Ledger loading for the editor.

This module is the only place that reads ledger text. It uses the raw
Beancount parser rather than `beancount.loader.load_file()` so that elided
posting amounts stay elided instead of being filled in by booking.
"""

from __future__ import annotations

import datetime as dt
import re
import sys
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any

from beancount.core import amount as bc_amount
from beancount.core import data
from beancount.core.number import MISSING
from beancount.parser import parser

from beantui.domain.document import Amount, Document, MetadataField, Posting, Transaction, format_number
from beantui.runtime import get_logger

logger = get_logger(__name__)

STDIN_PATH = "-"
_INTERNAL_META_KEYS = frozenset({"filename", "lineno"})
_META_LINE_RE = re.compile(r"^\s+([a-z][A-Za-z0-9_-]*):\s*(.*)$")


@dataclass(frozen=True)
class LoadedLedger:
    """Structured result from parsing a Beancount ledger."""

    path: str
    entries: list[data.Directive]
    errors: list[Any]
    options: dict[str, Any]
    source: str = ""


def _is_missing(value: object) -> bool:
    return value is None or value is MISSING


def _format_number(number: object) -> str:
    if _is_missing(number):
        return ""
    return format_number(number) if isinstance(number, Decimal) else str(number)


def _format_amount(value: object) -> str:
    if not isinstance(value, bc_amount.Amount):
        return ""
    parts = [_format_number(value.number)]
    if not _is_missing(value.currency):
        parts.append(str(value.currency))
    return " ".join(part for part in parts if part)


def _format_cost(cost: object) -> str | None:
    if _is_missing(cost):
        return None
    parts: list[str] = []
    if isinstance(cost, data.CostSpec):
        number = _format_number(cost.number_per)
        if not _is_missing(cost.number_total):
            number = f"{number} # {_format_number(cost.number_total)}".strip()
        currency = "" if _is_missing(cost.currency) else str(cost.currency)
        head = " ".join(p for p in (number, currency) if p)
        if head:
            parts.append(head)
        if cost.date is not None:
            parts.append(cost.date.isoformat())
        if cost.label is not None:
            parts.append(f'"{cost.label}"')
        if cost.merge:
            parts.append("*")
    elif isinstance(cost, data.Cost):
        parts.append(f"{_format_number(cost.number)} {cost.currency}")
        if cost.date is not None:
            parts.append(cost.date.isoformat())
        if cost.label is not None:
            parts.append(f'"{cost.label}"')
    return "{" + ", ".join(parts) + "}"


def _bare_meta_keys(lines: list[str], lineno: Any) -> set[str]:
    """Return keys of the metadata lines after ``lineno`` whose value is not quoted.

    Beancount hands accounts, currencies and tags back as plain strings, so the
    source line is the only record of whether a string value was quoted.
    """
    if not lines or not isinstance(lineno, int):
        return set()
    keys: set[str] = set()
    for line in lines[lineno:]:
        match = _META_LINE_RE.match(line)
        if match is None:
            break
        if not match.group(2).startswith('"'):
            keys.add(match.group(1))
    return keys


def _meta_value(value: Any, bare: bool = False) -> tuple[str, bool]:
    """Return (text, quoted) for a Beancount metadata value."""
    if isinstance(value, str):
        return value, not bare
    if isinstance(value, bool):
        return ("TRUE" if value else "FALSE"), False
    if isinstance(value, bc_amount.Amount):
        return _format_amount(value), False
    if isinstance(value, dt.date):
        return value.isoformat(), False
    if isinstance(value, Decimal):
        return format_number(value), False
    return str(value), False


def _map_meta(meta: dict[str, Any] | None, lines: list[str]) -> list[MetadataField]:
    meta = meta or {}
    bare = _bare_meta_keys(lines, meta.get("lineno"))
    fields: list[MetadataField] = []
    for key, value in meta.items():
        if key in _INTERNAL_META_KEYS or key.startswith("__"):
            continue
        text, quoted = _meta_value(value, key in bare)
        fields.append(MetadataField(key=key, value=text, quoted=quoted))
    return fields


def _map_posting(posting: data.Posting, lines: list[str]) -> Posting:
    units = None
    if isinstance(posting.units, bc_amount.Amount):
        number = None if _is_missing(posting.units.number) else posting.units.number
        currency = None if _is_missing(posting.units.currency) else posting.units.currency
        if number is not None or currency is not None:
            units = Amount(number=number, currency=currency)
    price = None
    if isinstance(posting.price, bc_amount.Amount):
        price = _format_amount(posting.price) or None
    return Posting(
        account=posting.account,
        units=units,
        flag=posting.flag,
        cost=_format_cost(posting.cost),
        price=price,
        meta=_map_meta(posting.meta, lines),
    )


def _map_transaction(txn: data.Transaction, lines: list[str]) -> Transaction:
    meta = txn.meta or {}
    raw_lineno = meta.get("lineno")
    try:
        lineno = int(raw_lineno) if raw_lineno is not None else None
    except (TypeError, ValueError):
        lineno = None
    return Transaction(
        date=txn.date,
        flag=txn.flag or "*",
        payee=txn.payee,
        narration=txn.narration or "",
        tags=tuple(sorted(txn.tags or ())),
        links=tuple(sorted(txn.links or ())),
        meta={field.key: field for field in _map_meta(meta, lines)},
        postings=[_map_posting(posting, lines) for posting in txn.postings],
        filename=str(meta["filename"]) if "filename" in meta else None,
        lineno=lineno,
    )


def build_document(entries: list[data.Directive], source: str = "") -> Document:
    """Map parsed directives to an editable Document, keeping file order.

    ``source`` is the parsed text. Without it, string metadata values are
    assumed to have been quoted.
    """
    lines = source.splitlines()
    transactions: list[Transaction] = []
    accounts: set[str] = set()
    currencies: set[str] = set()

    for entry in entries:
        if isinstance(entry, data.Open):
            accounts.add(entry.account)
            currencies.update(entry.currencies or ())
        elif isinstance(entry, data.Transaction):
            txn = _map_transaction(entry, lines)
            transactions.append(txn)
            for posting in txn.postings:
                if posting.account:
                    accounts.add(posting.account)
                if posting.units is not None and posting.units.currency:
                    currencies.add(posting.units.currency)

    return Document(
        transactions=transactions,
        accounts=tuple(sorted(accounts)),
        currencies=tuple(sorted(currencies)),
    )


class LedgerReader:
    """Parse Beancount text into the editor's document model."""

    def load(self, ledger_path: Path | str) -> LoadedLedger:
        """Parse a ledger file, or stdin when the path is ``-``."""
        path = str(ledger_path)
        if path == STDIN_PATH:
            source = sys.stdin.read()
            entries, errors, options = parser.parse_string(source)
        else:
            if not Path(path).is_file():
                raise FileNotFoundError(f"Ledger file not found: {path}")
            source = Path(path).read_text(encoding="utf-8")
            entries, errors, options = parser.parse_file(path)

        if errors:
            logger.warning("Beancount reported %d error(s) while parsing %s", len(errors), path)
            for error in errors:
                logger.debug("%s", error)

        return LoadedLedger(
            path=path,
            entries=list(entries),
            errors=list(errors),
            options=dict(options),
            source=source,
        )

    def load_string(self, content: str) -> LoadedLedger:
        entries, errors, options = parser.parse_string(content)
        if errors:
            logger.warning("Beancount reported %d error(s) while parsing input", len(errors))
        return LoadedLedger(
            path=STDIN_PATH,
            entries=list(entries),
            errors=list(errors),
            options=dict(options),
            source=content,
        )

    def document(self, ledger_path: Path | str) -> Document:
        """Load a ledger and return its transactions as an editable Document."""
        loaded = self.load(ledger_path)
        document = build_document(loaded.entries, loaded.source)
        logger.info("Loaded %d transaction(s) from %s", len(document.transactions), loaded.path)
        return document
