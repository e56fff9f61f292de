"""Render edited transactions back to Beancount text."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from beantui.domain.document import Document, MetadataField, Posting, Transaction, format_number
from beantui.runtime import get_logger

logger = get_logger(__name__)


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _format_meta(field: MetadataField, indent: str) -> str:
    value = _quote(field.value) if field.quoted else field.value
    return f"{indent}{field.key}: {value}"


def _format_header(txn: Transaction) -> str:
    parts = [txn.date.isoformat(), txn.flag]
    if txn.payee is not None:
        parts.append(_quote(txn.payee))
    parts.append(_quote(txn.narration))
    parts.extend(f"#{tag}" for tag in txn.tags)
    parts.extend(f"^{link}" for link in txn.links)
    return " ".join(parts)


def _posting_account(posting: Posting) -> str:
    if posting.flag:
        return f"{posting.flag} {posting.account}"
    return posting.account


def _posting_amount(posting: Posting) -> str:
    if posting.units is None:
        return ""
    parts: list[str] = []
    if posting.units.number is not None:
        parts.append(format_number(posting.units.number))
    if posting.units.currency:
        parts.append(posting.units.currency)
    return " ".join(parts)


def _posting_suffix(posting: Posting) -> str:
    parts: list[str] = []
    if posting.cost:
        parts.append(posting.cost)
    if posting.price:
        parts.append(f"@ {posting.price}")
    return " ".join(parts)


def _format_postings_aligned(postings: list[Posting], indent: str = "  ") -> list[str]:
    """
    Format posting lines with accounts padded and amounts right-aligned.

    Each posting is followed by its own metadata lines, indented one level
    deeper than the posting.
    """
    if not postings:
        return []

    accounts = [_posting_account(p) for p in postings]
    amounts = [_posting_amount(p) for p in postings]
    max_account_len = max(len(account) for account in accounts)
    max_amount_len = max(len(amount) for amount in amounts)

    lines: list[str] = []
    for posting, account, amount in zip(postings, accounts, amounts):
        if amount:
            line = f"{indent}{account.ljust(max_account_len)}  {amount.rjust(max_amount_len)}"
        else:
            line = f"{indent}{account}"
        suffix = _posting_suffix(posting)
        if suffix:
            line = f"{line} {suffix}"
        lines.append(line.rstrip() or indent)
        lines.extend(_format_meta(field, indent * 2) for field in posting.meta)
    return lines


def format_transaction(txn: Transaction) -> str:
    """Return the canonical text of one transaction, without trailing newline."""
    lines = [_format_header(txn)]
    lines.extend(_format_meta(field, "  ") for field in txn.meta.values())
    lines.extend(_format_postings_aligned(txn.postings))
    return "\n".join(lines)


def project_transactions(transactions: Iterable[Transaction]) -> str:
    """Render transactions in order, separated by one blank line."""
    blocks = [format_transaction(txn) for txn in transactions]
    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


class LedgerWriter:
    """Write the final document to an output stream."""

    def write(self, document: Document, stream: TextIO | None = None) -> None:
        out = stream if stream is not None else sys.stdout
        out.write(project_transactions(document.transactions))
        out.flush()
        logger.info("Wrote %d transaction(s)", len(document.transactions))

    def write_to_path(self, document: Document, path: Path | str) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            self.write(document, f)
