"""Ledger text boundaries: parse into the document model, project back out."""

from beantui.ledger_reader.reader import LedgerReader, LoadedLedger, build_document
from beantui.ledger_reader.writer import LedgerWriter, format_transaction, project_transactions

__all__ = [
    "LedgerReader",
    "LoadedLedger",
    "build_document",
    "LedgerWriter",
    "format_transaction",
    "project_transactions",
]
