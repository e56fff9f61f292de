"""Tests for parsing ledger text into the document model."""

from __future__ import annotations

import io
from decimal import Decimal
from pathlib import Path

import pytest

from beantui.ledger_reader import LedgerReader, build_document, project_transactions

SAMPLE = """
option "operating_currency" "CAD"
2024-01-01 open Assets:Cash CAD
2024-01-01 open Expenses:Food

2024-01-05 * "Grocer" "Weekly shop" #food ^inv-1
  receipt: "r-001"
  count: 3
  Expenses:Food  12.50 CAD
    item: "bread"
  Assets:Cash

2024-01-06 ! "Coffee"
  Expenses:Coffee  3.00 USD @ 1.35 CAD
  Assets:Cash
""".lstrip()


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def test_document_keeps_transactions_in_file_order(tmp_path: Path) -> None:
    ledger = tmp_path / "main.beancount"
    _write(ledger, SAMPLE)

    document = LedgerReader().document(ledger)

    assert [txn.date.isoformat() for txn in document.transactions] == ["2024-01-05", "2024-01-06"]
    first, second = document.transactions
    assert first.payee == "Grocer"
    assert first.narration == "Weekly shop"
    assert first.tags == ("food",)
    assert first.links == ("inv-1",)
    assert first.lineno == 5
    assert second.flag == "!"
    assert second.payee is None
    assert second.narration == "Coffee"


def test_metadata_order_and_quoting(tmp_path: Path) -> None:
    ledger = tmp_path / "main.beancount"
    _write(ledger, SAMPLE)

    first = LedgerReader().document(ledger).transactions[0]

    assert list(first.meta) == ["receipt", "count"]
    assert first.meta["receipt"].quoted is True
    assert first.meta["count"].value == "3"
    assert first.meta["count"].quoted is False
    assert [(f.key, f.value) for f in first.postings[0].meta] == [("item", "bread")]


def test_elided_amount_stays_elided(tmp_path: Path) -> None:
    ledger = tmp_path / "main.beancount"
    _write(ledger, SAMPLE)

    first = LedgerReader().document(ledger).transactions[0]

    assert first.postings[0].units is not None
    assert first.postings[0].units.number == Decimal("12.50")
    assert first.postings[1].account == "Assets:Cash"
    assert first.postings[1].units is None


def test_price_annotation_is_preserved(tmp_path: Path) -> None:
    ledger = tmp_path / "main.beancount"
    _write(ledger, SAMPLE)

    second = LedgerReader().document(ledger).transactions[1]

    assert second.postings[0].price == "1.35 CAD"
    assert "3.00 USD @ 1.35 CAD" in project_transactions([second])


def test_option_sets_collect_accounts_and_currencies(tmp_path: Path) -> None:
    ledger = tmp_path / "main.beancount"
    _write(ledger, SAMPLE)

    document = LedgerReader().document(ledger)

    assert document.accounts == ("Assets:Cash", "Expenses:Coffee", "Expenses:Food")
    assert document.currencies == ("CAD", "USD")


def test_projection_parses_back_to_same_shape(tmp_path: Path) -> None:
    ledger = tmp_path / "main.beancount"
    _write(ledger, SAMPLE)
    reader = LedgerReader()
    original = reader.document(ledger)

    projected = project_transactions(original.transactions)

    loaded = reader.load_string(projected)

    assert not loaded.errors
    again = build_document(loaded.entries, loaded.source)
    assert project_transactions(again.transactions) == projected


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        LedgerReader().load(tmp_path / "nope.beancount")


def test_dash_reads_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(SAMPLE))

    document = LedgerReader().document("-")

    assert len(document.transactions) == 2


def test_parse_errors_are_not_fatal(tmp_path: Path) -> None:
    ledger = tmp_path / "main.beancount"
    _write(ledger, "this is not valid beancount\n" + SAMPLE)

    loaded = LedgerReader().load(ledger)
    assert loaded.errors
    assert LedgerReader().document(ledger).transactions


TOKENS = """
2024-02-01 * "Transfer"
  ref: Assets:Cash
  cur: USD
  note: "Assets:Cash"
  Assets:Cash    -5 USD
    source: Liabilities:CreditCard
    memo: "USD"
  Expenses:Food
""".lstrip()


def test_account_and_currency_metadata_stay_bare() -> None:
    loaded = LedgerReader().load_string(TOKENS)
    txn = build_document(loaded.entries, loaded.source).transactions[0]

    assert (txn.meta["ref"].value, txn.meta["ref"].quoted) == ("Assets:Cash", False)
    assert (txn.meta["cur"].value, txn.meta["cur"].quoted) == ("USD", False)
    assert (txn.meta["note"].value, txn.meta["note"].quoted) == ("Assets:Cash", True)
    posting_meta = {field.key: field for field in txn.postings[0].meta}
    assert posting_meta["source"].quoted is False
    assert posting_meta["memo"].quoted is True

    projected = project_transactions([txn])
    assert "  ref: Assets:Cash\n" in projected
    assert '  note: "Assets:Cash"\n' in projected
    assert "    source: Liabilities:CreditCard\n" in projected
    assert projected == TOKENS


def test_string_metadata_without_source_defaults_to_quoted() -> None:
    loaded = LedgerReader().load_string(TOKENS)
    txn = build_document(loaded.entries).transactions[0]

    assert txn.meta["ref"].quoted is True


def test_file_load_keeps_source_for_quoting(tmp_path: Path) -> None:
    ledger = tmp_path / "main.beancount"
    _write(ledger, TOKENS)

    txn = LedgerReader().document(ledger).transactions[0]

    assert txn.meta["cur"].quoted is False
    assert txn.meta["note"].quoted is True
