"""Shared pytest fixtures for beantui tests."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from beantui.domain import Amount, Document, MetadataField, Posting, Transaction


def make_document() -> Document:
    """Two transactions: one with metadata and two postings, one bare with a single posting."""
    first = Transaction(
        date=dt.date(2024, 1, 5),
        payee="Grocer",
        narration="Weekly shop",
        meta={"receipt": MetadataField("receipt", "r-001")},
        postings=[
            Posting("Expenses:Food", Amount(Decimal("12.50"), "CAD")),
            Posting("Liabilities:CreditCard:CardA", Amount(Decimal("-12.50"), "CAD")),
        ],
    )
    second = Transaction(
        date=dt.date(2024, 1, 6),
        narration="Coffee",
        postings=[Posting("Expenses:Coffee", Amount(Decimal("3.00"), "CAD"))],
    )
    return Document(
        transactions=[first, second],
        accounts=("Assets:Cash", "Expenses:Coffee", "Expenses:Food", "Liabilities:CreditCard:CardA"),
        currencies=("CAD", "USD"),
    )


@pytest.fixture
def document() -> Document:
    return make_document()
