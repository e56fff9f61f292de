"""Focus addressing and navigation over a Document.

Every function here is a pure computation over (target, document shape).
Nothing is cached: the slot ordering is rebuilt on each call because
appending a posting changes it.
"""

from __future__ import annotations

from dataclasses import dataclass

from beantui.domain.document import COLUMNS, HEADER_FIELDS, Column, Document, HeaderField


@dataclass(frozen=True)
class HeaderArea:
    """Focus on the date, flag, payee or narration of the transaction line.

    Header cells sit outside the field order walked by next_field; they are
    entered from above the first metadata field or through focus_header.
    """

    field: HeaderField = HeaderField.DATE


@dataclass(frozen=True)
class MetadataArea:
    field: int


@dataclass(frozen=True)
class PostingArea:
    posting: int
    column: Column = Column.ACCOUNT


@dataclass(frozen=True)
class TransactionArea:
    """Focus on a transaction that has no metadata and no postings."""


Region = HeaderArea | MetadataArea | PostingArea | TransactionArea


@dataclass(frozen=True)
class FocusTarget:
    transaction: int
    region: Region


def slots(document: Document, transaction_index: int) -> list[FocusTarget]:
    """Return the addressable fields of one transaction in navigation order.

    Metadata fields come first, then posting cells column-major: every
    account, then every number, then every currency.
    """
    txn = document.transaction(transaction_index)
    result = [FocusTarget(transaction_index, MetadataArea(i)) for i in range(len(txn.meta))]
    for column in COLUMNS:
        result.extend(FocusTarget(transaction_index, PostingArea(i, column)) for i in range(len(txn.postings)))
    return result


def first_target(document: Document, transaction_index: int) -> FocusTarget:
    ordered = slots(document, transaction_index)
    if ordered:
        return ordered[0]
    return FocusTarget(transaction_index, TransactionArea())


def initial_target(document: Document) -> FocusTarget:
    return first_target(document, 0)


def is_valid(document: Document, target: FocusTarget) -> bool:
    if target.transaction < 0 or target.transaction >= len(document.transactions):
        return False
    txn = document.transactions[target.transaction]
    region = target.region
    if isinstance(region, HeaderArea):
        return True
    if isinstance(region, MetadataArea):
        return 0 <= region.field < len(txn.meta)
    if isinstance(region, PostingArea):
        return 0 <= region.posting < len(txn.postings)
    return not txn.meta and not txn.postings


def clamp(document: Document, target: FocusTarget) -> FocusTarget:
    """Return ``target`` if still valid, otherwise the nearest valid target."""
    if is_valid(document, target):
        return target
    last = len(document.transactions) - 1
    index = min(max(target.transaction, 0), last)
    txn = document.transactions[index]
    region = target.region
    if isinstance(region, HeaderArea):
        return FocusTarget(index, region)
    if isinstance(region, MetadataArea) and txn.meta:
        return FocusTarget(index, MetadataArea(min(max(region.field, 0), len(txn.meta) - 1)))
    if isinstance(region, PostingArea) and txn.postings:
        return FocusTarget(index, PostingArea(min(max(region.posting, 0), len(txn.postings) - 1), region.column))
    return first_target(document, index)


def _position(ordered: list[FocusTarget], current: FocusTarget) -> int | None:
    try:
        return ordered.index(current)
    except ValueError:
        return None


def next_transaction(document: Document, current: FocusTarget) -> FocusTarget:
    if current.transaction >= len(document.transactions) - 1:
        return current
    return first_target(document, current.transaction + 1)


def previous_transaction(document: Document, current: FocusTarget) -> FocusTarget:
    if current.transaction <= 0:
        return current
    return first_target(document, current.transaction - 1)


def next_field(document: Document, current: FocusTarget) -> FocusTarget:
    if isinstance(current.region, HeaderArea):
        # Past the narration, continue into the transaction body.
        index = HEADER_FIELDS.index(current.region.field)
        if index < len(HEADER_FIELDS) - 1:
            return FocusTarget(current.transaction, HeaderArea(HEADER_FIELDS[index + 1]))
        return first_target(document, current.transaction)
    ordered = slots(document, current.transaction)
    if not ordered:
        return current
    pos = _position(ordered, current)
    if pos is None:
        return ordered[0]
    return ordered[min(pos + 1, len(ordered) - 1)]


def previous_field(document: Document, current: FocusTarget) -> FocusTarget:
    if isinstance(current.region, HeaderArea):
        index = HEADER_FIELDS.index(current.region.field)
        return FocusTarget(current.transaction, HeaderArea(HEADER_FIELDS[max(index - 1, 0)]))
    ordered = slots(document, current.transaction)
    if not ordered:
        return current
    pos = _position(ordered, current)
    if pos is None:
        return ordered[0]
    return ordered[max(pos - 1, 0)]


def focus_down_to_postings(document: Document, current: FocusTarget) -> FocusTarget:
    """Jump to the first posting's account cell; no-op without postings."""
    if not document.transaction(current.transaction).postings:
        return current
    return FocusTarget(current.transaction, PostingArea(0, Column.ACCOUNT))


def focus_up_to_metadata(document: Document, current: FocusTarget) -> FocusTarget:
    """Jump to the first metadata field; no-op without metadata.

    From the first metadata field itself, or from an empty transaction, the
    focus climbs one more level onto the header's date. The header is the top.
    """
    region = current.region
    if isinstance(region, HeaderArea):
        return current
    if region == MetadataArea(0) or isinstance(region, TransactionArea):
        return focus_header(document, current)
    if not document.transaction(current.transaction).meta:
        return current
    return FocusTarget(current.transaction, MetadataArea(0))


def focus_header(document: Document, current: FocusTarget) -> FocusTarget:
    """Jump to the date on the transaction line."""
    document.transaction(current.transaction)
    return FocusTarget(current.transaction, HeaderArea(HeaderField.DATE))
