"""In-memory document model for an editable sequence of transactions."""

from __future__ import annotations

import datetime
import enum
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from beantui.domain.focus import FocusTarget


class InvalidTarget(LookupError):
    """A focus address no longer resolves against the document."""


class InvalidFieldValue(ValueError):
    """Text that cannot be stored in the addressed field."""


class Column(enum.Enum):
    """Editable cells of a posting row, in display order."""

    ACCOUNT = "account"
    NUMBER = "number"
    CURRENCY = "currency"


COLUMNS: tuple[Column, ...] = (Column.ACCOUNT, Column.NUMBER, Column.CURRENCY)


class HeaderField(enum.Enum):
    """Editable parts of a transaction's first line."""

    DATE = "date"
    FLAG = "flag"
    PAYEE = "payee"
    NARRATION = "narration"


HEADER_FIELDS: tuple[HeaderField, ...] = (
    HeaderField.DATE,
    HeaderField.FLAG,
    HeaderField.PAYEE,
    HeaderField.NARRATION,
)

# Offered by the flag popup. Any flag beancount accepts can still be typed.
FLAG_CHOICES: tuple[str, ...] = ("*", "!")
TRANSACTION_FLAGS = frozenset("*!&#?%PSTCURM")

_NUMBER_INPUT_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)")

# Tokens the beancount lexer accepts as unquoted metadata values.
_BARE_NUMBER = r"-?(\d+|\d[\d,]*\d)(\.\d*)?"
_BARE_CURRENCY = r"[A-Z][A-Z0-9'._-]{0,22}[A-Z0-9]"
_BARE_TOKEN_RES = (
    re.compile(_BARE_NUMBER),
    re.compile(rf"{_BARE_NUMBER}\s+{_BARE_CURRENCY}"),
    re.compile(_BARE_CURRENCY),
    re.compile(r"[A-Z][A-Za-z0-9-]*(:[A-Z0-9][A-Za-z0-9-]*)+"),
    re.compile(r"TRUE|FALSE"),
)


@dataclass
class Amount:
    number: Decimal | None = None
    currency: str | None = None

    def is_empty(self) -> bool:
        return self.number is None and not self.currency


@dataclass
class MetadataField:
    """A key/value annotation on a transaction or posting.

    ``quoted`` is False for values that were bare tokens in the source
    (numbers, dates, booleans, accounts, currencies) and must be written
    back unquoted.
    """

    key: str
    value: str
    quoted: bool = True


@dataclass
class Posting:
    account: str = ""
    units: Amount | None = None
    flag: str | None = None
    cost: str | None = None
    price: str | None = None
    meta: list[MetadataField] = field(default_factory=list)


@dataclass
class Transaction:
    date: datetime.date
    flag: str = "*"
    payee: str | None = None
    narration: str = ""
    tags: tuple[str, ...] = ()
    links: tuple[str, ...] = ()
    meta: dict[str, MetadataField] = field(default_factory=dict)
    postings: list[Posting] = field(default_factory=list)
    filename: str | None = None
    lineno: int | None = None

    def metadata_fields(self) -> list[MetadataField]:
        """Return metadata fields in insertion order."""
        return list(self.meta.values())


def format_number(number: Decimal) -> str:
    """Render a number in plain positional notation, never scientific."""
    return format(number, "f")


def is_bare_token(text: str) -> bool:
    """Return True if ``text`` can be written as an unquoted metadata value."""
    if any(pattern.fullmatch(text) for pattern in _BARE_TOKEN_RES):
        return True
    try:
        datetime.date.fromisoformat(text)
    except ValueError:
        return False
    return len(text) == 10


def _parse_number(value: str) -> Decimal | None:
    text = value.strip().replace(",", "")
    if not text:
        return None
    if not _NUMBER_INPUT_RE.fullmatch(text):
        raise InvalidFieldValue(f"not a number: {value!r}")
    try:
        return Decimal(text)
    except InvalidOperation as exc:
        raise InvalidFieldValue(f"not a number: {value!r}") from exc


def _parse_date(value: str) -> datetime.date:
    try:
        return datetime.date.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidFieldValue(f"not a date (YYYY-MM-DD): {value!r}") from exc


def _parse_flag(value: str) -> str:
    flag = value.strip()
    if flag not in TRANSACTION_FLAGS:
        raise InvalidFieldValue(f"not a transaction flag: {value!r}")
    return flag


@dataclass
class Document:
    """The ordered transactions under edit plus the option sets for popups."""

    transactions: list[Transaction] = field(default_factory=list)
    accounts: tuple[str, ...] = ()
    currencies: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.transactions)

    def transaction(self, index: int) -> Transaction:
        if index < 0 or index >= len(self.transactions):
            raise InvalidTarget(f"transaction {index} out of range (have {len(self.transactions)})")
        return self.transactions[index]

    def _resolve_metadata(self, target: FocusTarget) -> MetadataField:
        from beantui.domain.focus import MetadataArea

        if not isinstance(target.region, MetadataArea):
            raise InvalidTarget(f"{target} does not address a metadata field")
        fields = self.transaction(target.transaction).metadata_fields()
        index = target.region.field
        if index < 0 or index >= len(fields):
            raise InvalidTarget(f"metadata field {index} out of range in transaction {target.transaction}")
        return fields[index]

    def _resolve_posting(self, target: FocusTarget) -> Posting:
        from beantui.domain.focus import PostingArea

        if not isinstance(target.region, PostingArea):
            raise InvalidTarget(f"{target} does not address a posting")
        postings = self.transaction(target.transaction).postings
        index = target.region.posting
        if index < 0 or index >= len(postings):
            raise InvalidTarget(f"posting {index} out of range in transaction {target.transaction}")
        return postings[index]

    def field_value(self, target: FocusTarget) -> str:
        """Return the present text of the field addressed by ``target``."""
        from beantui.domain.focus import HeaderArea, MetadataArea, PostingArea

        region = target.region
        if isinstance(region, HeaderArea):
            txn = self.transaction(target.transaction)
            if region.field is HeaderField.DATE:
                return txn.date.isoformat()
            if region.field is HeaderField.FLAG:
                return txn.flag
            if region.field is HeaderField.PAYEE:
                return txn.payee or ""
            return txn.narration
        if isinstance(region, MetadataArea):
            return self._resolve_metadata(target).value
        if isinstance(region, PostingArea):
            posting = self._resolve_posting(target)
            if region.column is Column.ACCOUNT:
                return posting.account
            if posting.units is None:
                return ""
            if region.column is Column.NUMBER:
                return "" if posting.units.number is None else format_number(posting.units.number)
            return posting.units.currency or ""
        raise InvalidTarget(f"{target} does not address an editable field")

    def set_field_value(self, target: FocusTarget, value: str) -> None:
        """Replace the value of the field addressed by ``target``.

        A bare metadata value that no longer lexes as a bare token is
        switched to a quoted string. An empty payee removes the payee.

        Raises:
            InvalidTarget: the address does not resolve.
            InvalidFieldValue: ``value`` is not acceptable for a number,
                date or flag field.
        """
        from beantui.domain.focus import HeaderArea, MetadataArea, PostingArea

        region = target.region
        if isinstance(region, HeaderArea):
            self._set_header_value(self.transaction(target.transaction), region.field, value)
            return
        if isinstance(region, MetadataArea):
            metadata = self._resolve_metadata(target)
            if not metadata.quoted and is_bare_token(value.strip()):
                metadata.value = value.strip()
            else:
                metadata.value = value
                metadata.quoted = True
            return
        if not isinstance(region, PostingArea):
            raise InvalidTarget(f"{target} does not address an editable field")

        posting = self._resolve_posting(target)
        if region.column is Column.ACCOUNT:
            posting.account = value.strip()
            return

        units = posting.units or Amount()
        if region.column is Column.NUMBER:
            units.number = _parse_number(value)
        else:
            units.currency = value.strip() or None
        posting.units = None if units.is_empty() else units

    @staticmethod
    def _set_header_value(txn: Transaction, header: HeaderField, value: str) -> None:
        if header is HeaderField.DATE:
            txn.date = _parse_date(value)
        elif header is HeaderField.FLAG:
            txn.flag = _parse_flag(value)
        elif header is HeaderField.PAYEE:
            txn.payee = value or None
        else:
            txn.narration = value

    def append_posting(self, transaction_index: int) -> int:
        """Append an empty placeholder posting and return its index."""
        postings = self.transaction(transaction_index).postings
        postings.append(Posting())
        return len(postings) - 1
