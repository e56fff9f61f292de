"""Core editing model for the beancount transaction editor.

This package is pure: no file I/O, no terminal, no runtime services.
- Document, Transaction, Posting, MetadataField: the editable data
- FocusTarget and navigation helpers: where input goes
- EditSession: the input-event state machine

Usage:
    from beantui.domain import Action, EditSession
"""

from beantui.domain.document import (
    COLUMNS,
    FLAG_CHOICES,
    HEADER_FIELDS,
    Amount,
    Column,
    Document,
    HeaderField,
    InvalidFieldValue,
    InvalidTarget,
    MetadataField,
    Posting,
    Transaction,
)
from beantui.domain.focus import FocusTarget, HeaderArea, MetadataArea, PostingArea, TransactionArea
from beantui.domain.session import (
    Action,
    CharInput,
    EditBuffer,
    EditSession,
    Navigating,
    PostingSelectPopup,
    Terminated,
    TextInput,
)

__all__ = [
    # Document model
    "Amount",
    "Column",
    "COLUMNS",
    "Document",
    "FLAG_CHOICES",
    "HEADER_FIELDS",
    "HeaderField",
    "InvalidFieldValue",
    "InvalidTarget",
    "MetadataField",
    "Posting",
    "Transaction",
    # Focus
    "FocusTarget",
    "HeaderArea",
    "MetadataArea",
    "PostingArea",
    "TransactionArea",
    # Session
    "Action",
    "CharInput",
    "EditBuffer",
    "EditSession",
    "Navigating",
    "PostingSelectPopup",
    "Terminated",
    "TextInput",
]
