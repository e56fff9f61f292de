"""Render the session state as styled text fragments.

The output is a list of (style, text) pairs, which prompt_toolkit accepts as
formatted text directly. Nothing here touches the terminal.

The focused cell and the selected popup option are preceded by a
``[SetCursorPosition]`` fragment so the window scrolls to keep them visible.
"""

from __future__ import annotations

from beantui.domain.document import COLUMNS, Column, HeaderField, Transaction, format_number
from beantui.domain.focus import FocusTarget, HeaderArea, MetadataArea, PostingArea
from beantui.domain.session import EditSession, PostingSelectPopup, TextInput

Fragments = list[tuple[str, str]]

STYLE_FOCUS = "class:focus"
STYLE_EDIT = "class:edit"
STYLE_HEADER = "class:header"
STYLE_DIM = "class:dim"
STYLE_STATUS = "class:status"
STYLE_SELECTED = "class:selected"
CURSOR_MARKER = ("[SetCursorPosition]", "")

POPUP_HEIGHT = 12

_COLUMN_TITLES = {Column.ACCOUNT: "Account", Column.NUMBER: "Amount", Column.CURRENCY: "Currency"}
_HELP = {
    "navigating": "Tab/S-Tab field  C-n/C-p transaction  C-j/C-k postings/metadata  t header  "
    "Enter edit  Space choose  a add posting  Esc quit",
    "text_input": "Enter confirm  Esc cancel",
    "popup": "Up/Down move  Enter confirm  Esc cancel",
}


def _mode_label(session: EditSession) -> str:
    if isinstance(session.mode, TextInput):
        return "text_input"
    if isinstance(session.mode, PostingSelectPopup):
        return "popup"
    return "navigating"


def _cell(session: EditSession, target: FocusTarget, stored: str, style: str = "") -> Fragments:
    """Return the fragments for one addressable cell."""
    if target != session.focus:
        return [(style, stored)]
    if isinstance(session.mode, TextInput):
        buffer = session.mode.buffer
        return [CURSOR_MARKER, (STYLE_EDIT, buffer.text[: buffer.cursor] + "|" + buffer.text[buffer.cursor :])]
    if isinstance(session.mode, PostingSelectPopup):
        # The selected option carries the cursor while the popup is open.
        return [(STYLE_FOCUS, stored or " ")]
    return [CURSOR_MARKER, (STYLE_FOCUS, stored or " ")]


def _cell_width(fragments: Fragments) -> int:
    return sum(len(text) for _, text in fragments)


def _posting_cell(txn: Transaction, posting_index: int, column: Column) -> str:
    posting = txn.postings[posting_index]
    if column is Column.ACCOUNT:
        return posting.account
    if posting.units is None:
        return ""
    if column is Column.NUMBER:
        return "" if posting.units.number is None else format_number(posting.units.number)
    return posting.units.currency or ""


def _render_header(session: EditSession, txn: Transaction, index: int) -> Fragments:
    def cell(header: HeaderField, stored: str) -> Fragments:
        return _cell(session, FocusTarget(index, HeaderArea(header)), stored, "bold")

    fragments = cell(HeaderField.DATE, txn.date.isoformat())
    fragments.append(("bold", " "))
    fragments.extend(cell(HeaderField.FLAG, txn.flag))
    if txn.payee is not None or session.focus == FocusTarget(index, HeaderArea(HeaderField.PAYEE)):
        fragments.append(("bold", ' "'))
        fragments.extend(cell(HeaderField.PAYEE, txn.payee or ""))
        fragments.append(("bold", '"'))
    fragments.append(("bold", ' "'))
    fragments.extend(cell(HeaderField.NARRATION, txn.narration))
    fragments.append(("bold", '"\n'))
    return fragments


def _render_postings(session: EditSession, txn: Transaction, index: int) -> Fragments:
    widths = {column: len(_COLUMN_TITLES[column]) for column in COLUMNS}
    for p in range(len(txn.postings)):
        for column in COLUMNS:
            widths[column] = max(widths[column], len(_posting_cell(txn, p, column)) + 1)

    fragments: Fragments = [(STYLE_DIM, "  ")]
    for column in COLUMNS:
        fragments.append((STYLE_DIM, _COLUMN_TITLES[column].ljust(widths[column]) + "  "))
    fragments.append(("", "\n"))

    for p in range(len(txn.postings)):
        fragments.append(("", "  "))
        for column in COLUMNS:
            target = FocusTarget(index, PostingArea(p, column))
            cell = _cell(session, target, _posting_cell(txn, p, column))
            fragments.extend(cell)
            fragments.append(("", " " * max(widths[column] - _cell_width(cell), 0) + "  "))
        fragments.append(("", "\n"))
    return fragments


def popup_window(popup: PostingSelectPopup, height: int = POPUP_HEIGHT) -> range:
    """Return the option indexes to draw, a window that contains the selection."""
    count = len(popup.options)
    if count <= height:
        return range(count)
    start = min(max(popup.selected - height // 2, 0), count - height)
    return range(start, start + height)


def _render_popup(popup: PostingSelectPopup) -> Fragments:
    window = popup_window(popup)
    fragments: Fragments = [("", "\n")]
    if window.start > 0:
        fragments.append((STYLE_DIM, f"  ... {window.start} more\n"))
    for i in window:
        if i == popup.selected:
            fragments.extend([CURSOR_MARKER, (STYLE_SELECTED, f"  {popup.options[i]}\n")])
        else:
            fragments.append(("", f"  {popup.options[i]}\n"))
    below = len(popup.options) - window.stop
    if below > 0:
        fragments.append((STYLE_DIM, f"  ... {below} more\n"))
    return fragments


def render(session: EditSession) -> Fragments:
    """Return the full screen for the current session state."""
    index = session.focus.transaction
    txn = session.document.transactions[index]
    label = _mode_label(session)

    fragments: Fragments = [
        (STYLE_HEADER, f"beantui  [{index + 1}/{len(session.document.transactions)}]  {label.upper()}\n\n"),
    ]
    fragments.extend(_render_header(session, txn, index))

    for i, field in enumerate(txn.meta.values()):
        fragments.append(("", f"  {field.key}: "))
        fragments.extend(_cell(session, FocusTarget(index, MetadataArea(i)), field.value))
        fragments.append(("", "\n"))

    if txn.postings:
        fragments.append(("", "\n"))
        fragments.extend(_render_postings(session, txn, index))
    elif not txn.meta:
        fragments.append((STYLE_DIM, "  (no metadata, no postings)\n"))

    if isinstance(session.mode, PostingSelectPopup):
        fragments.extend(_render_popup(session.mode))

    fragments.append(("", "\n"))
    if session.status:
        fragments.append((STYLE_STATUS, session.status + "\n"))
    fragments.append((STYLE_DIM, _HELP[label]))
    return fragments
