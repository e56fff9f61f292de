"""Edit session state machine.

One session owns one Document and one FocusTarget. Input arrives as discrete
events and is applied to completion before the next one is read.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from beantui.domain import focus as cursor
from beantui.domain.document import FLAG_CHOICES, Column, Document, HeaderField, InvalidFieldValue
from beantui.domain.focus import FocusTarget, HeaderArea, MetadataArea, PostingArea

logger = logging.getLogger(f"beantui.{__name__}")


class Action(enum.Enum):
    NEXT_TRANSACTION = "next_transaction"
    PREV_TRANSACTION = "prev_transaction"
    NEXT_FIELD = "next_field"
    PREV_FIELD = "prev_field"
    FOCUS_DOWN = "focus_down"
    FOCUS_UP = "focus_up"
    FOCUS_HEADER = "focus_header"
    ADD_POSTING = "add_posting"
    QUIT = "quit"
    ENTER_EDIT = "enter_edit"
    CONFIRM = "confirm"
    CANCEL = "cancel"
    OPEN_POPUP = "open_popup"
    BACKSPACE = "backspace"
    DELETE = "delete"
    CURSOR_LEFT = "cursor_left"
    CURSOR_RIGHT = "cursor_right"
    CURSOR_HOME = "cursor_home"
    CURSOR_END = "cursor_end"


@dataclass(frozen=True)
class CharInput:
    """Raw text typed while editing a field."""

    text: str


Event = Action | CharInput

_NAVIGATION = {
    Action.NEXT_TRANSACTION: cursor.next_transaction,
    Action.PREV_TRANSACTION: cursor.previous_transaction,
    Action.NEXT_FIELD: cursor.next_field,
    Action.PREV_FIELD: cursor.previous_field,
    Action.FOCUS_DOWN: cursor.focus_down_to_postings,
    Action.FOCUS_UP: cursor.focus_up_to_metadata,
    Action.FOCUS_HEADER: cursor.focus_header,
}


@dataclass
class EditBuffer:
    text: str = ""
    cursor: int = 0

    @classmethod
    def seeded(cls, text: str) -> EditBuffer:
        return cls(text=text, cursor=len(text))

    def insert(self, chars: str) -> None:
        self.text = self.text[: self.cursor] + chars + self.text[self.cursor :]
        self.cursor += len(chars)

    def backspace(self) -> None:
        if self.cursor == 0:
            return
        self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
        self.cursor -= 1

    def delete(self) -> None:
        self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]

    def move(self, offset: int) -> None:
        self.cursor = min(max(self.cursor + offset, 0), len(self.text))

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.text)


@dataclass(frozen=True)
class Navigating:
    pass


@dataclass(frozen=True)
class TextInput:
    buffer: EditBuffer


@dataclass(frozen=True)
class PostingSelectPopup:
    options: tuple[str, ...]
    selected: int = 0

    @property
    def current(self) -> str:
        return self.options[self.selected]


@dataclass(frozen=True)
class Terminated:
    pass


Mode = Navigating | TextInput | PostingSelectPopup | Terminated


class EditSession:
    """Interpret input events against a document and its focus."""

    def __init__(self, document: Document, focus: FocusTarget | None = None) -> None:
        if not document.transactions:
            raise ValueError("an edit session needs at least one transaction")
        self.document = document
        self.focus = cursor.initial_target(document) if focus is None else cursor.clamp(document, focus)
        self.mode: Mode = Navigating()
        self.status: str = ""

    @property
    def terminated(self) -> bool:
        return isinstance(self.mode, Terminated)

    def current_value(self) -> str | None:
        """Return the focused field's stored value, or None if not editable."""
        if not isinstance(self.focus.region, HeaderArea | MetadataArea | PostingArea):
            return None
        return self.document.field_value(self.focus)

    def feed(self, events: Iterable[Event]) -> None:
        for event in events:
            self.handle(event)

    def handle(self, event: Event) -> None:
        """Apply one input event according to the current mode."""
        if isinstance(self.mode, Terminated):
            return
        if event is Action.QUIT:
            self._set_mode(Terminated())
            return

        self.status = ""
        if isinstance(self.mode, Navigating):
            self._handle_navigating(event)
        elif isinstance(self.mode, TextInput):
            self._handle_text_input(self.mode, event)
        elif isinstance(self.mode, PostingSelectPopup):
            self._handle_popup(self.mode, event)

    def _set_mode(self, mode: Mode) -> None:
        logger.debug("mode %s -> %s", type(self.mode).__name__, type(mode).__name__)
        self.mode = mode

    def _handle_navigating(self, event: Event) -> None:
        if not isinstance(event, Action):
            return

        move = _NAVIGATION.get(event)
        if move is not None:
            self.focus = move(self.document, self.focus)
            logger.debug("focus -> %s", self.focus)
            return

        if event is Action.ENTER_EDIT:
            value = self.current_value()
            if value is None:
                self.status = "Nothing to edit here"
                return
            self._set_mode(TextInput(EditBuffer.seeded(value)))
        elif event is Action.ADD_POSTING:
            index = self.document.append_posting(self.focus.transaction)
            self.focus = FocusTarget(self.focus.transaction, PostingArea(index, Column.ACCOUNT))
            logger.debug("appended posting %d to transaction %d", index, self.focus.transaction)
        elif event is Action.OPEN_POPUP:
            self._open_popup()

    def _popup_options(self) -> tuple[str, ...]:
        region = self.focus.region
        if isinstance(region, HeaderArea):
            return FLAG_CHOICES if region.field is HeaderField.FLAG else ()
        if not isinstance(region, PostingArea):
            return ()
        if region.column is Column.ACCOUNT:
            return self.document.accounts
        if region.column is Column.CURRENCY:
            return self.document.currencies
        return ()

    def _open_popup(self) -> None:
        options = self._popup_options()
        if not options:
            self.status = "No choices for this field"
            return
        value = self.document.field_value(self.focus)
        selected = options.index(value) if value in options else 0
        self._set_mode(PostingSelectPopup(options=options, selected=selected))

    def _handle_text_input(self, mode: TextInput, event: Event) -> None:
        buffer = mode.buffer
        if isinstance(event, CharInput):
            buffer.insert(event.text)
            return

        if event is Action.CONFIRM:
            self._commit(buffer.text)
            self._set_mode(Navigating())
        elif event is Action.CANCEL:
            self._set_mode(Navigating())
        elif event is Action.BACKSPACE:
            buffer.backspace()
        elif event is Action.DELETE:
            buffer.delete()
        elif event is Action.CURSOR_LEFT:
            buffer.move(-1)
        elif event is Action.CURSOR_RIGHT:
            buffer.move(1)
        elif event is Action.CURSOR_HOME:
            buffer.home()
        elif event is Action.CURSOR_END:
            buffer.end()

    def _handle_popup(self, mode: PostingSelectPopup, event: Event) -> None:
        if event is Action.CONFIRM:
            self._commit(mode.current)
            self._set_mode(Navigating())
        elif event is Action.CANCEL:
            self._set_mode(Navigating())
        elif event is Action.NEXT_FIELD:
            self.mode = PostingSelectPopup(mode.options, min(mode.selected + 1, len(mode.options) - 1))
        elif event is Action.PREV_FIELD:
            self.mode = PostingSelectPopup(mode.options, max(mode.selected - 1, 0))

    def _commit(self, value: str) -> None:
        # InvalidTarget propagates: the focus/document relationship is broken.
        try:
            self.document.set_field_value(self.focus, value)
        except InvalidFieldValue as exc:
            logger.warning("Edit not applied: %s", exc)
            self.status = f"Edit not applied: {exc}"
            return
        logger.debug("committed %r at %s", value, self.focus)
