"""Physical key -> session event table.

Key names follow prompt_toolkit's spelling ("c-d", "s-tab", "escape") and
plain characters for letter keys. Tab is "c-i", Enter is "c-m" and Backspace
is "c-h", because that is what the terminal actually sends.
"""

from __future__ import annotations

from collections.abc import Mapping

from beantui.domain.session import (
    Action,
    CharInput,
    Event,
    Mode,
    Navigating,
    PostingSelectPopup,
    TextInput,
)

BRACKETED_PASTE = "<bracketed-paste>"

_NAVIGATING: dict[str, Action] = {
    # next transaction
    "c-d": Action.NEXT_TRANSACTION,
    "c-f": Action.NEXT_TRANSACTION,
    "c-n": Action.NEXT_TRANSACTION,
    "c-l": Action.NEXT_TRANSACTION,
    # previous transaction
    "c-u": Action.PREV_TRANSACTION,
    "c-b": Action.PREV_TRANSACTION,
    "c-p": Action.PREV_TRANSACTION,
    "c-h": Action.PREV_TRANSACTION,
    "c-i": Action.NEXT_FIELD,
    "j": Action.NEXT_FIELD,
    "down": Action.NEXT_FIELD,
    "s-tab": Action.PREV_FIELD,
    "k": Action.PREV_FIELD,
    "up": Action.PREV_FIELD,
    "c-j": Action.FOCUS_DOWN,
    "c-k": Action.FOCUS_UP,
    "c-t": Action.FOCUS_HEADER,
    "t": Action.FOCUS_HEADER,
    "a": Action.ADD_POSTING,
    "c-m": Action.ENTER_EDIT,
    "i": Action.ENTER_EDIT,
    " ": Action.OPEN_POPUP,
    "escape": Action.QUIT,
    "q": Action.QUIT,
    "c-c": Action.QUIT,
}

_TEXT_INPUT: dict[str, Action] = {
    "c-m": Action.CONFIRM,
    "escape": Action.CANCEL,
    "c-h": Action.BACKSPACE,
    "delete": Action.DELETE,
    "left": Action.CURSOR_LEFT,
    "right": Action.CURSOR_RIGHT,
    "home": Action.CURSOR_HOME,
    "c-a": Action.CURSOR_HOME,
    "end": Action.CURSOR_END,
    "c-e": Action.CURSOR_END,
    "c-c": Action.QUIT,
}

_POPUP: dict[str, Action] = {
    "down": Action.NEXT_FIELD,
    "j": Action.NEXT_FIELD,
    "c-i": Action.NEXT_FIELD,
    "c-n": Action.NEXT_FIELD,
    "up": Action.PREV_FIELD,
    "k": Action.PREV_FIELD,
    "s-tab": Action.PREV_FIELD,
    "c-p": Action.PREV_FIELD,
    "c-m": Action.CONFIRM,
    " ": Action.CONFIRM,
    "escape": Action.CANCEL,
    "q": Action.CANCEL,
    "c-c": Action.QUIT,
}


def mode_name(mode: Mode) -> str | None:
    """Return the keymap table name for a session mode."""
    if isinstance(mode, Navigating):
        return "navigating"
    if isinstance(mode, TextInput):
        return "text_input"
    if isinstance(mode, PostingSelectPopup):
        return "popup"
    return None


def parse_action(name: str) -> Action:
    try:
        return Action(name)
    except ValueError:
        known = ", ".join(action.value for action in Action)
        raise ValueError(f"Unknown action {name!r} (expected one of: {known})") from None


class Keymap:
    """Per-mode key tables with optional user overrides."""

    def __init__(self, tables: Mapping[str, Mapping[str, Action]]) -> None:
        self.tables = {name: dict(table) for name, table in tables.items()}

    @classmethod
    def default(cls) -> Keymap:
        return cls({"navigating": _NAVIGATING, "text_input": _TEXT_INPUT, "popup": _POPUP})

    def with_overrides(self, overrides: Mapping[str, tuple[tuple[str, str], ...]]) -> Keymap:
        tables = {name: dict(table) for name, table in self.tables.items()}
        for section, pairs in overrides.items():
            table = tables.setdefault(section, {})
            for key, action_name in pairs:
                table[key] = parse_action(action_name)
        return Keymap(tables)

    def resolve(self, mode: Mode, key: str, data: str = "") -> Event | None:
        """Translate one key press into a session event, or None to ignore it."""
        name = mode_name(mode)
        if name is None:
            return None
        action = self.tables.get(name, {}).get(key)
        if action is not None:
            return action
        if name != "text_input":
            return None
        if key == BRACKETED_PASTE:
            text = data.replace("\r", " ").replace("\n", " ")
            return CharInput(text) if text else None
        if len(key) == 1 and key.isprintable():
            return CharInput(key)
        return None
