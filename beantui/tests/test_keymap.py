"""Tests for translating key presses into session events."""

from __future__ import annotations

import pytest

from beantui.domain import Action, CharInput, EditBuffer, Navigating, PostingSelectPopup, Terminated, TextInput
from beantui.tui.keymap import Keymap, parse_action

NAV = Navigating()
TYPING = TextInput(EditBuffer())
POPUP = PostingSelectPopup(options=("CAD", "USD"))


@pytest.mark.parametrize("key", ["c-d", "c-f", "c-n", "c-l"])
def test_next_transaction_hotkeys(key: str) -> None:
    assert Keymap.default().resolve(NAV, key) is Action.NEXT_TRANSACTION


@pytest.mark.parametrize("key", ["c-u", "c-b", "c-p", "c-h"])
def test_previous_transaction_hotkeys(key: str) -> None:
    assert Keymap.default().resolve(NAV, key) is Action.PREV_TRANSACTION


def test_same_key_means_different_things_per_mode() -> None:
    keymap = Keymap.default()
    assert keymap.resolve(NAV, "escape") is Action.QUIT
    assert keymap.resolve(TYPING, "escape") is Action.CANCEL
    assert keymap.resolve(POPUP, "escape") is Action.CANCEL
    assert keymap.resolve(NAV, "c-m") is Action.ENTER_EDIT
    assert keymap.resolve(TYPING, "c-m") is Action.CONFIRM
    assert keymap.resolve(TYPING, "c-h") is Action.BACKSPACE


def test_printable_keys_become_characters_only_while_typing() -> None:
    keymap = Keymap.default()
    assert keymap.resolve(TYPING, "q") == CharInput("q")
    assert keymap.resolve(TYPING, " ") == CharInput(" ")
    assert keymap.resolve(NAV, "z") is None
    assert keymap.resolve(POPUP, "z") is None


def test_bracketed_paste_is_flattened_to_one_line() -> None:
    event = Keymap.default().resolve(TYPING, "<bracketed-paste>", "Assets:\nCash")
    assert event == CharInput("Assets: Cash")


def test_ctrl_c_quits_everywhere_and_terminated_ignores_keys() -> None:
    keymap = Keymap.default()
    for mode in (NAV, TYPING, POPUP):
        assert keymap.resolve(mode, "c-c") is Action.QUIT
    assert keymap.resolve(Terminated(), "c-c") is None


def test_overrides_replace_and_extend_tables() -> None:
    keymap = Keymap.default().with_overrides({"navigating": (("x", "quit"), ("c-d", "add_posting"))})

    assert keymap.resolve(NAV, "x") is Action.QUIT
    assert keymap.resolve(NAV, "c-d") is Action.ADD_POSTING
    assert Keymap.default().resolve(NAV, "c-d") is Action.NEXT_TRANSACTION


def test_unknown_action_name_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown action"):
        parse_action("teleport")


@pytest.mark.parametrize("key", ["c-t", "t"])
def test_header_hotkeys(key: str) -> None:
    assert Keymap.default().resolve(NAV, key) is Action.FOCUS_HEADER
