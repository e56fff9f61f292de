"""Terminal adapter: key table, renderer and prompt_toolkit driver."""

from beantui.tui.keymap import Keymap, mode_name, parse_action
from beantui.tui.view import render

__all__ = [
    "Keymap",
    "mode_name",
    "parse_action",
    "render",
]
