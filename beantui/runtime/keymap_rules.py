"""Runtime loader for key binding overrides."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from beantui.runtime.paths import get_paths

KEYMAP_SECTIONS = ("navigating", "text_input", "popup")


@lru_cache(maxsize=4)
def load_keymap_overrides(config_path: str | None = None) -> dict[str, tuple[tuple[str, str], ...]]:
    """
    Load key binding overrides from keymap.toml.

    The file has one table per input mode, mapping key names (as
    prompt_toolkit spells them, e.g. "c-d", "s-tab", "x") to action names:

        [navigating]
        "c-x" = "quit"
        "n" = "next_transaction"

    Args:
        config_path: Optional TOML path override. If None, uses the default config path.

    Returns:
        Mapping of mode name to (key, action name) pairs, preserving file order.
        Empty when the file does not exist.
    """
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    path = Path(config_path) if config_path is not None else get_paths().keymap
    if not path.exists():
        return {}

    with open(path, "rb") as f:
        config = tomllib.load(f)

    overrides: dict[str, tuple[tuple[str, str], ...]] = {}
    for section, table in config.items():
        if section not in KEYMAP_SECTIONS:
            raise ValueError(f"Unknown keymap section [{section}] in {path}")
        if not isinstance(table, dict):
            raise ValueError(f"Keymap section [{section}] in {path} must be a table")
        pairs: list[tuple[str, str]] = []
        for key, action in table.items():
            key_name = str(key).strip()
            action_name = str(action).strip().lower()
            if key_name and action_name:
                pairs.append((key_name, action_name))
        overrides[section] = tuple(pairs)

    return overrides
