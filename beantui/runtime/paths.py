"""Centralized path management for beantui.

This module provides a single source of truth for configuration paths.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _get_config_root() -> Path:
    """Determine the configuration directory.

    BEANTUI_CONFIG_DIR wins, then $XDG_CONFIG_HOME/beantui, then ~/.config/beantui.
    """
    explicit = os.environ.get("BEANTUI_CONFIG_DIR")
    if explicit:
        return Path(explicit).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser() / "beantui"
    return Path("~/.config/beantui").expanduser()


@dataclass
class ProjectPaths:
    """Container for configuration paths."""

    config: Path = field(default_factory=_get_config_root)

    def __post_init__(self) -> None:
        self.config = self.config.resolve()

    @property
    def keymap(self) -> Path:
        """Key binding overrides TOML file."""
        return self.config / "keymap.toml"


# Module-level singleton
_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance.

    Returns:
        The global ProjectPaths instance.
    """
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths() -> None:
    """Forget the cached paths so environment changes are picked up."""
    global _paths
    _paths = None
