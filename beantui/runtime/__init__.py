"""Runtime infrastructure for beantui.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Key binding overrides via load_keymap_overrides()

Usage:
    from beantui.runtime import get_logger, get_paths

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.config, paths.keymap)
"""

from beantui.runtime.keymap_rules import KEYMAP_SECTIONS, load_keymap_overrides
from beantui.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    defer_terminal_logging,
    get_logger,
    set_log_level,
)
from beantui.runtime.paths import ProjectPaths, get_paths, reset_paths

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "defer_terminal_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Key bindings
    "KEYMAP_SECTIONS",
    "load_keymap_overrides",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
]
