"""Tests for loading key binding overrides from TOML."""

from __future__ import annotations

from pathlib import Path

import pytest

from beantui.runtime import get_paths, load_keymap_overrides, reset_paths


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def test_overrides_preserve_file_order(tmp_path: Path) -> None:
    config = tmp_path / "keymap.toml"
    _write(
        config,
        """
[navigating]
"x" = "quit"
"n" = "Next_Transaction"

[text_input]
"c-s" = "confirm"
""".lstrip(),
    )

    overrides = load_keymap_overrides(str(config))

    assert overrides == {
        "navigating": (("x", "quit"), ("n", "next_transaction")),
        "text_input": (("c-s", "confirm"),),
    }


def test_missing_file_means_no_overrides(tmp_path: Path) -> None:
    assert load_keymap_overrides(str(tmp_path / "absent.toml")) == {}


def test_unknown_section_is_rejected(tmp_path: Path) -> None:
    config = tmp_path / "bad.toml"
    _write(config, '[insert]\n"x" = "quit"\n')

    with pytest.raises(ValueError, match="Unknown keymap section"):
        load_keymap_overrides(str(config))


def test_config_dir_follows_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BEANTUI_CONFIG_DIR", str(tmp_path / "cfg"))
    reset_paths()
    try:
        assert get_paths().keymap == (tmp_path / "cfg" / "keymap.toml").resolve()
    finally:
        reset_paths()


def test_xdg_config_home_is_used(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BEANTUI_CONFIG_DIR", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    reset_paths()
    try:
        assert get_paths().config == (tmp_path / "beantui").resolve()
    finally:
        reset_paths()
