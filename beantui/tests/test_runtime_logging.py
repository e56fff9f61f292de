"""Tests for runtime logging while the editor owns the terminal."""

from __future__ import annotations

import io
import logging
import logging.handlers
from collections.abc import Iterator
from pathlib import Path

import pytest

from beantui.domain import Document, EditSession
from beantui.runtime import defer_terminal_logging, get_logger
from beantui.runtime.logging import LOGGER_NAMESPACE


@pytest.fixture
def terminal() -> Iterator[io.StringIO]:
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    root = logging.getLogger(LOGGER_NAMESPACE)
    root.addHandler(handler)
    yield stream
    root.removeHandler(handler)


def test_terminal_records_are_held_until_block_exits(terminal: io.StringIO) -> None:
    with defer_terminal_logging():
        get_logger("tests").warning("Edit not applied: not a number: 'x'")
        assert terminal.getvalue() == ""

    assert "Edit not applied" in terminal.getvalue()
    assert not any(
        isinstance(handler, logging.handlers.MemoryHandler)
        for handler in logging.getLogger(LOGGER_NAMESPACE).handlers
    )


def test_file_handler_keeps_writing_while_terminal_is_held(tmp_path: Path, terminal: io.StringIO) -> None:
    log_file = tmp_path / "beantui.log"
    handler = logging.FileHandler(log_file, encoding="utf-8")
    root = logging.getLogger(LOGGER_NAMESPACE)
    root.addHandler(handler)
    try:
        with defer_terminal_logging():
            get_logger("tests").warning("written straight to file")
            handler.flush()
            assert "written straight to file" in log_file.read_text(encoding="utf-8")
            assert terminal.getvalue() == ""
    finally:
        root.removeHandler(handler)
        handler.close()


def test_run_session_holds_terminal_logging(
    monkeypatch: pytest.MonkeyPatch, document: Document, terminal: io.StringIO
) -> None:
    from beantui.tui import app

    seen: list[str] = []

    class _App:
        def run(self) -> None:
            get_logger("tests").warning("mid-session warning")
            seen.append(terminal.getvalue())

    monkeypatch.setattr(app, "build_application", lambda session, keymap: _App())

    app.run_session(EditSession(document))

    assert seen == [""]
    assert "mid-session warning" in terminal.getvalue()
