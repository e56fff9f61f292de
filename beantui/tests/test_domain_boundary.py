"""Architecture boundary checks: the editing core stays pure."""

from __future__ import annotations

import ast
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
_FORBIDDEN_FROM_DOMAIN = ("beantui.runtime", "beantui.tui", "beantui.cli", "beantui.ledger_reader", "prompt_toolkit")


def _imports(path: Path) -> list[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    result: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                result.append(alias.name)
        elif isinstance(node, ast.ImportFrom):
            base = "." * node.level + (node.module or "")
            result.append(base)
    return result


def test_domain_does_not_import_io_or_terminal_layers() -> None:
    violations: list[str] = []
    for path in sorted((_ROOT / "domain").rglob("*.py")):
        for mod in _imports(path):
            if any(mod == banned or mod.startswith(f"{banned}.") for banned in _FORBIDDEN_FROM_DOMAIN):
                violations.append(f"{path.relative_to(_ROOT)}: {mod}")
    assert not violations, "Domain import violations:\n" + "\n".join(violations)


def test_only_tui_app_imports_prompt_toolkit() -> None:
    violations: list[str] = []
    for path in sorted(_ROOT.rglob("*.py")):
        if path.relative_to(_ROOT).parts[0] == "tests" or path == _ROOT / "tui" / "app.py":
            continue
        for mod in _imports(path):
            if mod == "prompt_toolkit" or mod.startswith("prompt_toolkit."):
                violations.append(f"{path.relative_to(_ROOT)}: {mod}")
    assert not violations, "prompt_toolkit used outside tui/app.py:\n" + "\n".join(violations)
