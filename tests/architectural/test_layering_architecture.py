"""Architectural tests for package layering.

Static, AST-based checks: nothing under uatdoc/ is imported or executed.
Generation logic and models must stay independent of the web framework so
they can run over any route table snapshot.
"""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Iterable, List, Set

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[2]
PACKAGE_DIR = PROJECT_ROOT / "uatdoc"

FRAMEWORK_PACKAGES = {"fastapi", "starlette"}
FRAMEWORK_FREE_DIRS = ["models", "logic", "presentation"]


def _python_files(directory: Path) -> List[Path]:
    return sorted(p for p in directory.rglob("*.py") if p.is_file())


def _parse(path: Path) -> ast.AST:
    try:
        return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    except SyntaxError as exc:
        pytest.fail(f"Failed to parse {path}: {exc}")


def _imported_roots(tree: ast.AST) -> Set[str]:
    roots: Set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            roots.update(alias.name.split(".")[0] for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            roots.add(node.module.split(".")[0])
    return roots


def _imported_modules(tree: ast.AST) -> Iterable[str]:
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield alias.name
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            yield node.module


@pytest.mark.parametrize("subdir", FRAMEWORK_FREE_DIRS)
def test_core_layers_do_not_import_web_framework(subdir):
    offenders = []
    for path in _python_files(PACKAGE_DIR / subdir):
        leaked = _imported_roots(_parse(path)) & FRAMEWORK_PACKAGES
        if leaked:
            offenders.append(f"{path.relative_to(PROJECT_ROOT)}: {sorted(leaked)}")
    assert not offenders, "Framework imports found:\n" + "\n".join(offenders)


def test_models_do_not_depend_on_logic_or_rendering():
    offenders = []
    for path in _python_files(PACKAGE_DIR / "models"):
        for name in _imported_modules(_parse(path)):
            if name.startswith(("uatdoc.logic", "uatdoc.presentation", "uatdoc.http")):
                offenders.append(f"{path.relative_to(PROJECT_ROOT)} imports {name}")
    assert not offenders, "\n".join(offenders)


def test_renderers_do_not_reach_into_logic():
    offenders = []
    for path in _python_files(PACKAGE_DIR / "presentation"):
        for name in _imported_modules(_parse(path)):
            if name.startswith(("uatdoc.logic", "uatdoc.http")):
                offenders.append(f"{path.relative_to(PROJECT_ROOT)} imports {name}")
    assert not offenders, "\n".join(offenders)


def test_no_bare_except_in_package():
    offenders = []
    for path in _python_files(PACKAGE_DIR):
        for node in ast.walk(_parse(path)):
            if isinstance(node, ast.ExceptHandler) and node.type is None:
                offenders.append(f"{path.relative_to(PROJECT_ROOT)}:{node.lineno}")
    assert not offenders, "Bare except clauses:\n" + "\n".join(offenders)


def test_modules_use_named_loggers():
    """Loggers come from getLogger(__name__) so they nest under `uatdoc`."""
    offenders = []
    for path in _python_files(PACKAGE_DIR):
        for node in ast.walk(_parse(path)):
            if (
                isinstance(node, ast.Call)
                and isinstance(node.func, ast.Attribute)
                and node.func.attr == "getLogger"
                and isinstance(node.func.value, ast.Name)
                and node.func.value.id == "logging"
            ):
                args = node.args
                if args and not (isinstance(args[0], ast.Name) and args[0].id == "__name__"):
                    if not (isinstance(args[0], ast.Constant) and str(args[0].value).startswith("uatdoc")):
                        offenders.append(f"{path.relative_to(PROJECT_ROOT)}:{node.lineno}")
    assert not offenders, "\n".join(offenders)
