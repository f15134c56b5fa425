"""Architectural fitness functions to enforce clean architecture principles.

These tests ensure the codebase keeps its layering: the core stays free of
SDKs and frameworks, and nothing at the repository root acts as a shim.
"""

import re
from pathlib import Path

ROOT = Path(__file__).parent.parent
PACKAGE_DIR = ROOT / "intent_relay"


def _imports_in(directory: Path, needles: tuple[str, ...]) -> list[Path]:
    violations = []
    for py_file in directory.rglob("*.py"):
        content = py_file.read_text()
        if any(needle in content for needle in needles):
            violations.append(py_file.relative_to(directory))
    return violations


def test_no_python_modules_at_root():
    """Only entry points and config files are allowed at the repository root."""
    allowed = {"setup.py", "conftest.py", "main.py", "__main__.py"}
    violations = [f.name for f in ROOT.glob("*.py") if f.name not in allowed]

    assert not violations, (
        f"Unexpected Python modules at root: {violations}\n\n"
        "Only entry points and config files allowed at root.\n"
        "Shared code must live inside the intent_relay/ package."
    )


def test_root_files_are_not_imported():
    """Root-level .py files must be leaf nodes (entry points), not shims."""
    violations = []
    for py_file in ROOT.glob("*.py"):
        module_name = py_file.stem
        if module_name in {"setup", "conftest"}:
            continue
        for src_file in PACKAGE_DIR.rglob("*.py"):
            content = src_file.read_text()
            for pattern in (rf"^from {module_name} import", rf"^import {module_name}\b"):
                if re.search(pattern, content, re.MULTILINE):
                    violations.append(f"{src_file.relative_to(ROOT)} imports from {py_file.name}")

    assert not violations, "Root-level files are being imported:\n" + "\n".join(violations)


def test_no_openai_in_core():
    """Core layer must not import the OpenAI SDK."""
    violations = _imports_in(PACKAGE_DIR / "core", ("import openai", "from openai"))
    assert not violations, f"Core layer imports OpenAI SDK: {violations}"


def test_no_langgraph_in_core():
    """The state machine framework belongs to the services layer."""
    violations = _imports_in(PACKAGE_DIR / "core", ("import langgraph", "from langgraph"))
    assert not violations, f"Core layer imports LangGraph: {violations}"


def test_services_do_not_import_cli():
    """Services must not depend on the presentation layer."""
    violations = _imports_in(
        PACKAGE_DIR / "services", ("from intent_relay.cli", "import intent_relay.cli")
    )
    assert not violations, f"Services import the CLI: {violations}"
