"""Shared test fixtures for specread.

Provides reusable fixtures for loading document fixtures, creating isolated
config environments, managing output state, and running CLI commands.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from specread.openapi import OpenAPI
from specread.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"

MINIMAL_DOCUMENT: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Minimal", "version": "1.0.0"},
    "paths": {},
    "components": {},
}


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_path() -> Path:
    """Path to the petstore fixture document."""
    return FIXTURES_DIR / "petstore.json"


@pytest.fixture
def petstore_raw(petstore_path: Path) -> dict[str, Any]:
    """Load the raw petstore document dict."""
    with open(petstore_path) as f:
        return json.load(f)


@pytest.fixture
def petstore_bytes(petstore_path: Path) -> bytes:
    """The petstore document as the raw bytes a loader would hand over."""
    return petstore_path.read_bytes()


@pytest.fixture
def petstore_document(petstore_bytes: bytes) -> OpenAPI:
    """The petstore document, decoded."""
    from specread.parser import decode_document

    return decode_document(petstore_bytes)


@pytest.fixture
def minimal_raw() -> dict[str, Any]:
    """A fresh copy of the smallest valid document (no paths, empty components)."""
    return copy.deepcopy(MINIMAL_DOCUMENT)


@pytest.fixture
def write_document(tmp_path: Path):
    """Return a helper that writes a document dict to a JSON file in tmp_path."""

    def _write(data: Any, name: str = "openapi.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write



@pytest.fixture
def items_chain():
    """Return a helper building a valid document of exactly *depth* nesting levels.

    The nesting is an ``items`` chain under ``components.schemas.Deep``; the
    root object is level 1 and the ``Deep`` schema level 4.
    """

    def _build(depth: int) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "string"}
        for _ in range(depth - 4):
            schema = {"type": "array", "items": schema}
        raw = copy.deepcopy(MINIMAL_DOCUMENT)
        raw["components"] = {"schemas": {"Deep": schema}}
        return raw

    return _build


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Clears all SPECREAD_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("specread.config._is_xdg_platform", lambda: True)

    for var in [
        "SPECREAD_MAX_DEPTH",
        "SPECREAD_STRICT_DEFAULT_RESPONSE",
        "SPECREAD_FORMAT",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a PLAIN-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Set up JSON output for tests that check JSON-formatted output.

    Installs a JSON-format OutputManager as the global output
    and resets it after the test completes.
    """
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
