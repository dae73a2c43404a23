"""Shared test fixtures for specscope.

Provides reusable fixtures for loading spec fixtures, isolating the config
and data directories, managing output and storage state, and running CLI
commands. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from specscope.models import ParsedSpec
from specscope.output import OutputFormat, OutputManager, reset_output, set_output
from specscope.storage import Storage, reset_storage

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_globals_between_tests() -> None:
    """Reset the global OutputManager and Storage after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, and the global Storage holds an open diskcache
    directory under the (per-test) data directory. Resetting both forces
    fresh instances on next use.
    """
    yield
    reset_output()
    reset_storage()


# ---------------------------------------------------------------------------
# Raw spec fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_30_raw() -> dict[str, Any]:
    """Load raw petstore 3.0 spec dict."""
    with open(FIXTURES_DIR / "petstore_3.0.json") as f:
        return json.load(f)


@pytest.fixture
def swagger_20_raw() -> dict[str, Any]:
    """Load raw Swagger 2.0 petstore spec dict."""
    with open(FIXTURES_DIR / "swagger_2.0.json") as f:
        return json.load(f)


@pytest.fixture
def petstore_30_path() -> Path:
    return FIXTURES_DIR / "petstore_3.0.json"


# ---------------------------------------------------------------------------
# Parsed spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_spec(petstore_30_raw: dict[str, Any]) -> ParsedSpec:
    """Parsed petstore 3.0 spec."""
    from specscope.parser.pipeline import parse_spec

    return parse_spec(petstore_30_raw)


@pytest.fixture
def swagger_spec(swagger_20_raw: dict[str, Any]) -> ParsedSpec:
    """Parsed Swagger 2.0 petstore spec."""
    from specscope.parser.pipeline import parse_spec

    return parse_spec(swagger_20_raw)


# ---------------------------------------------------------------------------
# Config and storage isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration and data to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config or the real workspace store. Clears all SPECSCOPE_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["SPECSCOPE_FORMAT", "SPECSCOPE_FETCH_TIMEOUT", "SPECSCOPE_BASE_URL"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def store(tmp_path: Path) -> Storage:
    """A Storage in its own temporary directory, closed after the test."""
    storage = Storage(tmp_path / "store")
    yield storage
    storage.close()


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner capturing stdout and stderr."""
    from typer.testing import CliRunner

    return CliRunner()
