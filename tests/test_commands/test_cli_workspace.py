"""CLI tests for the env, auth, baseurl and specs command groups."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from specscope.app import app


def _run(runner: CliRunner, *args: str, input: str | None = None):
    return runner.invoke(app, ["--no-color", *args], input=input)


def _json(runner: CliRunner, *args: str):
    result = _run(runner, "--json", *args)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


@pytest.fixture
def runner(isolated_config: Path, cli_runner: CliRunner) -> CliRunner:
    return cli_runner


@pytest.fixture
def loaded(runner: CliRunner, petstore_30_path: Path) -> CliRunner:
    result = _run(runner, "load", str(petstore_30_path))
    assert result.exit_code == 0, result.output
    return runner


class TestEnv:
    def test_set_and_list(self, runner: CliRunner) -> None:
        result = _run(runner, "env", "set", "host", "https://api.dev")
        assert result.exit_code == 0
        assert "Set {{host}}" in result.output

        assert _json(runner, "env", "list") == [
            {"key": "host", "value": "https://api.dev", "enabled": True}
        ]

    def test_plain_list(self, runner: CliRunner) -> None:
        _run(runner, "env", "set", "token", "t1")
        lines = _run(runner, "env", "list").stdout.splitlines()
        assert lines == ["Key\tValue\tEnabled", "token\tt1\tyes"]

    def test_empty_list(self, runner: CliRunner) -> None:
        assert "No variables defined" in _run(runner, "env", "list").output

    def test_invalid_name(self, runner: CliRunner) -> None:
        result = _run(runner, "env", "set", "bad-name", "x")
        assert result.exit_code == 2
        assert "Invalid variable name 'bad-name'" in result.output

    def test_toggle_and_unset(self, runner: CliRunner) -> None:
        _run(runner, "env", "set", "token", "t1")

        assert "token disabled" in _run(runner, "env", "toggle", "token").output
        assert _json(runner, "env", "list")[0]["enabled"] is False

        assert _run(runner, "env", "unset", "token").exit_code == 0
        assert _json(runner, "env", "list") == []

    def test_unknown_variable(self, runner: CliRunner) -> None:
        assert _run(runner, "env", "unset", "nope").exit_code == 4
        assert _run(runner, "env", "toggle", "nope").exit_code == 4

    def test_show_user_variable(self, runner: CliRunner) -> None:
        _run(runner, "env", "set", "host", "https://api.dev")

        assert _json(runner, "env", "show", "host") == {
            "key": "host",
            "value": "https://api.dev",
            "is_built_in": False,
        }

    def test_show_built_in(self, runner: CliRunner) -> None:
        data = _json(runner, "env", "show", "$date")

        assert data["is_built_in"] is True
        assert data["description"] == "Today's date (YYYY-MM-DD)"
        assert len(data["value"]) == 10

    def test_show_plain(self, runner: CliRunner) -> None:
        _run(runner, "env", "set", "token", "t1")
        lines = _run(runner, "env", "show", "token").stdout.splitlines()
        assert lines == ["Field\tValue", "Key\ttoken", "Value\tt1", "Source\tenvironment"]

    def test_show_disabled_or_unknown(self, runner: CliRunner) -> None:
        _run(runner, "env", "set", "token", "t1")
        _run(runner, "env", "toggle", "token")

        result = _run(runner, "env", "show", "token")

        assert result.exit_code == 4
        assert "No enabled variable or built-in named 'token'" in result.output
        assert _run(runner, "env", "show", "nope").exit_code == 4

    def test_builtins(self, runner: CliRunner) -> None:
        data = _json(runner, "env", "builtins")
        assert len(data) == 8
        assert data[0] == {
            "key": "$timestamp",
            "description": "Current Unix timestamp in milliseconds",
        }


class TestAuth:
    def test_default_is_none(self, runner: CliRunner) -> None:
        assert _json(runner, "auth", "show") == {"type": "none"}

    def test_bearer_masked(self, runner: CliRunner) -> None:
        assert _run(runner, "auth", "bearer", "abcdefgh").exit_code == 0

        assert _json(runner, "auth", "show") == {"type": "bearer", "token": "****efgh"}
        assert _json(runner, "auth", "show", "--reveal")["token"] == "abcdefgh"

    def test_api_key(self, runner: CliRunner) -> None:
        result = _run(runner, "auth", "api-key", "api_key", "k123456", "--in", "query")
        assert "API key auth enabled (query 'api_key')" in result.output

        assert _json(runner, "auth", "show") == {
            "type": "apiKey",
            "name": "api_key",
            "value": "***3456",
            "in": "query",
        }

    def test_api_key_bad_location(self, runner: CliRunner) -> None:
        result = _run(runner, "auth", "api-key", "X-Key", "v", "--in", "cookie")
        assert result.exit_code == 2

    def test_basic_with_prompt(self, runner: CliRunner) -> None:
        result = _run(runner, "auth", "basic", "ann", input="pw\n")
        assert result.exit_code == 0, result.output

        assert _json(runner, "auth", "show", "--reveal") == {
            "type": "basic",
            "username": "ann",
            "password": "pw",
        }

    def test_clear_keeps_values(self, runner: CliRunner) -> None:
        _run(runner, "auth", "bearer", "tok")
        _run(runner, "auth", "clear")
        assert _json(runner, "auth", "show") == {"type": "none"}

        _run(runner, "auth", "api-key", "X-Key", "v")
        _run(runner, "auth", "clear")
        _run(runner, "auth", "bearer", "tok2")
        assert _json(runner, "auth", "show", "--reveal")["token"] == "tok2"


class TestBaseUrl:
    def test_add_use_and_info(self, loaded: CliRunner) -> None:
        result = _run(loaded, "baseurl", "add", "mock", "http://localhost:4010", "--use")
        assert result.exit_code == 0
        assert "and made it active" in result.output

        configs = _json(loaded, "baseurl", "list")
        assert len(configs) == 1
        assert configs[0]["label"] == "mock"
        assert configs[0]["active"] is True

        info = _json(loaded, "info")
        assert info["base_url"] == "http://localhost:4010"
        assert info["spec_base_url"] == "https://api.petstore.example/v1"

    def test_use_spec_clears(self, loaded: CliRunner) -> None:
        _run(loaded, "baseurl", "add", "mock", "http://localhost:4010", "--use")

        assert "Using the spec's base URL" in _run(loaded, "baseurl", "use", "--spec").output
        assert _json(loaded, "info")["base_url"] == "https://api.petstore.example/v1"

        _run(loaded, "baseurl", "use", "mock")
        assert _json(loaded, "baseurl", "list")[0]["active"] is True

    def test_rejects_non_http(self, runner: CliRunner) -> None:
        result = _run(runner, "baseurl", "add", "ftp", "ftp://files.example.com")
        assert result.exit_code == 2

    def test_update(self, runner: CliRunner) -> None:
        _run(runner, "baseurl", "add", "staging", "https://staging.example.com")

        result = _run(runner, "baseurl", "update", "staging", "--url", "https://stage2.example.com")

        assert result.exit_code == 0
        assert _json(runner, "baseurl", "list")[0]["url"] == "https://stage2.example.com"

    def test_plain_list_marks_active(self, runner: CliRunner) -> None:
        _run(runner, "baseurl", "add", "a", "https://a.example.com", "--use")
        _run(runner, "baseurl", "add", "b", "https://b.example.com")

        rows = _run(runner, "baseurl", "list").stdout.splitlines()[1:]

        assert rows[0].startswith("*\t")
        assert rows[1].startswith("\t")

    def test_remove(self, runner: CliRunner) -> None:
        _run(runner, "baseurl", "add", "a", "https://a.example.com", "--use")

        assert _run(runner, "baseurl", "remove", "a").exit_code == 0
        assert "No base URLs" in _run(runner, "baseurl", "list").output
        assert _run(runner, "baseurl", "remove", "a").exit_code == 4


class TestSpecs:
    def test_save_requires_loaded_spec(self, runner: CliRunner) -> None:
        result = _run(runner, "specs", "save", "pets")
        assert result.exit_code == 4

    def test_save_list_rename_remove(self, loaded: CliRunner) -> None:
        assert "Saved 'pets'" in _run(loaded, "specs", "save", "pets").output

        saved = _json(loaded, "specs", "list")
        assert len(saved) == 1
        assert saved[0]["label"] == "pets"
        assert "spec" not in saved[0]

        assert _run(loaded, "specs", "rename", "pets", "petstore").exit_code == 0
        assert _json(loaded, "specs", "list")[0]["label"] == "petstore"

        assert "Removed 'petstore'" in _run(loaded, "specs", "remove", "petstore").output
        assert _json(loaded, "specs", "list") == []

    def test_open_restores_spec(self, loaded: CliRunner, isolated_config: Path) -> None:
        _run(loaded, "specs", "save", "pets")
        (isolated_config / "other.json").write_text(
            '{"swagger": "2.0", "info": {"title": "Other"}, "paths": {}}', encoding="utf-8"
        )
        _run(loaded, "load", "other.json")
        assert _json(loaded, "info")["title"] == "Other"

        result = _run(loaded, "specs", "open", "pets")

        assert result.exit_code == 0
        assert "Opened 'pets' (6 endpoints)" in result.output
        assert _json(loaded, "info")["title"] == "Swagger Petstore"

    def test_open_unknown(self, runner: CliRunner) -> None:
        assert _run(runner, "specs", "open", "nope").exit_code == 4

    def test_recent_empty(self, runner: CliRunner) -> None:
        assert "No recently loaded URLs." in _run(runner, "specs", "recent").output
