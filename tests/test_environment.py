"""Tests for specscope.environment."""

from __future__ import annotations

import pytest

from specscope.environment import (
    current_variables,
    load_variables,
    set_variable,
    toggle_variable,
    unset_variable,
)
from specscope.exceptions import NotFoundError
from specscope.models import EnvVariable
from specscope.storage import Storage, StorageKey


class TestVariables:
    def test_empty(self, store: Storage) -> None:
        assert load_variables(store) == []
        assert current_variables(store) == {}

    def test_set_appends_and_persists_shape(self, store: Storage) -> None:
        set_variable(store, "host", "https://api.dev")
        set_variable(store, "token", "t1")

        assert store.get(StorageKey.ENV) == {
            "variables": [
                {"key": "host", "value": "https://api.dev", "enabled": True},
                {"key": "token", "value": "t1", "enabled": True},
            ]
        }

    def test_set_existing_replaces_in_place_and_enables(self, store: Storage) -> None:
        set_variable(store, "a", "1")
        set_variable(store, "b", "2")
        toggle_variable(store, "a")

        set_variable(store, "a", "3")

        assert load_variables(store) == [
            EnvVariable(key="a", value="3", enabled=True),
            EnvVariable(key="b", value="2", enabled=True),
        ]

    def test_toggle_excludes_from_current(self, store: Storage) -> None:
        set_variable(store, "a", "1")
        set_variable(store, "b", "2")

        toggled = toggle_variable(store, "b")

        assert toggled.enabled is False
        assert current_variables(store) == {"a": "1"}
        assert toggle_variable(store, "b").enabled is True

    def test_unset(self, store: Storage) -> None:
        set_variable(store, "a", "1")
        unset_variable(store, "a")
        assert load_variables(store) == []

    def test_unknown_key_raises(self, store: Storage) -> None:
        with pytest.raises(NotFoundError):
            unset_variable(store, "nope")
        with pytest.raises(NotFoundError):
            toggle_variable(store, "nope")

    def test_invalid_entries_skipped(self, store: Storage) -> None:
        store.set(StorageKey.ENV, {"variables": [{"value": "no key"}, {"key": "ok"}]})
        assert load_variables(store) == [EnvVariable(key="ok")]
