"""Disk-backed key-value store for the specscope workspace.

Uses :mod:`diskcache` to persist the user's workspace (environment
variables, auth settings, saved and recent specs, request history, base URL
configurations, draft request bodies) under the data directory.
Values are stored as JSON text, so everything written here must be
JSON-serialisable.

The store never raises. If the directory cannot be opened the store runs in
a disabled state, and any failing read or write is reported with
:func:`~specscope.output.debug` and degrades to ``None``, an empty
container, or ``False``.

See Also:
    :mod:`specscope.history` and :mod:`specscope.baseurls`, which build
    typed operations on top of this module.
"""

from __future__ import annotations

import enum
import json
import sqlite3
from pathlib import Path
from typing import Any, Optional

import diskcache

from specscope.output import debug

_STORE_ERRORS = (OSError, sqlite3.Error, diskcache.Timeout, TypeError, ValueError)


class StorageKey(str, enum.Enum):
    """The fixed set of workspace keys."""

    ENV = "specscope-env"
    AUTH = "specscope-auth"
    HISTORY = "specscope-history"
    RECENT_SPECS = "specscope-recent-specs"
    SAVED_SPECS = "specscope-saved-specs"
    LAST_SPEC = "specscope-last-spec"
    REQUEST_BODIES = "specscope-request-bodies"
    BASE_URLS = "specscope-base-urls"
    ACTIVE_BASE_URL = "specscope-active-base-url"


class Storage:
    """JSON key-value store over a :class:`diskcache.Cache` directory.

    Args:
        directory: Where the cache lives. A ``workspace/`` subdirectory is
            created inside it.

    Example::

        store = Storage(get_data_dir())
        store.set(StorageKey.RECENT_SPECS, ["https://api.example.com/openapi.json"])
        store.get(StorageKey.RECENT_SPECS)
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory) / "workspace"
        self._cache: Optional[diskcache.Cache] = None
        try:
            self._cache = diskcache.Cache(str(self._directory))
        except _STORE_ERRORS as exc:
            debug(f"Workspace storage unavailable at {self._directory}: {exc}")

    @property
    def available(self) -> bool:
        return self._cache is not None

    # ------------------------------------------------------------------ #
    # Raw access
    # ------------------------------------------------------------------ #

    def get(self, key: StorageKey) -> Any:
        """Return the decoded value stored under *key*, or ``None``."""
        if self._cache is None:
            return None
        try:
            raw = self._cache.get(key.value)
            if raw is None:
                return None
            return json.loads(raw)
        except _STORE_ERRORS as exc:
            debug(f"Error reading storage key {key.value!r}: {exc}")
            return None

    def set(self, key: StorageKey, value: Any) -> bool:
        """Store *value* as JSON under *key*. Returns ``False`` on failure."""
        if self._cache is None:
            return False
        try:
            self._cache.set(key.value, json.dumps(value))
            return True
        except _STORE_ERRORS as exc:
            debug(f"Error writing storage key {key.value!r}: {exc}")
            return False

    def remove(self, key: StorageKey) -> bool:
        if self._cache is None:
            return False
        try:
            self._cache.delete(key.value)
            return True
        except _STORE_ERRORS as exc:
            debug(f"Error removing storage key {key.value!r}: {exc}")
            return False

    def clear(self) -> bool:
        """Remove every workspace key."""
        if self._cache is None:
            return False
        try:
            for key in StorageKey:
                self._cache.delete(key.value)
            return True
        except _STORE_ERRORS as exc:
            debug(f"Error clearing storage: {exc}")
            return False

    def close(self) -> None:
        if self._cache is not None:
            self._cache.close()

    # ------------------------------------------------------------------ #
    # Typed helpers
    # ------------------------------------------------------------------ #

    def get_list(self, key: StorageKey) -> list[Any]:
        value = self.get(key)
        return value if isinstance(value, list) else []

    def get_dict(self, key: StorageKey) -> dict[str, Any]:
        value = self.get(key)
        return value if isinstance(value, dict) else {}

    def add_recent_spec(self, url: str, limit: int = 10) -> list[str]:
        """Move *url* to the front of the recent list, keeping at most *limit*."""
        recent = [u for u in self.get_list(StorageKey.RECENT_SPECS) if u != url]
        recent = [url, *recent][:limit]
        self.set(StorageKey.RECENT_SPECS, recent)
        return recent

    def add_saved_spec(self, spec: dict[str, Any]) -> None:
        self.set(StorageKey.SAVED_SPECS, [*self.get_list(StorageKey.SAVED_SPECS), spec])

    def remove_saved_spec(self, spec_id: str) -> None:
        specs = self.get_list(StorageKey.SAVED_SPECS)
        kept = [s for s in specs if isinstance(s, dict) and s.get("id") != spec_id]
        self.set(StorageKey.SAVED_SPECS, kept)

    def update_saved_spec(self, spec_id: str, updates: dict[str, Any]) -> None:
        specs = self.get_list(StorageKey.SAVED_SPECS)
        updated = [
            {**s, **updates} if isinstance(s, dict) and s.get("id") == spec_id else s
            for s in specs
        ]
        self.set(StorageKey.SAVED_SPECS, updated)

    def get_request_body(self, endpoint_id: str) -> Optional[str]:
        """The saved draft body for *endpoint_id*; an empty draft counts as none."""
        return self.get_dict(StorageKey.REQUEST_BODIES).get(endpoint_id) or None

    def set_request_body(self, endpoint_id: str, body: str) -> None:
        bodies = self.get_dict(StorageKey.REQUEST_BODIES)
        bodies[endpoint_id] = body
        self.set(StorageKey.REQUEST_BODIES, bodies)

    def clear_request_body(self, endpoint_id: str) -> None:
        bodies = self.get_dict(StorageKey.REQUEST_BODIES)
        bodies.pop(endpoint_id, None)
        self.set(StorageKey.REQUEST_BODIES, bodies)

    def get_active_base_url_id(self) -> Optional[str]:
        value = self.get(StorageKey.ACTIVE_BASE_URL)
        return value if isinstance(value, str) else None

    def set_active_base_url_id(self, config_id: Optional[str]) -> None:
        """Mark *config_id* active; ``None`` clears the active entry."""
        if config_id:
            self.set(StorageKey.ACTIVE_BASE_URL, config_id)
        else:
            self.remove(StorageKey.ACTIVE_BASE_URL)


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #

_storage: Optional[Storage] = None


def get_storage() -> Storage:
    """Get the global store, opening it in the data directory on first use."""
    global _storage
    if _storage is None:
        from specscope.config import get_data_dir

        _storage = Storage(get_data_dir())
    return _storage


def set_storage(storage: Storage) -> None:
    global _storage
    _storage = storage


def reset_storage() -> None:
    """Close and drop the global store (for testing)."""
    global _storage
    if _storage is not None:
        _storage.close()
    _storage = None
