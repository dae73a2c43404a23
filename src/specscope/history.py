"""Request history, newest first, persisted through :mod:`specscope.storage`.

Every sent request is recorded as a :class:`~specscope.models.HistoryEntry`
holding the prepared request and the captured response. The list is capped
at :attr:`~specscope.models.HistoryConfig.max_entries`; the oldest entries
are dropped first.
"""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import ValidationError

from specscope.exceptions import NotFoundError
from specscope.models import ApiResponse, HistoryEntry, HistoryRequest, PreparedRequest
from specscope.output import debug
from specscope.storage import Storage, StorageKey

DEFAULT_MAX_ENTRIES = 50


def list_history(storage: Storage) -> list[HistoryEntry]:
    """Stored entries, newest first. Entries that fail validation are skipped."""
    entries: list[HistoryEntry] = []
    for raw in storage.get_list(StorageKey.HISTORY):
        try:
            entries.append(HistoryEntry.model_validate(raw))
        except ValidationError as exc:
            debug(f"Skipping invalid history entry: {exc}")
    return entries


def get_history_entry(storage: Storage, entry_id: str) -> HistoryEntry:
    """Find an entry by id or by a unique id prefix.

    Raises:
        NotFoundError: If no entry, or more than one, matches.
    """
    entries = list_history(storage)
    for entry in entries:
        if entry.id == entry_id:
            return entry
    matches = [entry for entry in entries if entry.id.startswith(entry_id)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise NotFoundError(f"History id prefix '{entry_id}' is ambiguous")
    raise NotFoundError(f"No history entry with id '{entry_id}'")


def record(
    storage: Storage,
    prepared: PreparedRequest,
    response: ApiResponse,
    max_entries: int = DEFAULT_MAX_ENTRIES,
) -> HistoryEntry:
    """Create an entry for a sent request and add it to the history."""
    entry = HistoryEntry(
        id=str(uuid.uuid4()),
        timestamp=response.timestamp,
        method=prepared.method,
        url=prepared.url,
        path=prepared.path,
        status=response.status,
        time=response.time,
        request=HistoryRequest(headers=prepared.headers, body=prepared.body),
        response=response,
    )
    add_entry(storage, entry, max_entries)
    return entry


def add_entry(
    storage: Storage, entry: HistoryEntry, max_entries: int = DEFAULT_MAX_ENTRIES
) -> None:
    entries = [entry, *list_history(storage)][:max_entries]
    _save(storage, entries)


def remove_entry(storage: Storage, entry_id: str) -> Optional[HistoryEntry]:
    """Remove the entry with *entry_id*; returns it, or ``None`` if absent."""
    entries = list_history(storage)
    removed = next((entry for entry in entries if entry.id == entry_id), None)
    if removed is not None:
        _save(storage, [entry for entry in entries if entry.id != entry_id])
    return removed


def clear_history(storage: Storage) -> None:
    storage.set(StorageKey.HISTORY, [])


def _save(storage: Storage, entries: list[HistoryEntry]) -> None:
    storage.set(StorageKey.HISTORY, [entry.model_dump(mode="json") for entry in entries])
