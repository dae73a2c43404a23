"""The current spec, saved specs, and recently loaded sources.

Only raw documents are stored. Every command that needs endpoints re-runs
:func:`~specscope.parser.pipeline.parse_spec` on the stored document, so a
stored spec always reflects the current parser.
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Optional

from pydantic import ValidationError

from specscope.exceptions import NotFoundError
from specscope.models import LastSpec, ParsedSpec, SavedSpec
from specscope.output import debug
from specscope.parser.loader import is_url
from specscope.parser.pipeline import parse_spec
from specscope.storage import Storage, StorageKey

DEFAULT_RECENT_LIMIT = 10


def remember_spec(
    storage: Storage,
    document: dict[str, Any],
    source: str,
    parsed: ParsedSpec,
    recent_limit: int = DEFAULT_RECENT_LIMIT,
) -> None:
    """Make *document* the current spec; remote sources join the recent list."""
    last = LastSpec(spec=document, source=source, base_url=parsed.base_url)
    storage.set(StorageKey.LAST_SPEC, last.model_dump(mode="json"))
    if is_url(source):
        storage.add_recent_spec(source, limit=recent_limit)


def load_last_spec(storage: Storage) -> Optional[LastSpec]:
    raw = storage.get(StorageKey.LAST_SPEC)
    if raw is None:
        return None
    try:
        return LastSpec.model_validate(raw)
    except ValidationError as exc:
        debug(f"Ignoring invalid stored spec: {exc}")
        return None


def current_spec(storage: Storage) -> ParsedSpec:
    """Parse the current spec.

    Raises:
        NotFoundError: If no spec has been loaded yet.
        InvalidSpecError: If the stored document no longer parses.
    """
    last = load_last_spec(storage)
    if last is None:
        raise NotFoundError("No spec loaded. Run 'specscope load <url-or-file>' first.")
    return parse_spec(last.spec, last.source if is_url(last.source) else "")


def clear_last_spec(storage: Storage) -> None:
    storage.remove(StorageKey.LAST_SPEC)


def recent_specs(storage: Storage) -> list[str]:
    return [url for url in storage.get_list(StorageKey.RECENT_SPECS) if isinstance(url, str)]


def list_saved_specs(storage: Storage) -> list[SavedSpec]:
    saved: list[SavedSpec] = []
    for raw in storage.get_list(StorageKey.SAVED_SPECS):
        try:
            saved.append(SavedSpec.model_validate(raw))
        except ValidationError as exc:
            debug(f"Skipping invalid saved spec: {exc}")
    return saved


def save_spec(storage: Storage, label: str, last: LastSpec) -> SavedSpec:
    """Bookmark *last* under *label*."""
    saved = SavedSpec(
        id=str(uuid.uuid4()),
        label=label,
        spec=last.spec,
        source=last.source,
        base_url=last.base_url,
        saved_at=int(time.time() * 1000),
    )
    storage.add_saved_spec(saved.model_dump(mode="json"))
    return saved


def find_saved_spec(storage: Storage, ref: str) -> SavedSpec:
    """Look a saved spec up by id, id prefix, or label.

    Raises:
        NotFoundError: If nothing matches or an id prefix is ambiguous.
    """
    saved = list_saved_specs(storage)
    for spec in saved:
        if spec.id == ref or spec.label == ref:
            return spec
    matches = [spec for spec in saved if spec.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise NotFoundError(f"Saved spec id prefix '{ref}' is ambiguous")
    raise NotFoundError(f"No saved spec with id or label '{ref}'")


def rename_saved_spec(storage: Storage, ref: str, label: str) -> SavedSpec:
    spec = find_saved_spec(storage, ref)
    storage.update_saved_spec(spec.id, {"label": label})
    return spec.model_copy(update={"label": label})


def remove_saved_spec(storage: Storage, ref: str) -> SavedSpec:
    spec = find_saved_spec(storage, ref)
    storage.remove_saved_spec(spec.id)
    return spec
