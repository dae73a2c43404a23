"""Named base URL configurations.

A :class:`~specscope.models.BaseUrlConfig` lets the user point requests at
another server (staging, a local mock) without editing the spec. At most
one configuration is active; while one is, its URL replaces the base URL
derived from the spec when requests are sent.
"""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import ValidationError

from specscope.exceptions import NotFoundError
from specscope.models import BaseUrlConfig
from specscope.output import debug
from specscope.storage import Storage, StorageKey

DEFAULT_COLOR = "#6b7280"


def list_base_urls(storage: Storage) -> list[BaseUrlConfig]:
    configs: list[BaseUrlConfig] = []
    for raw in storage.get_list(StorageKey.BASE_URLS):
        try:
            configs.append(BaseUrlConfig.model_validate(raw))
        except ValidationError as exc:
            debug(f"Skipping invalid base URL config: {exc}")
    return configs


def find_base_url(storage: Storage, ref: str) -> BaseUrlConfig:
    """Look a configuration up by id, then by label.

    Raises:
        NotFoundError: If neither matches.
    """
    configs = list_base_urls(storage)
    for config in configs:
        if config.id == ref:
            return config
    for config in configs:
        if config.label == ref:
            return config
    raise NotFoundError(f"No base URL with id or label '{ref}'")


def add_base_url(
    storage: Storage, label: str, url: str, color: str = DEFAULT_COLOR
) -> BaseUrlConfig:
    """Store a new configuration under a freshly generated UUID."""
    config = BaseUrlConfig(id=str(uuid.uuid4()), label=label, url=url, color=color)
    _save(storage, [*list_base_urls(storage), config])
    return config


def update_base_url(
    storage: Storage,
    config_id: str,
    label: Optional[str] = None,
    url: Optional[str] = None,
    color: Optional[str] = None,
) -> BaseUrlConfig:
    """Change the given fields of a configuration; its id never changes.

    Raises:
        NotFoundError: If *config_id* is unknown.
    """
    updates = {
        key: value
        for key, value in (("label", label), ("url", url), ("color", color))
        if value is not None
    }
    configs = list_base_urls(storage)
    updated: Optional[BaseUrlConfig] = None
    for index, config in enumerate(configs):
        if config.id == config_id:
            updated = config.model_copy(update=updates)
            configs[index] = updated
    if updated is None:
        raise NotFoundError(f"No base URL with id '{config_id}'")
    _save(storage, configs)
    return updated


def remove_base_url(storage: Storage, config_id: str) -> None:
    """Remove a configuration; removing the active one clears the selection."""
    configs = list_base_urls(storage)
    _save(storage, [config for config in configs if config.id != config_id])
    if storage.get_active_base_url_id() == config_id:
        storage.set_active_base_url_id(None)


def set_active(storage: Storage, config_id: Optional[str]) -> None:
    """Make *config_id* the active configuration, or clear it with ``None``."""
    storage.set_active_base_url_id(config_id)


def active_base_url(storage: Storage) -> Optional[BaseUrlConfig]:
    """The active configuration, or ``None`` if unset or dangling."""
    active_id = storage.get_active_base_url_id()
    if not active_id:
        return None
    return next((c for c in list_base_urls(storage) if c.id == active_id), None)


def effective_base_url(storage: Storage, spec_base_url: str) -> str:
    """The active configuration's URL, else *spec_base_url*."""
    active = active_base_url(storage)
    return active.url if active is not None else spec_base_url


def _save(storage: Storage, configs: list[BaseUrlConfig]) -> None:
    storage.set(StorageKey.BASE_URLS, [config.model_dump(mode="json") for config in configs])
