"""Turn the workspace :class:`~specscope.models.AuthConfig` into headers and query params.

Only the block matching ``AuthConfig.type`` is applied:

* ``bearer`` -- ``Authorization: Bearer <token>`` when a token is set.
* ``apiKey`` -- ``<name>: <value>`` in the headers, or ``name=value`` in the
  query string, depending on ``in``; both name and value must be set.
* ``basic`` -- ``Authorization: Basic <base64(user:password)>`` per
  :rfc:`7617`, when a username is set.
"""

from __future__ import annotations

import base64

from pydantic import ValidationError

from specscope.models import AuthConfig, AuthType
from specscope.output import debug
from specscope.storage import Storage, StorageKey


def auth_headers(config: AuthConfig) -> dict[str, str]:
    """Headers contributed by *config*; empty when nothing applies."""
    headers: dict[str, str] = {}

    if config.type == AuthType.BEARER:
        if config.bearer.token:
            headers["Authorization"] = f"Bearer {config.bearer.token}"
    elif config.type == AuthType.API_KEY:
        key = config.api_key
        if key.location == "header" and key.name and key.value:
            headers[key.name] = key.value
    elif config.type == AuthType.BASIC:
        if config.basic.username:
            raw = f"{config.basic.username}:{config.basic.password}"
            encoded = base64.b64encode(raw.encode("utf-8")).decode("ascii")
            headers["Authorization"] = f"Basic {encoded}"

    return headers


def auth_query_params(config: AuthConfig) -> dict[str, str]:
    """Query parameters contributed by *config* (API key in query only)."""
    key = config.api_key
    if config.type == AuthType.API_KEY and key.location == "query" and key.name and key.value:
        return {key.name: key.value}
    return {}


def mask_secret(value: str) -> str:
    """Show only the last four characters of a secret."""
    if not value:
        return ""
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]


def load_auth(storage: Storage) -> AuthConfig:
    """The stored auth config, or the default (``none``) when absent or invalid."""
    data = storage.get(StorageKey.AUTH)
    if not isinstance(data, dict):
        return AuthConfig()
    try:
        return AuthConfig.model_validate(data)
    except ValidationError as exc:
        debug(f"Ignoring invalid stored auth config: {exc}")
        return AuthConfig()


def save_auth(storage: Storage, config: AuthConfig) -> None:
    storage.set(StorageKey.AUTH, config.model_dump(mode="json", by_alias=True))
