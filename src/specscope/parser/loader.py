"""Load spec documents from a URL, a local file, or stdin.

This module handles all I/O for fetching raw OpenAPI/Swagger documents and
turning them into Python dictionaries. JSON and YAML are both accepted with
automatic format detection.

Two fetch paths exist for remote documents:

* :func:`load_spec` -- blocking, used by the CLI.
* :func:`fetch_spec_async` -- the same fetch on :class:`httpx.AsyncClient`
  for callers running an event loop.

Neither imposes a timeout unless the caller passes one, and neither retries:
a failed fetch surfaces immediately as :class:`~specscope.exceptions.FetchError`
and the caller owns any retry policy.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from specscope.exceptions import FetchError, ParseError


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load_spec(
    source: str, timeout: Optional[float] = None
) -> tuple[dict[str, Any], str]:
    """Load a spec from a URL, file path, or stdin (``-``).

    Args:
        source: An http(s) URL, a file path, or ``-`` for stdin.
        timeout: Seconds to wait for a remote document; ``None`` waits
            indefinitely.

    Returns:
        A ``(document, source_url)`` tuple. ``source_url`` is the URL a
        remote document was fetched from, and ``""`` for files and stdin;
        it is the origin used for relative server URLs.

    Raises:
        FetchError: If the source cannot be retrieved.
        ParseError: If the content is not a JSON/YAML mapping.
    """
    if source == "-":
        return _load_from_stdin(), ""
    if is_url(source):
        return _load_from_url(source, timeout), source
    return _load_from_file(source), ""


async def fetch_spec_async(url: str, timeout: Optional[float] = None) -> dict[str, Any]:
    """Asynchronously fetch and parse a remote spec.

    Raises:
        FetchError: On a non-2xx status or a network failure.
        ParseError: If the body is not a JSON/YAML mapping.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            response = await client.get(url)
    except httpx.RequestError as exc:
        raise FetchError(f"Failed to fetch spec from {url}: {exc}") from exc

    return _parse_response(response, url)


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise FetchError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise FetchError("No input received from stdin")

    return parse_content(content)


def _load_from_url(url: str, timeout: Optional[float]) -> dict[str, Any]:
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
    except httpx.RequestError as exc:
        raise FetchError(f"Failed to fetch spec from {url}: {exc}") from exc

    return _parse_response(response, url)


def _parse_response(response: httpx.Response, url: str) -> dict[str, Any]:
    """Check the status of a spec response and parse its body."""
    if not response.is_success:
        reason = response.reason_phrase or ""
        raise FetchError(
            f"Failed to fetch spec from {url}: {response.status_code} {reason}".rstrip(),
            status_code=response.status_code,
            reason=reason,
        )

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a spec from disk; ``.json``/``.yaml``/``.yml`` give a format hint."""
    file_path = Path(path)
    if not file_path.is_file():
        raise FetchError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FetchError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise FetchError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return parse_content(content, hint=hint)


def parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as JSON, falling back to YAML.

    JSON is tried first unless *hint* is ``"yaml"``; a ``"json"`` hint
    disables the YAML fallback.

    Raises:
        ParseError: If the content is neither, or is not a mapping.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            return _require_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise ParseError(f"Invalid JSON: Could not parse the spec file ({exc})") from exc
            json_error = exc

    try:
        return _require_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        msg = "Failed to parse spec as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise ParseError(msg) from exc


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise ParseError(f"Spec must be a JSON/YAML object (got {kind})")
    return result
