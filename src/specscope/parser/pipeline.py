"""Run the full normalization pipeline over one spec document.

``resolve_refs -> detect_dialect -> derive_base_url -> extract_endpoints``

Each call builds its own resolver cache and cycle set, so concurrent parses
never share state. Any error is terminal for that call: no partial endpoint
list is ever returned.
"""

from __future__ import annotations

from typing import Any, Optional

from specscope.models import ParsedSpec, SpecInfo
from specscope.output import debug
from specscope.parser.dialect import derive_base_url, detect_dialect
from specscope.parser.extractor import extract_endpoints
from specscope.parser.loader import fetch_spec_async, load_spec
from specscope.parser.resolver import resolve_refs


def parse_spec(document: dict[str, Any], source_url: str = "") -> ParsedSpec:
    """Turn a raw document into a :class:`~specscope.models.ParsedSpec`.

    Args:
        document: The raw OpenAPI 3.x or Swagger 2.0 document. Not modified.
        source_url: Where the document was fetched from. Its origin is used
            for root-relative server URLs and as the last-resort base URL.

    Raises:
        InvalidSpecError: If the document lacks ``paths`` or a version marker.
    """
    resolved = resolve_refs(document)
    dialect = detect_dialect(resolved)
    base_url = derive_base_url(dialect, source_url)
    endpoints = extract_endpoints(resolved, dialect)
    debug(f"Extracted {len(endpoints)} endpoints ({dialect.kind} {dialect.version})")

    raw_info = resolved.get("info")
    if not isinstance(raw_info, dict):
        raw_info = {}
    title = raw_info.get("title")
    description = raw_info.get("description")

    info = SpecInfo(
        title=title if isinstance(title, str) and title else "Untitled API",
        version=str(raw_info.get("version") or ""),
        description=description if isinstance(description, str) else None,
        base_url=base_url,
    )
    return ParsedSpec(
        document=resolved,
        endpoints=endpoints,
        base_url=base_url,
        info=info,
        dialect=dialect,
    )


def parse_spec_from_source(source: str, timeout: Optional[float] = None) -> ParsedSpec:
    """Load *source* (URL, file or ``-``) and parse it."""
    document, source_url = load_spec(source, timeout=timeout)
    return parse_spec(document, source_url)


async def parse_spec_from_url_async(url: str, timeout: Optional[float] = None) -> ParsedSpec:
    """Fetch *url* asynchronously and parse it."""
    document = await fetch_spec_async(url, timeout=timeout)
    return parse_spec(document, url)
