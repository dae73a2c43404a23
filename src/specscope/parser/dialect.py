"""Detect the spec dialect and derive the API base URL.

OpenAPI 3.x and Swagger 2.0 describe the same things in different places:
3.x lists ``servers``, 2.0 splits the target into ``schemes``, ``host`` and
``basePath``; 2.0 also declares media types in ``consumes``/``produces``
lists instead of ``content`` maps. :func:`detect_dialect` reads those facts
once into an :class:`~specscope.models.OpenAPI3Dialect` or
:class:`~specscope.models.Swagger2Dialect` so later stages can dispatch on
the variant instead of probing optional keys.
"""

from __future__ import annotations

from typing import Any, Union
from urllib.parse import urlsplit

from specscope.exceptions import InvalidSpecError
from specscope.models import (
    OpenAPI3Dialect,
    ServerInfo,
    ServerVariable,
    Swagger2Dialect,
)
from specscope.output import warning

DialectModel = Union[OpenAPI3Dialect, Swagger2Dialect]


def detect_dialect(spec: dict[str, Any]) -> DialectModel:
    """Classify *spec* as OpenAPI 3.x or Swagger 2.0.

    A non-empty ``openapi`` field wins over a ``swagger`` field; an empty or
    null marker counts as absent. A version string outside the expected
    major version only produces a warning.

    Args:
        spec: The (resolved) spec document.

    Returns:
        The dialect variant carrying the facts that variant needs.

    Raises:
        InvalidSpecError: If ``paths`` is missing, or neither version field
            is present.
    """
    if spec.get("openapi"):
        version = str(spec["openapi"])
        if not version.startswith("3."):
            warning(f"OpenAPI version {version} may not be fully supported")
        _require_paths(spec, "OpenAPI")
        return OpenAPI3Dialect(version=version, servers=_servers(spec.get("servers")))

    if spec.get("swagger"):
        version = str(spec["swagger"])
        if not version.startswith("2."):
            warning(f"Swagger version {version} may not be fully supported")
        _require_paths(spec, "Swagger")
        host = spec.get("host")
        return Swagger2Dialect(
            version=version,
            host=str(host) if host else None,
            base_path=str(spec.get("basePath") or ""),
            schemes=_strings(spec.get("schemes")),
            consumes=_strings(spec.get("consumes")),
            produces=_strings(spec.get("produces")),
        )

    _require_paths(spec, "spec")
    raise InvalidSpecError("Invalid spec: Not a valid OpenAPI 3.x or Swagger 2.0 document")


def derive_base_url(dialect: DialectModel, source_url: str = "") -> str:
    """Compute the URL requests should be sent to.

    Priority:

    1. OpenAPI 3: the first server. A root-relative URL is joined to the
       origin of *source_url*; ``{name}`` placeholders take the matching
       variable's default.
    2. Swagger 2 with a ``host``: ``scheme://host + basePath`` with the
       first declared scheme, or ``https``.
    3. The origin of *source_url*, or ``""`` if it has none.

    Example::

        derive_base_url(OpenAPI3Dialect(version="3.0.0",
                                        servers=[ServerInfo(url="/api")]),
                        "https://host.example/spec.json")
        # 'https://host.example/api'
    """
    if isinstance(dialect, OpenAPI3Dialect) and dialect.servers:
        server = dialect.servers[0]
        url = server.url
        if url.startswith("/"):
            origin = _origin(source_url)
            if origin:
                url = f"{origin}{url}"
        for name, variable in server.variables.items():
            if variable.default is not None:
                url = url.replace(f"{{{name}}}", variable.default)
        return url

    if isinstance(dialect, Swagger2Dialect) and dialect.host:
        scheme = dialect.schemes[0] if dialect.schemes else "https"
        return f"{scheme}://{dialect.host}{dialect.base_path}"

    return _origin(source_url)


def _require_paths(spec: dict[str, Any], label: str) -> None:
    if not isinstance(spec.get("paths"), dict):
        raise InvalidSpecError(f'Invalid {label} spec: missing "paths" property')


def _origin(url: str) -> str:
    """``scheme://host[:port]`` of *url*, or ``""`` when it is not absolute."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return ""
    if not parts.scheme or not parts.netloc:
        return ""
    host = parts.netloc.rpartition("@")[2]
    return f"{parts.scheme}://{host}"


def _servers(raw: Any) -> list[ServerInfo]:
    if not isinstance(raw, list):
        return []
    servers: list[ServerInfo] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        variables: dict[str, ServerVariable] = {}
        raw_vars = entry.get("variables")
        if isinstance(raw_vars, dict):
            for name, var in raw_vars.items():
                if isinstance(var, dict):
                    default = var.get("default")
                    variables[str(name)] = ServerVariable(
                        default=None if default is None else str(default),
                        enum=_strings(var.get("enum")) or None,
                        description=_text(var.get("description")),
                    )
        servers.append(
            ServerInfo(
                url=str(entry.get("url") or ""),
                description=_text(entry.get("description")),
                variables=variables,
            )
        )
    return servers


def _strings(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [str(item) for item in raw]


def _text(raw: Any) -> str | None:
    return raw if isinstance(raw, str) else None
