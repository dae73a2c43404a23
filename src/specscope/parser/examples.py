"""Synthesize representative values from schema fragments.

Used to pre-fill request bodies and parameter inputs. :func:`synthesize` is
total: any input, including a non-mapping or an empty fragment, produces a
value without raising. It does not guard against recursion, so fragments
must have gone through :func:`~specscope.parser.resolver.resolve_refs`
first (which collapses reference cycles).
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Optional

from specscope.models import RequestBody

FIXED_UUID = "550e8400-e29b-41d4-a716-446655440000"

_STRING_FORMATS = {
    "date": "2024-01-01",
    "date-time": "2024-01-01T00:00:00Z",
    "email": "user@example.com",
    "uri": "https://example.com",
    "url": "https://example.com",
    "uuid": FIXED_UUID,
}


class SchemaKind(str, enum.Enum):
    """The closed set of schema shapes the synthesizer distinguishes."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    UNKNOWN = "unknown"


def schema_kind(schema: Any) -> SchemaKind:
    """Classify a fragment by its declared ``type``.

    A list-valued ``type`` uses its first entry other than ``"null"``.
    Missing or unrecognised types map to :attr:`SchemaKind.UNKNOWN`.
    """
    if not isinstance(schema, dict):
        return SchemaKind.UNKNOWN
    declared = schema.get("type")
    if isinstance(declared, list):
        declared = next((t for t in declared if t != "null"), None)
    try:
        return SchemaKind(declared)
    except (ValueError, TypeError):
        return SchemaKind.UNKNOWN


def synthesize(schema: Any) -> Any:
    """Generate a placeholder value shaped like *schema*.

    An explicit ``example`` on the fragment is returned unchanged; otherwise
    the value is built from the declared type.

    Example::

        synthesize({"type": "object", "properties": {
            "a": {"type": "integer"},
            "b": {"type": "string", "format": "uuid"},
        }})
        # {'a': 0, 'b': '550e8400-e29b-41d4-a716-446655440000'}
    """
    if not isinstance(schema, dict):
        return None
    if "example" in schema:
        return schema["example"]
    return _GENERATORS[schema_kind(schema)](schema)


def example_for_body(body: Optional[RequestBody]) -> Any:
    """The body's declared example, falling back to a synthesized one."""
    if body is None:
        return None
    if body.example is not None:
        return body.example
    return synthesize(body.schema_)


def _object(schema: dict[str, Any]) -> dict[str, Any]:
    properties = schema.get("properties")
    if not isinstance(properties, dict):
        return {}
    # Every declared property, required or not
    return {name: synthesize(prop) for name, prop in properties.items()}


def _array(schema: dict[str, Any]) -> list[Any]:
    return [synthesize(schema.get("items"))]


def _string(schema: dict[str, Any]) -> Any:
    choices = schema.get("enum")
    if isinstance(choices, list) and choices:
        return choices[0]
    fmt = schema.get("format")
    if isinstance(fmt, str):
        return _STRING_FORMATS.get(fmt, "string")
    return "string"


def _numeric(schema: dict[str, Any]) -> Any:
    default = schema.get("default")
    return 0 if default is None else default


def _boolean(schema: dict[str, Any]) -> Any:
    default = schema.get("default")
    return False if default is None else default


def _unknown(schema: dict[str, Any]) -> None:
    return None


_GENERATORS: dict[SchemaKind, Callable[[dict[str, Any]], Any]] = {
    SchemaKind.OBJECT: _object,
    SchemaKind.ARRAY: _array,
    SchemaKind.STRING: _string,
    SchemaKind.INTEGER: _numeric,
    SchemaKind.NUMBER: _numeric,
    SchemaKind.BOOLEAN: _boolean,
    SchemaKind.UNKNOWN: _unknown,
}
