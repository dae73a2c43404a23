"""Resolve ``$ref`` JSON Reference pointers in a spec document.

OpenAPI and Swagger documents use ``{"$ref": "#/components/schemas/Pet"}``
(or ``#/definitions/Pet``) to avoid repetition. This module performs a
recursive traversal of a deep copy of the document and replaces every
internal reference with the value it points to.

Three rules shape the traversal:

* **Sibling keys win.** ``{"$ref": ..., "description": "x"}`` becomes the
  resolved referent with ``description`` overwritten by ``"x"``.
* **Cycles stop at re-entry.** The identities of the objects currently being
  expanded are tracked along the active path. When an object shows up again
  inside its own expansion it is returned as-is, still carrying its
  ``$ref``. The set is per path, so a schema shared by two unrelated
  properties is expanded under both.
* **Bad references degrade.** External references and pointers that cannot
  be walked become ``{}`` and a warning is printed; one broken pointer never
  fails the whole document.

The single public function is :func:`resolve_refs`.
"""

from __future__ import annotations

import copy
from typing import Any

from specscope.output import warning

_MISSING = object()


def resolve_refs(spec: dict[str, Any]) -> dict[str, Any]:
    """Resolve every internal ``$ref`` pointer in *spec*.

    Args:
        spec: The raw document, as returned by
            :func:`~specscope.parser.loader.load_spec`. It is not modified.

    Returns:
        A new document with all resolvable references inlined.

    Example::

        resolved = resolve_refs(raw)
        resolved["paths"]["/pets"]["get"]["responses"]["200"]
        # now contains the inlined schema instead of a $ref pointer.
    """
    root = copy.deepcopy(spec)
    cache: dict[str, Any] = {}
    return _deep_resolve(root, root, cache, frozenset())


def _lookup_ref(ref: str, root: Any, cache: dict[str, Any]) -> Any:
    """Return the raw value addressed by *ref*, or ``{}`` when unresolvable.

    Successful lookups are memoized in *cache* for the rest of the pass.
    Pointer segments honour RFC 6901 escaping (``~1`` for ``/``, ``~0`` for
    ``~``) and address list elements by index.
    """
    cached = cache.get(ref, _MISSING)
    if cached is not _MISSING:
        return cached

    if not ref.startswith("#/"):
        warning(f"External $ref not supported: {ref}")
        return {}

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            warning(f"Could not resolve $ref: {ref}")
            return {}

    cache[ref] = current
    return current


def _deep_resolve(
    obj: Any,
    root: dict[str, Any],
    cache: dict[str, Any],
    active: frozenset[int],
) -> Any:
    """Recursively resolve *obj*.

    *active* holds the ``id()`` of every container on the current expansion
    path. Each branch receives its own extended copy, so siblings never see
    each other's entries.
    """
    if not isinstance(obj, (dict, list)):
        return obj

    if id(obj) in active:
        # Re-entered inside its own expansion
        return obj
    active = active | {id(obj)}

    if isinstance(obj, list):
        return [_deep_resolve(item, root, cache, active) for item in obj]

    ref = obj.get("$ref")
    if isinstance(ref, str):
        referent = _deep_resolve(_lookup_ref(ref, root, cache), root, cache, active)
        siblings = {key: value for key, value in obj.items() if key != "$ref"}
        if siblings and isinstance(referent, dict):
            return {**referent, **siblings}
        return referent

    return {key: _deep_resolve(value, root, cache, active) for key, value in obj.items()}
