"""Spec parser -- load, resolve ``$ref`` pointers, and extract endpoints.

This sub-package turns a raw OpenAPI 3.x or Swagger 2.0 document (JSON or
YAML, local file, remote URL or stdin) into a
:class:`~specscope.models.ParsedSpec`.

Typical usage::

    from specscope.parser import parse_spec_from_source

    parsed = parse_spec_from_source("https://petstore3.swagger.io/api/v3/openapi.json")
    for endpoint in parsed.endpoints:
        print(endpoint.id)

Sub-modules:

* :mod:`~specscope.parser.loader` -- I/O layer (URL, file, stdin) plus
  JSON/YAML detection.
* :mod:`~specscope.parser.resolver` -- ``$ref`` resolution with a
  path-scoped cycle guard.
* :mod:`~specscope.parser.dialect` -- OpenAPI 3 / Swagger 2 detection and
  base URL derivation.
* :mod:`~specscope.parser.extractor` -- endpoints, grouping and search.
* :mod:`~specscope.parser.examples` -- example values from schemas.
* :mod:`~specscope.parser.pipeline` -- the four stages wired together.
"""

from specscope.parser.dialect import derive_base_url, detect_dialect
from specscope.parser.examples import example_for_body, synthesize
from specscope.parser.extractor import (
    extract_endpoints,
    filter_endpoints,
    group_endpoints_by_tag,
    index_endpoints,
)
from specscope.parser.loader import fetch_spec_async, load_spec
from specscope.parser.pipeline import (
    parse_spec,
    parse_spec_from_source,
    parse_spec_from_url_async,
)
from specscope.parser.resolver import resolve_refs

__all__ = [
    "derive_base_url",
    "detect_dialect",
    "example_for_body",
    "extract_endpoints",
    "fetch_spec_async",
    "filter_endpoints",
    "group_endpoints_by_tag",
    "index_endpoints",
    "load_spec",
    "parse_spec",
    "parse_spec_from_source",
    "parse_spec_from_url_async",
    "resolve_refs",
    "synthesize",
]
