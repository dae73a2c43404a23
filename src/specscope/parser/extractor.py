"""Extract normalized endpoints from a resolved spec document.

This module walks the ``paths`` object of a fully ``$ref``-resolved document
and emits one :class:`~specscope.models.Endpoint` per path + HTTP method.
The single extraction entry point is :func:`extract_endpoints`; private
helpers handle one piece of an operation each:

* ``_parse_parameter`` -- one parameter, OpenAPI 3 ``schema`` form first,
  Swagger 2 top-level fields second.
* ``_parse_request_body`` / ``_body_from_parameter`` -- the request body
  from a 3.x ``requestBody`` or a 2.0 ``in: body`` parameter.
* ``_parse_response`` -- one status code entry.

Path-level and operation-level parameters are concatenated, path-level
first, without removing duplicates.

Three helpers work on the extracted list: :func:`index_endpoints`,
:func:`group_endpoints_by_tag` and :func:`filter_endpoints`.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Union

from specscope.models import (
    Endpoint,
    HTTPMethod,
    OpenAPI3Dialect,
    Parameter,
    ParameterLocation,
    RequestBody,
    Response,
    Swagger2Dialect,
)
from specscope.output import debug

UNTAGGED = "Untagged"

_LOCATIONS = frozenset(loc.value for loc in ParameterLocation)


def extract_endpoints(
    spec: dict[str, Any],
    dialect: Optional[Union[OpenAPI3Dialect, Swagger2Dialect]] = None,
) -> list[Endpoint]:
    """Extract every operation in *spec* as an :class:`~specscope.models.Endpoint`.

    Paths are visited in document order and, within a path, methods in
    :class:`~specscope.models.HTTPMethod` declaration order.

    Args:
        spec: The resolved spec document.
        dialect: The detected dialect. Swagger 2 ``consumes``/``produces``
            lists are taken from it when present.

    Returns:
        The endpoints, in visiting order.
    """
    consumes: list[str] = []
    produces: list[str] = []
    if isinstance(dialect, Swagger2Dialect):
        consumes, produces = dialect.consumes, dialect.produces

    endpoints: list[Endpoint] = []
    paths = spec.get("paths")
    if not isinstance(paths, dict):
        return endpoints

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        path_params = _as_list(path_item.get("parameters"))

        for method in HTTPMethod:
            operation = path_item.get(method.value.lower())
            if not isinstance(operation, dict):
                continue
            endpoints.append(
                _parse_operation(str(path), method, operation, path_params, consumes, produces)
            )

    return endpoints


def index_endpoints(endpoints: Iterable[Endpoint]) -> dict[str, Endpoint]:
    """Map endpoint ids to endpoints. On a repeated id the last one wins."""
    return {endpoint.id: endpoint for endpoint in endpoints}


def group_endpoints_by_tag(endpoints: Iterable[Endpoint]) -> dict[str, list[Endpoint]]:
    """Group endpoints by tag, in first-seen tag order.

    Endpoints without tags are listed under ``"Untagged"``; an endpoint with
    several tags appears under each of them.
    """
    groups: dict[str, list[Endpoint]] = {}
    for endpoint in endpoints:
        for tag in endpoint.tags or [UNTAGGED]:
            groups.setdefault(tag, []).append(endpoint)
    return groups


def filter_endpoints(endpoints: Iterable[Endpoint], query: str) -> list[Endpoint]:
    """Case-insensitive search over path, method, summary, operationId and tags."""
    needle = query.strip().lower()
    if not needle:
        return list(endpoints)

    def _matches(endpoint: Endpoint) -> bool:
        haystack = [
            endpoint.path,
            endpoint.method.value,
            endpoint.summary or "",
            endpoint.operation_id or "",
            *endpoint.tags,
        ]
        return any(needle in field.lower() for field in haystack)

    return [endpoint for endpoint in endpoints if _matches(endpoint)]


def select_content_type(content_types: Iterable[str]) -> Optional[str]:
    """Pick the first media type containing ``"json"``, else the first one.

    Document order is preserved, so ``application/geo+json-seq`` listed
    before ``application/json`` is chosen. Returns ``None`` when empty.
    """
    candidates = list(content_types)
    for content_type in candidates:
        if "json" in content_type:
            return content_type
    return candidates[0] if candidates else None


def _parse_operation(
    path: str,
    method: HTTPMethod,
    operation: dict[str, Any],
    path_params: list[Any],
    consumes: list[str],
    produces: list[str],
) -> Endpoint:
    all_params = [p for p in [*path_params, *_as_list(operation.get("parameters"))] if isinstance(p, dict)]

    parameters: list[Parameter] = []
    for param in all_params:
        parsed = _parse_parameter(param)
        if parsed is not None:
            parameters.append(parsed)

    request_body: Optional[RequestBody] = None
    if isinstance(operation.get("requestBody"), dict):
        request_body = _parse_request_body(operation["requestBody"])
    else:
        body_param = next((p for p in all_params if p.get("in") == "body"), None)
        if body_param is not None:
            op_consumes = _as_list(operation.get("consumes")) or consumes
            request_body = _body_from_parameter(body_param, op_consumes)

    op_produces = _as_list(operation.get("produces")) or produces
    responses_raw = operation.get("responses")
    responses: list[Response] = []
    if isinstance(responses_raw, dict):
        for status_code, response in responses_raw.items():
            if isinstance(response, dict):
                responses.append(_parse_response(str(status_code), response, op_produces))

    tags = operation.get("tags")
    return Endpoint(
        id=f"{method.value}-{path}",
        method=method,
        path=path,
        operation_id=_text(operation.get("operationId")),
        summary=_text(operation.get("summary")),
        description=_text(operation.get("description")),
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
        parameters=parameters,
        request_body=request_body,
        responses=responses,
        deprecated=bool(operation.get("deprecated", False)),
    )


def _parse_parameter(param: dict[str, Any]) -> Optional[Parameter]:
    """Normalize one parameter; ``None`` for body/formData and unknown locations."""
    location = param.get("in")
    if not isinstance(location, str) or location not in _LOCATIONS:
        debug(f"Skipping parameter {param.get('name')!r} located in {location!r}")
        return None

    schema = param.get("schema")
    if not isinstance(schema, dict):
        schema = {}

    enum_values = _first_present(schema, param, "enum")
    return Parameter(
        name=str(param.get("name", "")),
        location=ParameterLocation(location),
        description=_text(param.get("description")),
        required=bool(param.get("required")) or location == ParameterLocation.PATH.value,
        type=str(schema.get("type") or param.get("type") or "string"),
        format=_text(schema.get("format") or param.get("format")),
        default=_first_present(schema, param, "default"),
        example=_first_present(schema, param, "example"),
        enum=enum_values if isinstance(enum_values, list) else None,
    )


def _parse_request_body(body: dict[str, Any]) -> RequestBody:
    content = body.get("content")
    if not isinstance(content, dict):
        content = {}
    content_type = select_content_type(content.keys())
    media = content.get(content_type) if content_type is not None else None
    if not isinstance(media, dict):
        media = {}

    return RequestBody(
        description=_text(body.get("description")),
        required=bool(body.get("required", False)),
        content_type=content_type,
        schema=_schema(media.get("schema")),
        example=_media_example(media),
    )


def _body_from_parameter(param: dict[str, Any], consumes: list[Any]) -> RequestBody:
    schema = _schema(param.get("schema"))
    return RequestBody(
        description=_text(param.get("description")),
        required=bool(param.get("required", False)),
        content_type=select_content_type(str(c) for c in consumes) or "application/json",
        schema=schema,
        example=schema.get("example") if schema else None,
    )


def _parse_response(status_code: str, response: dict[str, Any], produces: list[Any]) -> Response:
    content_type: Optional[str] = None
    schema: Optional[dict[str, Any]] = None

    content = response.get("content")
    if isinstance(content, dict):
        content_type = select_content_type(content.keys())
        media = content.get(content_type) if content_type is not None else None
        if isinstance(media, dict):
            schema = _schema(media.get("schema"))

    # Swagger 2 puts the schema on the response itself
    if schema is None and isinstance(response.get("schema"), dict):
        schema = response["schema"]
        content_type = select_content_type(str(p) for p in produces) or "application/json"

    return Response(
        status_code=status_code,
        description=_text(response.get("description")) or "",
        content_type=content_type,
        schema=schema,
    )


def _media_example(media: dict[str, Any]) -> Any:
    """``example``, else ``examples.default.value``, else ``None``."""
    if media.get("example") is not None:
        return media["example"]
    examples = media.get("examples")
    if isinstance(examples, dict):
        default = examples.get("default")
        if isinstance(default, dict):
            return default.get("value")
    return None


def _first_present(schema: dict[str, Any], param: dict[str, Any], key: str) -> Any:
    value = schema.get(key)
    return param.get(key) if value is None else value


def _schema(raw: Any) -> Optional[dict[str, Any]]:
    return raw if isinstance(raw, dict) else None


def _as_list(raw: Any) -> list[Any]:
    return raw if isinstance(raw, list) else []


def _text(raw: Any) -> Optional[str]:
    return raw if isinstance(raw, str) else None
