"""Build and prepare requests for an :class:`~specscope.models.Endpoint`.

A :class:`~specscope.models.RequestDraft` is the editable request state:
path and query values, extra headers and a body. The draft lifecycle is

1. :func:`draft_from_endpoint` -- pre-fill from the endpoint's defaults,
   examples and (declared or synthesized) body example.
2. The CLI applies user overrides (``-P``, ``-Q``, ``-H``, ``--body``).
3. :func:`is_valid` -- every required value is present.
4. :func:`prepare` -- variables are interpolated, auth is applied and the
   base URL is joined, giving a :class:`~specscope.models.PreparedRequest`.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote

from specscope.auth import auth_headers, auth_query_params
from specscope.interpolate import interpolate, interpolate_request
from specscope.models import (
    AuthConfig,
    Endpoint,
    ParameterLocation,
    PreparedRequest,
    RequestDraft,
)
from specscope.parser.examples import example_for_body

DEFAULT_CONTENT_TYPE = "application/json"

# Same unreserved set as JavaScript's encodeURIComponent
_COMPONENT_SAFE = "-_.!~*'()"


def draft_from_endpoint(endpoint: Endpoint) -> RequestDraft:
    """Create a draft with every path and query parameter pre-filled.

    Each value is the parameter's default, else its example, else ``""``.
    The body is the request body example rendered as indented JSON.
    """
    path_params: dict[str, str] = {}
    query_params: dict[str, str] = {}
    for param in endpoint.parameters:
        if param.default is not None:
            value = _stringify(param.default)
        elif param.example is not None:
            value = _stringify(param.example)
        else:
            value = ""

        if param.location == ParameterLocation.PATH:
            path_params[param.name] = value
        elif param.location == ParameterLocation.QUERY:
            query_params[param.name] = value

    body = ""
    example = example_for_body(endpoint.request_body)
    if example is not None:
        body = json.dumps(example, indent=2, ensure_ascii=False)

    content_type = DEFAULT_CONTENT_TYPE
    if endpoint.request_body is not None and endpoint.request_body.content_type:
        content_type = endpoint.request_body.content_type

    return RequestDraft(
        endpoint=endpoint,
        path_params=path_params,
        query_params=query_params,
        body=body,
        content_type=content_type,
    )


def missing_required(draft: RequestDraft) -> list[str]:
    """Names of required values that are still empty (``"body"`` for the body)."""
    if draft.endpoint is None:
        return []

    missing: list[str] = []
    for param in draft.endpoint.parameters:
        if not param.required:
            continue
        if param.location == ParameterLocation.PATH and not draft.path_params.get(param.name):
            missing.append(param.name)
        elif param.location == ParameterLocation.QUERY and not draft.query_params.get(param.name):
            missing.append(param.name)

    body = draft.endpoint.request_body
    if body is not None and body.required and not draft.body.strip():
        missing.append("body")
    return missing


def is_valid(draft: RequestDraft) -> bool:
    """True when the draft has an endpoint and no required value is empty."""
    return draft.endpoint is not None and not missing_required(draft)


def build_path(draft: RequestDraft) -> str:
    """The endpoint path with values substituted and a query string appended.

    Example::

        build_path(draft)  # '/pets/42?limit=10'
    """
    if draft.endpoint is None:
        return ""

    path = draft.endpoint.path
    for name, value in draft.path_params.items():
        path = path.replace(f"{{{name}}}", quote(value, safe=_COMPONENT_SAFE))

    query = _query_string(draft.query_params)
    return f"{path}?{query}" if query else path


def prepare(
    draft: RequestDraft,
    base_url: str,
    variables: dict[str, str],
    auth: AuthConfig,
) -> PreparedRequest:
    """Resolve a draft into a request that can be sent.

    Variables are interpolated into parameter values before they are
    URL-encoded, and into the base URL, headers and body. Auth query
    parameters are appended to the user's query parameters; headers are
    layered as content type, then auth, then the user's own headers.

    Raises:
        ValueError: If the draft has no endpoint.
    """
    if draft.endpoint is None:
        raise ValueError("Cannot prepare a request without an endpoint")

    resolved = draft.model_copy(
        update={
            "path_params": {k: interpolate(v, variables) for k, v in draft.path_params.items()},
            "query_params": {},
        }
    )
    path = build_path(resolved)

    params = {
        key: interpolate(value, variables)
        for key, value in draft.query_params.items()
        if value
    }
    params.update(auth_query_params(auth))

    base, user_headers, body_text = interpolate_request(
        base_url, draft.headers, draft.body, variables
    )
    body = body_text if draft.body.strip() else None

    headers: dict[str, str] = {}
    if body is not None:
        headers["Content-Type"] = draft.content_type
    headers.update(auth_headers(auth))
    headers.update(user_headers)

    query = _query_string(params)
    return PreparedRequest(
        method=draft.endpoint.method,
        url=base.rstrip("/") + path,
        path=f"{path}?{query}" if query else path,
        headers=headers,
        params=params,
        body=body,
    )


def _query_string(params: dict[str, str]) -> str:
    return "&".join(
        f"{quote(name, safe=_COMPONENT_SAFE)}={quote(value, safe=_COMPONENT_SAFE)}"
        for name, value in params.items()
        if value
    )


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)
