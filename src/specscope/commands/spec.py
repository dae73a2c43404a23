"""Spec commands -- load a spec and browse its endpoints.

These commands are registered directly on the root app:

* ``specscope load SOURCE`` parses a URL, file or stdin (``-``) and makes
  it the current spec.
* ``specscope info`` / ``endpoints`` / ``show`` / ``example`` read the
  current spec back from the workspace store.

Typical workflow::

    specscope load https://petstore3.swagger.io/api/v3/openapi.json
    specscope endpoints --tag pet
    specscope show GET-/pet/{petId}
    specscope example POST-/pet
"""

from __future__ import annotations

from typing import Optional

import typer

from specscope.baseurls import effective_base_url
from specscope.commands import abort, context_base_url, context_config
from specscope.exceptions import NotFoundError, SpecscopeError
from specscope.models import Endpoint, ParsedSpec
from specscope.output import OutputFormat, get_output, info, success, suggest
from specscope.parser.examples import example_for_body, synthesize
from specscope.parser.extractor import (
    filter_endpoints,
    group_endpoints_by_tag,
    index_endpoints,
)
from specscope.parser.loader import load_spec
from specscope.parser.pipeline import parse_spec
from specscope.storage import get_storage
from specscope.workspace import current_spec, remember_spec


def find_endpoint(parsed: ParsedSpec, ref: str) -> Endpoint:
    """Look an endpoint up by id (``"GET-/pets"``), then by operationId.

    Raises:
        NotFoundError: If nothing matches.
    """
    by_id = index_endpoints(parsed.endpoints)
    if ref in by_id:
        return by_id[ref]
    for endpoint in parsed.endpoints:
        if endpoint.operation_id == ref:
            return endpoint
    raise NotFoundError(f"No endpoint with id or operationId '{ref}'")


def load_current() -> ParsedSpec:
    """The current spec, exiting with the error's code when unavailable."""
    try:
        return current_spec(get_storage())
    except SpecscopeError as exc:
        abort(exc)


def load_command(
    ctx: typer.Context,
    source: str = typer.Argument(help="Spec URL, file path, or '-' for stdin."),
) -> None:
    """Load an OpenAPI 3.x or Swagger 2.0 spec and make it current.

    Example::

        specscope load ./openapi.yaml
        curl -s https://api.example.com/openapi.json | specscope load -
    """
    config = context_config(ctx)
    try:
        document, source_url = load_spec(source, timeout=config.request.fetch_timeout)
        parsed = parse_spec(document, source_url)
    except SpecscopeError as exc:
        abort(exc)

    remember_spec(
        get_storage(), document, source, parsed, config.history.max_recent_specs
    )

    title = f"{parsed.info.title} {parsed.info.version}".strip()
    success(f"Loaded {title} ({len(parsed.endpoints)} endpoints)")
    if parsed.base_url:
        info(f"Base URL: {parsed.base_url}")
    else:
        info("No base URL could be derived; add one with 'specscope baseurl add'.")
    suggest("specscope endpoints --group")


def info_command(ctx: typer.Context) -> None:
    """Show title, version, dialect and base URL of the current spec."""
    parsed = load_current()
    base_url = context_base_url(ctx) or effective_base_url(get_storage(), parsed.base_url)

    data = {
        "title": parsed.info.title,
        "version": parsed.info.version,
        "dialect": f"{parsed.dialect.kind} {parsed.dialect.version}",
        "base_url": base_url,
        "spec_base_url": parsed.base_url,
        "endpoints": len(parsed.endpoints),
        "description": parsed.info.description or "",
    }

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data(data)
        return
    rows = [[key.replace("_", " ").title(), str(value)] for key, value in data.items()]
    output.print_table(["Field", "Value"], rows, title=parsed.info.title)


def endpoints_command(
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Only this tag."),
    search: Optional[str] = typer.Option(
        None, "--search", "-s", help="Filter by path, method, summary, operationId or tag."
    ),
    group: bool = typer.Option(False, "--group", "-g", help="Group by tag."),
) -> None:
    """List the endpoints of the current spec.

    Example::

        specscope endpoints --search pet --group
    """
    parsed = load_current()
    endpoints = parsed.endpoints
    if search:
        endpoints = filter_endpoints(endpoints, search)

    groups = group_endpoints_by_tag(endpoints)
    if tag is not None:
        if tag not in groups:
            abort(NotFoundError(f"No endpoints tagged '{tag}'"))
        groups = {tag: groups[tag]}
        endpoints = groups[tag]

    output = get_output()
    if output.format == OutputFormat.JSON:
        if group:
            output.format_data(
                {name: [_summary(e) for e in members] for name, members in groups.items()}
            )
        else:
            output.format_data([_summary(e) for e in endpoints])
        return

    headers = ["ID", "Method", "Path", "Summary", "Deprecated"]
    if group:
        for name, members in groups.items():
            output.print_table(headers, [_row(e) for e in members], title=f"{name} ({len(members)})")
    else:
        output.print_table(
            headers,
            [_row(e) for e in endpoints],
            title=f"{parsed.info.title} -- Endpoints ({len(endpoints)})",
        )


def show_command(
    endpoint_id: str = typer.Argument(help="Endpoint id (e.g. 'GET-/pets') or operationId."),
) -> None:
    """Show the parameters, request body and responses of one endpoint."""
    parsed = load_current()
    try:
        endpoint = find_endpoint(parsed, endpoint_id)
    except SpecscopeError as exc:
        abort(exc)

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data(endpoint.model_dump(mode="json", by_alias=True, exclude_none=True))
        return

    heading = f"{endpoint.method.value} {endpoint.path}"
    if endpoint.deprecated:
        heading += " (deprecated)"
    output.print_data(heading)
    if endpoint.summary:
        output.print_data(endpoint.summary)
    if endpoint.description and endpoint.description != endpoint.summary:
        output.print_data(endpoint.description)

    if endpoint.parameters:
        rows = [
            [
                p.name,
                p.location.value,
                p.type + (f" ({p.format})" if p.format else ""),
                "yes" if p.required else "",
                "" if p.default is None else str(p.default),
                p.description or "",
            ]
            for p in endpoint.parameters
        ]
        output.print_table(
            ["Name", "In", "Type", "Required", "Default", "Description"], rows, title="Parameters"
        )

    body = endpoint.request_body
    if body is not None:
        required = " (required)" if body.required else ""
        output.print_data(f"Request body: {body.content_type or '-'}{required}")

    if endpoint.responses:
        rows = [
            [r.status_code, r.content_type or "", r.description] for r in endpoint.responses
        ]
        output.print_table(["Status", "Content-Type", "Description"], rows, title="Responses")


def example_command(
    endpoint_id: str = typer.Argument(help="Endpoint id or operationId."),
    response: Optional[str] = typer.Option(
        None, "--response", "-r", help="Show an example for this response status instead."
    ),
) -> None:
    """Print an example request body (or response body) for an endpoint.

    Example::

        specscope example POST-/pet
        specscope example getPetById --response 200
    """
    parsed = load_current()
    try:
        endpoint = find_endpoint(parsed, endpoint_id)
    except SpecscopeError as exc:
        abort(exc)

    if response is not None:
        match = next((r for r in endpoint.responses if r.status_code == response), None)
        if match is None:
            abort(NotFoundError(f"{endpoint.id} declares no '{response}' response"))
        if match.schema_ is None:
            info(f"The {response} response of {endpoint.id} has no schema.")
            return
        get_output().format_data(synthesize(match.schema_))
        return

    if endpoint.request_body is None:
        info(f"{endpoint.id} has no request body.")
        return
    get_output().format_data(example_for_body(endpoint.request_body))


def _summary(endpoint: Endpoint) -> dict[str, object]:
    return {
        "id": endpoint.id,
        "method": endpoint.method.value,
        "path": endpoint.path,
        "summary": endpoint.summary,
        "tags": endpoint.tags,
        "deprecated": endpoint.deprecated,
    }


def _row(endpoint: Endpoint) -> list[str]:
    return [
        endpoint.id,
        endpoint.method.value,
        endpoint.path,
        endpoint.summary or "-",
        "Yes" if endpoint.deprecated else "",
    ]
