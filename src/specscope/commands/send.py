"""Send command -- build a request for an endpoint and send it.

The request starts from the endpoint's defaults and examples (see
:func:`~specscope.request.draft_from_endpoint`); ``-P``, ``-Q``, ``-H``
and ``--body`` override parts of it. Enabled environment variables and the
auth settings are applied, the request goes to the active base URL (or the
spec's), and the exchange is recorded in the history.

Example::

    specscope send GET-/pet/{petId} -P petId=7
    specscope send addPet --body @pet.json -H 'X-Trace={{$randomUUID}}'
    specscope send POST-/pet --dry-run
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from specscope import history
from specscope.auth import load_auth
from specscope.baseurls import effective_base_url
from specscope.client import RequestClient
from specscope.commands import abort, context_base_url, context_config, parse_pairs
from specscope.commands.spec import find_endpoint, load_current
from specscope.environment import current_variables
from specscope.exceptions import InvalidUsageError, SpecscopeError
from specscope.interpolate import find_unresolved_variables, has_variables
from specscope.models import ApiResponse
from specscope.output import OutputFormat, get_output, info, warning
from specscope.request import draft_from_endpoint, missing_required, prepare
from specscope.storage import get_storage


def send_command(
    ctx: typer.Context,
    endpoint_id: str = typer.Argument(help="Endpoint id (e.g. 'GET-/pets') or operationId."),
    path_params: Optional[List[str]] = typer.Option(
        None, "--path", "-P", help="Path parameter as name=value (repeatable)."
    ),
    query_params: Optional[List[str]] = typer.Option(
        None, "--query", "-Q", help="Query parameter as name=value (repeatable)."
    ),
    headers: Optional[List[str]] = typer.Option(
        None, "--header", "-H", help="Header as name=value (repeatable)."
    ),
    body: Optional[str] = typer.Option(
        None, "--body", "-d", help="Request body, or @FILE to read it from a file."
    ),
    content_type: Optional[str] = typer.Option(
        None, "--content-type", help="Override the body's Content-Type."
    ),
    save_body: bool = typer.Option(
        False, "--save-body", help="Remember this body as the endpoint's draft."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print the prepared request without sending it."
    ),
) -> None:
    """Send a request to an endpoint of the current spec."""
    config = context_config(ctx)
    storage = get_storage()
    parsed = load_current()

    try:
        endpoint = find_endpoint(parsed, endpoint_id)
        draft = draft_from_endpoint(endpoint)
        saved_body = storage.get_request_body(endpoint.id)
        updates = {
            "path_params": {**draft.path_params, **parse_pairs(path_params, "-P")},
            "query_params": {**draft.query_params, **parse_pairs(query_params, "-Q")},
            "headers": parse_pairs(headers, "-H"),
            "body": _read_body(body) if body is not None else (saved_body or draft.body),
        }
        if content_type:
            updates["content_type"] = content_type
        draft = draft.model_copy(update=updates)
    except SpecscopeError as exc:
        abort(exc)

    if save_body:
        storage.set_request_body(endpoint.id, draft.body)

    missing = missing_required(draft)
    if missing:
        abort(InvalidUsageError(f"Missing required values: {', '.join(missing)}"))

    variables = current_variables(storage)
    base_url = context_base_url(ctx) or effective_base_url(storage, parsed.base_url)
    if not base_url:
        abort(
            InvalidUsageError(
                "No base URL for this spec. Add one with 'specscope baseurl add LABEL URL --use'."
            )
        )

    texts = [
        base_url,
        draft.body,
        *draft.path_params.values(),
        *draft.query_params.values(),
        *draft.headers.keys(),
        *draft.headers.values(),
    ]
    unresolved = list(
        dict.fromkeys(
            name
            for text in texts
            if has_variables(text)
            for name in find_unresolved_variables(text, variables)
        )
    )
    if unresolved:
        warning(f"Unresolved variables: {', '.join(unresolved)}")

    prepared = prepare(draft, base_url, variables, load_auth(storage))

    output = get_output()
    if dry_run:
        output.format_data(prepared.model_dump(mode="json"))
        return

    try:
        with RequestClient(config.request) as client:
            response = client.send(prepared)
    except SpecscopeError as exc:
        abort(exc)

    history.record(storage, prepared, response, config.history.max_entries)
    print_response(response)


def print_response(response: ApiResponse) -> None:
    """Status line to stderr, body to stdout (the whole exchange in JSON mode)."""
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data(response.model_dump(mode="json"))
        return
    status = f"{response.status} {response.status_text}".strip()
    info(f"{status} · {response.time:.0f} ms · {response.size} B")
    if response.body is not None:
        output.format_data(response.body)


def _read_body(value: str) -> str:
    if not value.startswith("@"):
        return value
    path = Path(value[1:])
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidUsageError(f"Cannot read body file {path}: {exc}") from exc
