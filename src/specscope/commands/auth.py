"""Auth commands -- configure how requests authenticate.

Provides the ``specscope auth`` sub-command group. Exactly one strategy is
active at a time; switching strategy keeps the other blocks' values so
switching back restores them.

Typical workflow::

    specscope auth bearer eyJhbGciOi...
    specscope auth api-key X-API-Key secret --in query
    specscope auth clear
"""

from __future__ import annotations

import typer

from specscope.auth import load_auth, mask_secret, save_auth
from specscope.commands import abort
from specscope.exceptions import InvalidUsageError
from specscope.models import ApiKeyAuth, AuthType, BasicAuth, BearerAuth
from specscope.output import OutputFormat, get_output, success
from specscope.storage import get_storage

auth_app = typer.Typer(no_args_is_help=True)


@auth_app.command("show")
def auth_show(
    reveal: bool = typer.Option(False, "--reveal", help="Show secrets unmasked."),
) -> None:
    """Show the active auth strategy."""
    config = load_auth(get_storage())
    secret = (lambda value: value) if reveal else mask_secret

    rows: list[list[str]] = [["Type", config.type.value]]
    if config.type == AuthType.BEARER:
        rows.append(["Token", secret(config.bearer.token)])
    elif config.type == AuthType.API_KEY:
        rows.append(["Name", config.api_key.name])
        rows.append(["Value", secret(config.api_key.value)])
        rows.append(["In", config.api_key.location])
    elif config.type == AuthType.BASIC:
        rows.append(["Username", config.basic.username])
        rows.append(["Password", secret(config.basic.password)])

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data({key.lower(): value for key, value in rows})
        return
    output.print_table(["Field", "Value"], rows, title="Auth")


@auth_app.command("bearer")
def auth_bearer(token: str = typer.Argument(help="Bearer token.")) -> None:
    """Send ``Authorization: Bearer TOKEN``."""
    storage = get_storage()
    config = load_auth(storage)
    bearer = BearerAuth(token=token)
    save_auth(storage, config.model_copy(update={"type": AuthType.BEARER, "bearer": bearer}))
    success("Bearer auth enabled")


@auth_app.command("api-key")
def auth_api_key(
    name: str = typer.Argument(help="Header or query parameter name."),
    value: str = typer.Argument(help="Key value."),
    location: str = typer.Option("header", "--in", help="'header' or 'query'."),
) -> None:
    """Send an API key in a header or the query string."""
    if location not in ("header", "query"):
        abort(InvalidUsageError(f"--in must be 'header' or 'query', got '{location}'"))
    storage = get_storage()
    config = load_auth(storage)
    api_key = ApiKeyAuth(name=name, value=value, location=location)
    save_auth(storage, config.model_copy(update={"type": AuthType.API_KEY, "api_key": api_key}))
    success(f"API key auth enabled ({location} '{name}')")


@auth_app.command("basic")
def auth_basic(
    username: str = typer.Argument(help="Username."),
    password: str = typer.Option(
        "", "--password", "-p", prompt=True, hide_input=True, help="Password."
    ),
) -> None:
    """Send HTTP Basic credentials."""
    storage = get_storage()
    config = load_auth(storage)
    basic = BasicAuth(username=username, password=password)
    save_auth(storage, config.model_copy(update={"type": AuthType.BASIC, "basic": basic}))
    success(f"Basic auth enabled for '{username}'")


@auth_app.command("clear")
def auth_clear() -> None:
    """Stop sending credentials."""
    storage = get_storage()
    config = load_auth(storage)
    save_auth(storage, config.model_copy(update={"type": AuthType.NONE}))
    success("Auth disabled")
