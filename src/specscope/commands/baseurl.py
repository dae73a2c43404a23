"""Base URL commands -- send requests to another server.

Provides the ``specscope baseurl`` sub-command group. While a base URL is
active it replaces the one derived from the spec; ``specscope baseurl use
--spec`` goes back to the spec's own.
"""

from __future__ import annotations

from typing import Optional

import typer

from specscope.baseurls import (
    DEFAULT_COLOR,
    active_base_url,
    add_base_url,
    find_base_url,
    list_base_urls,
    remove_base_url,
    set_active,
    update_base_url,
)
from specscope.commands import abort
from specscope.exceptions import InvalidUsageError, SpecscopeError
from specscope.output import OutputFormat, get_output, info, success
from specscope.storage import get_storage

baseurl_app = typer.Typer(no_args_is_help=True)


@baseurl_app.command("list")
def baseurl_list() -> None:
    """List base URLs; the active one is marked with ``*``."""
    storage = get_storage()
    configs = list_base_urls(storage)
    active = active_base_url(storage)
    active_id = active.id if active is not None else None

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data(
            [{**c.model_dump(), "active": c.id == active_id} for c in configs]
        )
        return
    if not configs:
        info("No base URLs. Add one with 'specscope baseurl add LABEL URL'.")
        return
    rows = [
        ["*" if c.id == active_id else "", c.id[:8], c.label, c.url, c.color] for c in configs
    ]
    output.print_table(["", "ID", "Label", "URL", "Color"], rows, title="Base URLs")


@baseurl_app.command("add")
def baseurl_add(
    label: str = typer.Argument(help="Display label, e.g. 'staging'."),
    url: str = typer.Argument(help="Base URL, e.g. 'https://staging.example.com/v1'."),
    color: str = typer.Option(DEFAULT_COLOR, "--color", help="Hex colour code."),
    use: bool = typer.Option(False, "--use", help="Make it active right away."),
) -> None:
    """Add a base URL."""
    if not url.startswith(("http://", "https://")):
        abort(InvalidUsageError(f"Base URL must start with http:// or https://, got '{url}'"))
    storage = get_storage()
    config = add_base_url(storage, label, url, color)
    if use:
        set_active(storage, config.id)
    success(f"Added '{label}' ({config.id[:8]})" + (" and made it active" if use else ""))


@baseurl_app.command("update")
def baseurl_update(
    ref: str = typer.Argument(help="Base URL id or label."),
    label: Optional[str] = typer.Option(None, "--label", help="New label."),
    url: Optional[str] = typer.Option(None, "--url", help="New URL."),
    color: Optional[str] = typer.Option(None, "--color", help="New colour."),
) -> None:
    """Change a base URL's label, URL or colour."""
    storage = get_storage()
    try:
        config = find_base_url(storage, ref)
        update_base_url(storage, config.id, label=label, url=url, color=color)
    except SpecscopeError as exc:
        abort(exc)
    success(f"Updated '{label or config.label}'")


@baseurl_app.command("use")
def baseurl_use(
    ref: Optional[str] = typer.Argument(None, help="Base URL id or label."),
    spec: bool = typer.Option(False, "--spec", help="Go back to the spec's base URL."),
) -> None:
    """Make a base URL active."""
    storage = get_storage()
    if spec or ref is None:
        set_active(storage, None)
        success("Using the spec's base URL")
        return
    try:
        config = find_base_url(storage, ref)
    except SpecscopeError as exc:
        abort(exc)
    set_active(storage, config.id)
    success(f"Using '{config.label}' ({config.url})")


@baseurl_app.command("remove")
def baseurl_remove(ref: str = typer.Argument(help="Base URL id or label.")) -> None:
    """Delete a base URL."""
    storage = get_storage()
    try:
        config = find_base_url(storage, ref)
    except SpecscopeError as exc:
        abort(exc)
    remove_base_url(storage, config.id)
    success(f"Removed '{config.label}'")
