"""Saved-spec commands -- bookmark, reopen and forget specs.

Provides the ``specscope specs`` sub-command group. A saved spec keeps the
raw document, so reopening it works offline.
"""

from __future__ import annotations

from datetime import datetime

import typer

from specscope.commands import abort
from specscope.exceptions import NotFoundError, SpecscopeError
from specscope.models import LastSpec
from specscope.output import OutputFormat, get_output, info, success
from specscope.parser.loader import is_url
from specscope.parser.pipeline import parse_spec
from specscope.storage import StorageKey, get_storage
from specscope.workspace import (
    find_saved_spec,
    list_saved_specs,
    load_last_spec,
    recent_specs,
    remove_saved_spec,
    rename_saved_spec,
    save_spec,
)

specs_app = typer.Typer(no_args_is_help=True)


@specs_app.command("list")
def specs_list() -> None:
    """List saved specs."""
    saved = list_saved_specs(get_storage())
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data(
            [s.model_dump(mode="json", exclude={"spec"}) for s in saved]
        )
        return
    if not saved:
        info("No saved specs. Save the current one with 'specscope specs save LABEL'.")
        return
    rows = [
        [
            s.id[:8],
            s.label,
            s.source or "-",
            datetime.fromtimestamp(s.saved_at / 1000).strftime("%Y-%m-%d %H:%M"),
        ]
        for s in saved
    ]
    output.print_table(["ID", "Label", "Source", "Saved"], rows, title="Saved specs")


@specs_app.command("save")
def specs_save(label: str = typer.Argument(help="Label for the current spec.")) -> None:
    """Save the current spec under LABEL."""
    storage = get_storage()
    last = load_last_spec(storage)
    if last is None:
        abort(NotFoundError("No spec loaded. Run 'specscope load <url-or-file>' first."))
    saved = save_spec(storage, label, last)
    success(f"Saved '{label}' ({saved.id[:8]})")


@specs_app.command("open")
def specs_open(ref: str = typer.Argument(help="Saved spec id, id prefix, or label.")) -> None:
    """Make a saved spec the current spec again."""
    storage = get_storage()
    try:
        saved = find_saved_spec(storage, ref)
        parsed = parse_spec(saved.spec, saved.source if is_url(saved.source) else "")
    except SpecscopeError as exc:
        abort(exc)

    last = LastSpec(spec=saved.spec, source=saved.source, base_url=parsed.base_url)
    storage.set(StorageKey.LAST_SPEC, last.model_dump(mode="json"))
    success(f"Opened '{saved.label}' ({len(parsed.endpoints)} endpoints)")


@specs_app.command("rename")
def specs_rename(
    ref: str = typer.Argument(help="Saved spec id, id prefix, or label."),
    label: str = typer.Argument(help="New label."),
) -> None:
    """Rename a saved spec."""
    try:
        rename_saved_spec(get_storage(), ref, label)
    except SpecscopeError as exc:
        abort(exc)
    success(f"Renamed to '{label}'")


@specs_app.command("remove")
def specs_remove(ref: str = typer.Argument(help="Saved spec id, id prefix, or label.")) -> None:
    """Delete a saved spec."""
    try:
        removed = remove_saved_spec(get_storage(), ref)
    except SpecscopeError as exc:
        abort(exc)
    success(f"Removed '{removed.label}'")


@specs_app.command("recent")
def specs_recent() -> None:
    """List recently loaded spec URLs, most recent first."""
    urls = recent_specs(get_storage())
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data(urls)
        return
    if not urls:
        info("No recently loaded URLs.")
        return
    for url in urls:
        output.print_data(url)
