"""History commands -- review requests sent with ``specscope send``.

Provides the ``specscope history`` sub-command group. Entries are listed
newest first; ``show`` prints the stored request and response.
"""

from __future__ import annotations

import typer

from specscope.commands import abort
from specscope.commands.send import print_response
from specscope.exceptions import SpecscopeError
from specscope.history import clear_history, get_history_entry, list_history, remove_entry
from specscope.output import OutputFormat, get_output, info, success
from specscope.storage import get_storage

history_app = typer.Typer(no_args_is_help=True)


@history_app.command("list")
def history_list(
    limit: int = typer.Option(20, "--limit", "-l", help="Show at most this many entries."),
) -> None:
    """List sent requests, newest first."""
    entries = list_history(get_storage())[:limit]
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data(
            [e.model_dump(mode="json", exclude={"response", "request"}) for e in entries]
        )
        return
    if not entries:
        info("No requests sent yet.")
        return
    rows = [
        [
            e.id[:8],
            e.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            e.method.value,
            e.path,
            str(e.status),
            f"{e.time:.0f} ms",
        ]
        for e in entries
    ]
    output.print_table(["ID", "Time", "Method", "Path", "Status", "Duration"], rows, title="History")


@history_app.command("show")
def history_show(entry_id: str = typer.Argument(help="Entry id or unique id prefix.")) -> None:
    """Show one entry's request and response."""
    try:
        entry = get_history_entry(get_storage(), entry_id)
    except SpecscopeError as exc:
        abort(exc)

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data(entry.model_dump(mode="json"))
        return
    info(f"{entry.method.value} {entry.url}")
    for name, value in entry.request.headers.items():
        info(f"  {name}: {value}")
    if entry.request.body:
        info(entry.request.body)
    print_response(entry.response)


@history_app.command("remove")
def history_remove(entry_id: str = typer.Argument(help="Entry id or unique id prefix.")) -> None:
    """Delete one entry."""
    storage = get_storage()
    try:
        entry = get_history_entry(storage, entry_id)
    except SpecscopeError as exc:
        abort(exc)
    remove_entry(storage, entry.id)
    success(f"Removed {entry.id[:8]}")


@history_app.command("clear")
def history_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Delete all entries."""
    if not yes:
        typer.confirm("Delete the whole request history?", abort=True)
    clear_history(get_storage())
    success("History cleared")
