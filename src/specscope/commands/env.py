"""Environment commands -- manage ``{{variable}}`` values.

Provides the ``specscope env`` sub-command group. Enabled variables are
substituted into URLs, headers and bodies by ``specscope send``.

Typical workflow::

    specscope env set token abc123
    specscope send GET-/me -H 'Authorization=Bearer {{token}}'
"""

from __future__ import annotations

import typer

from specscope.commands import abort
from specscope.environment import (
    current_variables,
    load_variables,
    set_variable,
    toggle_variable,
    unset_variable,
)
from specscope.exceptions import InvalidUsageError, NotFoundError, SpecscopeError
from specscope.interpolate import BUILT_IN_VARIABLES, variable_info
from specscope.output import OutputFormat, get_output, info, success
from specscope.storage import get_storage

env_app = typer.Typer(no_args_is_help=True)


@env_app.command("list")
def env_list() -> None:
    """List user-defined variables."""
    variables = load_variables(get_storage())
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data([v.model_dump() for v in variables])
        return
    if not variables:
        info("No variables defined. Add one with 'specscope env set KEY VALUE'.")
        return
    rows = [[v.key, v.value, "yes" if v.enabled else "no"] for v in variables]
    output.print_table(["Key", "Value", "Enabled"], rows, title="Environment")


@env_app.command("set")
def env_set(
    key: str = typer.Argument(help="Variable name (letters, digits, underscore)."),
    value: str = typer.Argument(help="Variable value."),
) -> None:
    """Create or replace a variable."""
    if not key.replace("_", "").isalnum():
        abort(InvalidUsageError(f"Invalid variable name '{key}': use letters, digits and underscores"))
    set_variable(get_storage(), key, value)
    success(f"Set {{{{{key}}}}}")


@env_app.command("unset")
def env_unset(key: str = typer.Argument(help="Variable name.")) -> None:
    """Delete a variable."""
    try:
        unset_variable(get_storage(), key)
    except SpecscopeError as exc:
        abort(exc)
    success(f"Removed {key}")


@env_app.command("toggle")
def env_toggle(key: str = typer.Argument(help="Variable name.")) -> None:
    """Enable or disable a variable without deleting it."""
    try:
        variable = toggle_variable(get_storage(), key)
    except SpecscopeError as exc:
        abort(exc)
    success(f"{key} {'enabled' if variable.enabled else 'disabled'}")


@env_app.command("show")
def env_show(key: str = typer.Argument(help="Variable name, or a built-in like '$date'.")) -> None:
    """Show what ``{{KEY}}`` would expand to."""
    details = variable_info(key, current_variables(get_storage()))
    if details is None:
        abort(NotFoundError(f"No enabled variable or built-in named '{key}'"))

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data({"key": key, **details})
        return
    rows = [
        ["Key", key],
        ["Value", str(details["value"])],
        ["Source", "built-in" if details["is_built_in"] else "environment"],
    ]
    if "description" in details:
        rows.append(["Description", str(details["description"])])
    output.print_table(["Field", "Value"], rows, title="Variable")


@env_app.command("builtins")
def env_builtins() -> None:
    """List the built-in ``{{$...}}`` variables."""
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data(
            [{"key": v.key, "description": v.description} for v in BUILT_IN_VARIABLES]
        )
        return
    rows = [[v.key, v.description, v.generate()] for v in BUILT_IN_VARIABLES]
    output.print_table(["Variable", "Description", "Sample"], rows, title="Built-in variables")
