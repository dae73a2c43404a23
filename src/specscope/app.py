"""Typer application and CLI entry point for specscope.

This module wires together the top-level Typer application and registers
the built-in sub-commands (``load``, ``info``, ``endpoints``, ``show``,
``example``, ``send`` and the ``specs``, ``env``, ``auth``, ``baseurl``
and ``history`` groups).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`specscope.config`: Global configuration resolution.
    :mod:`specscope.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from specscope import __version__
from specscope.commands.auth import auth_app
from specscope.commands.baseurl import baseurl_app
from specscope.commands.env import env_app
from specscope.commands.history import history_app
from specscope.commands.send import send_command
from specscope.commands.spec import (
    endpoints_command,
    example_command,
    info_command,
    load_command,
    show_command,
)
from specscope.commands.specs import specs_app
from specscope.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="specscope",
    help="Browse OpenAPI 3.x / Swagger 2.0 specs and send requests to their endpoints.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("load")(load_command)
app.command("info")(info_command)
app.command("endpoints")(endpoints_command)
app.command("show")(show_command)
app.command("example")(example_command)
app.command("send")(send_command)
app.add_typer(specs_app, name="specs", help="Saved and recent specs.")
app.add_typer(env_app, name="env", help="Template variables.")
app.add_typer(auth_app, name="auth", help="Authentication settings.")
app.add_typer(baseurl_app, name="baseurl", help="Named base URLs.")
app.add_typer(history_app, name="history", help="Request history.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"specscope {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Send requests here instead of the spec's base URL."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Resolves the configuration, initialises the global
    :class:`~specscope.output.OutputManager` and stores the configuration
    and base URL override in ``ctx.obj`` for the sub-commands.
    """
    from specscope.config import resolve_config
    from specscope.exceptions import ConfigError
    from specscope.output import OutputFormat, OutputManager, error, set_output

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    try:
        config, base_url_override = resolve_config(cli_format=cli_format, cli_base_url=base_url)
        fmt = OutputFormat(config.output.format)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except ValueError:
        error(f"Unknown output format '{config.output.format}'")
        raise typer.Exit(code=2) from None

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["base_url"] = base_url_override


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback under the data directory and return its path."""
    from specscope.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``specscope`` console script.

    Unhandled :class:`~specscope.exceptions.SpecscopeError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce a
    crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specscope.exceptions import SpecscopeError
        from specscope.output import error

        if isinstance(exc, SpecscopeError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
