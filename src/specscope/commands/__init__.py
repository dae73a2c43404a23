"""Built-in CLI sub-commands for specscope.

* :mod:`~specscope.commands.spec` -- ``load``, ``info``, ``endpoints``,
  ``show`` and ``example`` on the current spec.
* :mod:`~specscope.commands.specs` -- saved and recent specs.
* :mod:`~specscope.commands.env` -- template variables.
* :mod:`~specscope.commands.auth` -- auth settings.
* :mod:`~specscope.commands.baseurl` -- named base URLs.
* :mod:`~specscope.commands.send` -- build and send a request.
* :mod:`~specscope.commands.history` -- sent requests.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``env`` and ``auth``) or plain callback functions
registered directly on the root app (for single commands like ``send``).
"""

from __future__ import annotations

from typing import NoReturn

import typer

from specscope.exceptions import InvalidUsageError, SpecscopeError
from specscope.models import GlobalConfig
from specscope.output import error


def abort(exc: SpecscopeError) -> NoReturn:
    """Print *exc* and exit with its exit code."""
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def parse_pairs(values: list[str] | None, flag: str) -> dict[str, str]:
    """Parse repeated ``name=value`` options into a dict.

    Raises:
        InvalidUsageError: If a value has no ``=`` or an empty name.
    """
    pairs: dict[str, str] = {}
    for item in values or []:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise InvalidUsageError(f"Expected {flag} name=value, got '{item}'")
        pairs[name] = value
    return pairs


def context_config(ctx: typer.Context) -> GlobalConfig:
    """The configuration resolved by the root callback, or defaults."""
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    config = obj.get("config")
    return config if isinstance(config, GlobalConfig) else GlobalConfig()


def context_base_url(ctx: typer.Context) -> str | None:
    """The ``--base-url`` / ``SPECSCOPE_BASE_URL`` override, if any."""
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    return obj.get("base_url")
