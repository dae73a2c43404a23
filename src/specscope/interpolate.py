"""``{{variable}}`` interpolation for URLs, headers and bodies.

Two kinds of names are recognised inside ``{{...}}``:

* **Built-ins** start with ``$`` and are regenerated on every substitution
  (``{{$timestamp}}``, ``{{$randomUUID}}``, ...). See :data:`BUILT_IN_VARIABLES`.
* **User variables** come from the enabled
  :class:`~specscope.models.EnvVariable` entries of the workspace.

During interpolation a built-in wins over a user variable with the same
name. Names that resolve to neither are left in place untouched so they can
be reported by :func:`find_unresolved_variables`.
"""

from __future__ import annotations

import random
import re
import string
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from specscope.models import EnvVariable

VARIABLE_PATTERN = re.compile(r"\{\{(\$?\w+)\}\}")

_LEGACY_RANDOM_ID = "$randomId"


@dataclass(frozen=True)
class BuiltInVariable:
    """A ``$``-prefixed variable whose value is generated on demand."""

    key: str
    description: str
    generate: Callable[[], str]


def _iso_now() -> str:
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def _random_string() -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(random.choice(alphabet) for _ in range(8))


BUILT_IN_VARIABLES: tuple[BuiltInVariable, ...] = (
    BuiltInVariable(
        "$timestamp",
        "Current Unix timestamp in milliseconds",
        lambda: str(int(datetime.now(timezone.utc).timestamp() * 1000)),
    ),
    BuiltInVariable("$isoTimestamp", "Current ISO 8601 timestamp", _iso_now),
    BuiltInVariable(
        "$date",
        "Today's date (YYYY-MM-DD)",
        lambda: datetime.now(timezone.utc).strftime("%Y-%m-%d"),
    ),
    BuiltInVariable(
        "$randomInt",
        "Random integer between 0-1000",
        lambda: str(random.randint(0, 1000)),
    ),
    BuiltInVariable("$randomUUID", "Random UUID v4", lambda: str(uuid.uuid4())),
    BuiltInVariable(
        "$randomString", "Random alphanumeric string (8 chars)", _random_string
    ),
    BuiltInVariable(
        "$randomEmail",
        "Random email address",
        lambda: f"user{random.randint(0, 9999)}@example.com",
    ),
    BuiltInVariable(
        "$randomBoolean",
        "Random true/false",
        lambda: "true" if random.random() > 0.5 else "false",
    ),
)

_BUILT_INS = {var.key: var for var in BUILT_IN_VARIABLES}


def get_built_in(name: str) -> Optional[BuiltInVariable]:
    """Look up a built-in by name; ``$randomId`` is an alias of ``$randomUUID``."""
    if name == _LEGACY_RANDOM_ID:
        return _BUILT_INS["$randomUUID"]
    return _BUILT_INS.get(name)


def is_built_in(name: str) -> bool:
    return get_built_in(name) is not None


def interpolate(text: str, variables: dict[str, str]) -> str:
    """Replace every ``{{name}}`` in *text*.

    Example::

        interpolate("{{host}}/users/{{id}}", {"host": "https://x.dev"})
        # 'https://x.dev/users/{{id}}'
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        built_in = get_built_in(name)
        if built_in is not None:
            return built_in.generate()
        if name in variables:
            return variables[name]
        return match.group(0)

    return VARIABLE_PATTERN.sub(_replace, text)


def find_unresolved_variables(text: str, variables: dict[str, str]) -> list[str]:
    """Names in *text* that are neither built-ins nor in *variables*, deduplicated."""
    return [
        name
        for name in extract_variable_names(text)
        if not is_built_in(name) and name not in variables
    ]


def extract_variable_names(text: str) -> list[str]:
    """Every ``{{name}}`` in *text*, first occurrence order, without repeats."""
    return list(dict.fromkeys(VARIABLE_PATTERN.findall(text)))


def has_variables(text: str) -> bool:
    return VARIABLE_PATTERN.search(text) is not None


def interpolate_request(
    url: str,
    headers: dict[str, str],
    body: str,
    variables: dict[str, str],
) -> tuple[str, dict[str, str], str]:
    """Interpolate a request's URL, header names and values, and body."""
    interpolated_headers = {
        interpolate(key, variables): interpolate(value, variables)
        for key, value in headers.items()
    }
    return (
        interpolate(url, variables),
        interpolated_headers,
        interpolate(body, variables),
    )


def active_variables(env_vars: Iterable[EnvVariable]) -> dict[str, str]:
    """Map the enabled variables by key; a later duplicate key wins."""
    return {var.key: var.value for var in env_vars if var.enabled}


def variable_info(name: str, variables: dict[str, str]) -> Optional[dict[str, object]]:
    """Describe *name* for display.

    Unlike :func:`interpolate`, a user variable is reported before a built-in
    of the same name, since this shows what the user defined.
    """
    if name in variables:
        return {"value": variables[name], "is_built_in": False}
    built_in = get_built_in(name)
    if built_in is not None:
        return {
            "value": built_in.generate(),
            "is_built_in": True,
            "description": built_in.description,
        }
    return None
