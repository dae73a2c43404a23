"""User-defined template variables, persisted through :mod:`specscope.storage`.

Stored as ``{"variables": [{"key", "value", "enabled"}, ...]}``. Keys are
unique: setting an existing key replaces its value in place and re-enables
it.
"""

from __future__ import annotations

from pydantic import ValidationError

from specscope.exceptions import NotFoundError
from specscope.interpolate import active_variables
from specscope.models import EnvVariable
from specscope.output import debug
from specscope.storage import Storage, StorageKey


def load_variables(storage: Storage) -> list[EnvVariable]:
    raw = storage.get_dict(StorageKey.ENV).get("variables")
    if not isinstance(raw, list):
        return []
    variables: list[EnvVariable] = []
    for item in raw:
        try:
            variables.append(EnvVariable.model_validate(item))
        except ValidationError as exc:
            debug(f"Skipping invalid environment variable: {exc}")
    return variables


def save_variables(storage: Storage, variables: list[EnvVariable]) -> None:
    storage.set(StorageKey.ENV, {"variables": [v.model_dump() for v in variables]})


def set_variable(storage: Storage, key: str, value: str) -> EnvVariable:
    variables = load_variables(storage)
    new = EnvVariable(key=key, value=value, enabled=True)
    for index, variable in enumerate(variables):
        if variable.key == key:
            variables[index] = new
            break
    else:
        variables.append(new)
    save_variables(storage, variables)
    return new


def unset_variable(storage: Storage, key: str) -> None:
    """Raises :class:`~specscope.exceptions.NotFoundError` for an unknown key."""
    variables = load_variables(storage)
    remaining = [v for v in variables if v.key != key]
    if len(remaining) == len(variables):
        raise NotFoundError(f"No environment variable named '{key}'")
    save_variables(storage, remaining)


def toggle_variable(storage: Storage, key: str) -> EnvVariable:
    """Flip ``enabled`` on *key* and return the updated variable."""
    variables = load_variables(storage)
    for index, variable in enumerate(variables):
        if variable.key == key:
            variables[index] = variable.model_copy(update={"enabled": not variable.enabled})
            save_variables(storage, variables)
            return variables[index]
    raise NotFoundError(f"No environment variable named '{key}'")


def current_variables(storage: Storage) -> dict[str, str]:
    """The enabled variables as a ``{key: value}`` mapping."""
    return active_variables(load_variables(storage))
