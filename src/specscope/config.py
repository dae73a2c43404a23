"""Where specscope keeps its files, and which settings win.

Three concerns live here:

* **Directories** -- XDG Base Directory paths on Linux/BSD,
  ``~/.specscope/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Global config** -- A single :class:`~specscope.models.GlobalConfig`
  JSON file storing defaults (output format, timeouts, history limits).
* **Effective settings** -- :func:`resolve_config` layers CLI flags,
  environment variables and the config file into the effective settings.

The workspace itself (env variables, auth, saved specs, history) lives in
:mod:`specscope.storage`, under the data directory.

The config file is written to a temporary file and renamed into place
(:func:`_atomic_write`); readers never see a partial file.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from specscope.exceptions import ConfigError
from specscope.models import GlobalConfig

_APP_NAME = "specscope"
_CONFIG_FILENAME = "config.json"

ENV_FORMAT = "SPECSCOPE_FORMAT"
ENV_FETCH_TIMEOUT = "SPECSCOPE_FETCH_TIMEOUT"
ENV_BASE_URL = "SPECSCOPE_BASE_URL"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True on Linux and the BSDs."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, else ``$HOME/<segments>``."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/specscope/`` (default
    ``~/.config/specscope/``). On macOS/Windows: ``~/.specscope/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CACHE_HOME/specscope/``. On macOS/Windows:
    ``~/.specscope/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (workspace store, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specscope/`` (default
    ``~/.local/share/specscope/``). On macOS/Windows: ``~/.specscope/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* through a sibling temp file and ``os.replace``.

    The temp file lives in the target directory so the rename stays on one
    filesystem. On any failure the temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration, or defaults when no file exists.

    Raises:
        ConfigError: If the file exists but is not valid JSON or fails
            validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist *config* atomically."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def resolve_config(
    cli_format: Optional[str] = None,
    cli_base_url: Optional[str] = None,
) -> tuple[GlobalConfig, Optional[str]]:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_format``, ``cli_base_url``)
        2. Environment variables (``SPECSCOPE_FORMAT``,
           ``SPECSCOPE_FETCH_TIMEOUT``, ``SPECSCOPE_BASE_URL``)
        3. User config (``~/.config/specscope/config.json``)
        4. Defaults

    Returns:
        A tuple of ``(global_config, base_url_override_or_None)``. The base
        URL override, when set, wins over both the spec's derived base URL
        and the active stored base URL.

    Raises:
        ConfigError: If the config file or ``SPECSCOPE_FETCH_TIMEOUT`` is
            invalid.
    """
    config = load_global_config()

    env_format = os.environ.get(ENV_FORMAT)
    if env_format:
        config.output.format = env_format

    env_timeout = os.environ.get(ENV_FETCH_TIMEOUT)
    if env_timeout:
        try:
            config.request.fetch_timeout = float(env_timeout)
        except ValueError as exc:
            raise ConfigError(
                f"{ENV_FETCH_TIMEOUT} must be a number of seconds, got {env_timeout!r}"
            ) from exc

    if cli_format is not None:
        config.output.format = cli_format

    base_url = os.environ.get(ENV_BASE_URL) or None
    if cli_base_url is not None:
        base_url = cli_base_url

    return config, base_url
