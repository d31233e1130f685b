"""Configuration management with XDG paths and precedence resolution.

This module handles persistent configuration for apium:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.apium/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **User config** -- A single :class:`~apium.models.ViewerConfig` JSON file
  storing defaults (filter field, "All" tab, colour).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, and the user config into the effective
  configuration.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from apium.exceptions import ConfigError
from apium.models import FilterField, ViewerConfig
from apium.output import warning

_APP_NAME = "apium"
_CONFIG_FILENAME = "config.json"

ENV_FILTER_BY = "APIUM_FILTER_BY"
ENV_INCLUDE_ALL = "APIUM_INCLUDE_ALL"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory.

    On Linux/BSD: ``$XDG_CONFIG_HOME/apium/`` (default ``~/.config/apium/``).
    On macOS/Windows: ``~/.apium/``.

    The directory is not created; apium only ever reads from it.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    return _fallback_base_dir()


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/apium/`` (default ``~/.local/share/apium/``).
    On macOS/Windows: ``~/.apium/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- User config ---


def user_config_path() -> Path:
    """Path to the user config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_user_config() -> ViewerConfig:
    """Load the user configuration from the config directory.

    Returns:
        The deserialised :class:`~apium.models.ViewerConfig`. If the file
        does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = user_config_path()
    if not path.is_file():
        return ViewerConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        config = ViewerConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc

    unknown = sorted(set(data) - set(ViewerConfig.model_fields))
    if unknown:
        warning(f"Ignoring unknown keys in {path}: {', '.join(unknown)}")
    return config


# --- Precedence resolution ---


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def resolve_config(
    cli_filter_by: Optional[str] = None,
    cli_include_all: Optional[bool] = None,
    cli_no_color: bool = False,
) -> ViewerConfig:
    """Resolve the viewer config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``--filter-by``, ``--all/--no-all``, ``--no-color``)
        2. Environment variables (``APIUM_FILTER_BY``, ``APIUM_INCLUDE_ALL``)
        3. User config (``~/.config/apium/config.json``)
        4. Defaults

    Raises:
        ConfigError: If any layer supplies an invalid value.
    """
    config = load_user_config()
    updates: dict[str, object] = {}

    env_filter_by = os.environ.get(ENV_FILTER_BY)
    if env_filter_by:
        updates["filter_by"] = env_filter_by.strip().lower()
    env_include_all = os.environ.get(ENV_INCLUDE_ALL)
    if env_include_all:
        updates["include_all"] = _parse_bool(ENV_INCLUDE_ALL, env_include_all)

    if cli_filter_by is not None:
        updates["filter_by"] = cli_filter_by.strip().lower()
    if cli_include_all is not None:
        updates["include_all"] = cli_include_all
    if cli_no_color:
        updates["no_color"] = True

    if not updates:
        return config

    try:
        return ViewerConfig.model_validate({**config.model_dump(), **updates})
    except ValidationError as exc:
        allowed = ", ".join(f.value for f in FilterField)
        raise ConfigError(
            f"Invalid viewer setting (filter_by must be one of: {allowed}): {exc}"
        ) from exc
