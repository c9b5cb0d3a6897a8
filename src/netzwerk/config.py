"""Configuration loading with XDG paths and precedence resolution.

This module handles all configuration for netzwerk clients:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.netzwerk/`` on macOS and Windows. See :func:`get_config_dir`.
* **Client config** -- a JSON file deserialised into a
  :class:`~netzwerk.models.ClientConfig`. See :func:`load_client_config`.
* **Precedence resolution** -- :func:`resolve_config` merges explicit
  arguments, environment variables, project-local config and user config
  into the effective configuration.
* **Credential resolution** -- :func:`resolve_credential` reads secrets
  from env vars, files, or interactive prompts for the auth plugins.

Nothing here writes to disk; the library keeps no persisted state.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
from pathlib import Path
from typing import Any, Optional

from netzwerk.exceptions import ConfigError
from netzwerk.models import ClientConfig

_APP_NAME = "netzwerk"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "netzwerk.json"

ENV_CONFIG = "NETZWERK_CONFIG"
ENV_ENABLE_LOG = "NETZWERK_ENABLE_LOG"
ENV_TIMEOUT = "NETZWERK_TIMEOUT"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the user configuration directory.

    On Linux/BSD: ``$XDG_CONFIG_HOME/netzwerk/`` (default ``~/.config/netzwerk/``).
    On macOS/Windows: ``~/.netzwerk/``.

    The directory is not created; a missing directory simply means there is
    no user config.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        return base / _APP_NAME
    return Path.home() / f".{_APP_NAME}"


# --- Loading ---


def _read_json(path: Path, what: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


def load_client_config(path: str | Path) -> ClientConfig:
    """Load and validate a client configuration file.

    Args:
        path: Path to a JSON document matching :class:`~netzwerk.models.ClientConfig`.

    Returns:
        The deserialised configuration.

    Raises:
        ConfigError: If the file is missing, contains invalid JSON, or fails
            Pydantic validation.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    data = _read_json(path, "client config")
    try:
        return ClientConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid client config at {path}: {exc}") from exc


def load_user_config() -> Optional[dict[str, Any]]:
    """Load ``<config_dir>/config.json`` as a raw dict, or ``None`` if absent."""
    path = get_config_dir() / _CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_json(path, "user config")


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./netzwerk.json``.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_json(path, "project config")


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* into a copy of *base*."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"Environment variable {name} must be a boolean, got {raw!r}")


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {name} must be a number, got {raw!r}") from exc


# --- Precedence resolution ---


def resolve_config(
    config_path: Optional[str | Path] = None,
    enable_log: Optional[bool] = None,
    timeout: Optional[float] = None,
) -> ClientConfig:
    """Resolve the effective client configuration.

    Precedence (high to low):
        1. Explicit arguments (``enable_log``, ``timeout``)
        2. Environment variables (``NETZWERK_ENABLE_LOG``, ``NETZWERK_TIMEOUT``)
        3. An explicit config file (``config_path`` or ``NETZWERK_CONFIG``)
        4. Project config (``./netzwerk.json``)
        5. User config (``~/.config/netzwerk/config.json``)
        6. Defaults

    Raises:
        ConfigError: If any layer is unreadable or the merged result is invalid.
    """
    data: dict[str, Any] = {}

    user = load_user_config()
    if user is not None:
        data = _merge(data, user)

    project = load_project_config()
    if project is not None:
        data = _merge(data, project)

    explicit_path = config_path or os.environ.get(ENV_CONFIG)
    if explicit_path:
        path = Path(explicit_path).expanduser()
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        data = _merge(data, _read_json(path, "client config"))

    env_log = os.environ.get(ENV_ENABLE_LOG)
    if env_log:
        data["enable_log"] = _parse_bool(ENV_ENABLE_LOG, env_log)
    env_timeout = os.environ.get(ENV_TIMEOUT)
    if env_timeout:
        data = _merge(data, {"request": {"timeout": _parse_float(ENV_TIMEOUT, env_timeout)}})

    if enable_log is not None:
        data["enable_log"] = enable_log
    if timeout is not None:
        data = _merge(data, {"request": {"timeout": timeout}})

    try:
        return ClientConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid client configuration: {exc}") from exc


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts user interactively (requires a TTY)

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Enter credential: ")

    raise ConfigError(f"Unknown credential source format: {source}")
