"""Transport settings resolution with XDG paths and precedence rules.

reru writes nothing to disk, but it reads defaults for the one-off
:class:`httpx.Client` it builds when the caller does not supply one:

* **Config file** -- an optional JSON document holding
  :class:`~reru.models.RequestConfig` fields. Located at
  ``$XDG_CONFIG_HOME/reru/config.json`` (default ``~/.config/reru/config.json``)
  unless ``RERU_CONFIG`` points elsewhere. See :func:`load_config_file`.
* **Environment** -- ``RERU_TIMEOUT``, ``RERU_VERIFY_SSL``,
  ``RERU_FOLLOW_REDIRECTS`` and ``RERU_HTTP2``. See :func:`load_env_config`.
* **Precedence resolution** -- :func:`resolve_request_config` merges explicit
  overrides, environment variables, the config file and model defaults.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from reru.exceptions import ConfigError
from reru.models import RequestConfig

logger = logging.getLogger(__name__)

_APP_NAME = "reru"
_CONFIG_FILENAME = "config.json"

_ENV_CONFIG_PATH = "RERU_CONFIG"
_ENV_FIELDS = {
    "RERU_TIMEOUT": "timeout",
    "RERU_VERIFY_SSL": "verify_ssl",
    "RERU_FOLLOW_REDIRECTS": "follow_redirects",
    "RERU_HTTP2": "http2",
}

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


# --- Paths ---


def get_config_path() -> Path:
    """Return the path of the user config file (which may not exist).

    ``RERU_CONFIG`` wins; otherwise ``$XDG_CONFIG_HOME/reru/config.json``
    with ``~/.config`` as the XDG fallback.
    """
    explicit = os.environ.get(_ENV_CONFIG_PATH, "")
    if explicit:
        return Path(explicit).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / _APP_NAME / _CONFIG_FILENAME


# --- Sources ---


def load_config_file(path: Optional[Path] = None) -> dict[str, Any]:
    """Load raw settings from the user config file.

    Args:
        path: File to read. Defaults to :func:`get_config_path`.

    Returns:
        The parsed JSON object, or an empty dict if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = path or get_config_path()
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Invalid config file at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file at {path}: expected a JSON object")
    logger.debug("Loaded config file %s", path)
    return data


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def load_env_config() -> dict[str, Any]:
    """Collect settings from ``RERU_*`` environment variables.

    Empty variables are ignored.

    Raises:
        ConfigError: If a variable holds a value of the wrong shape.
    """
    settings: dict[str, Any] = {}
    for env_var, field in _ENV_FIELDS.items():
        raw = os.environ.get(env_var, "")
        if not raw:
            continue
        if field == "timeout":
            try:
                settings[field] = float(raw)
            except ValueError as exc:
                raise ConfigError(f"{env_var} must be a number, got {raw!r}") from exc
        else:
            settings[field] = _parse_bool(env_var, raw)
    return settings


# --- Precedence resolution ---


def resolve_request_config(**overrides: Any) -> RequestConfig:
    """Resolve transport settings with the full precedence chain.

    Precedence (high to low):
        1. Keyword *overrides* whose value is not ``None``
        2. Environment variables (``RERU_TIMEOUT``, ...)
        3. User config file
        4. :class:`~reru.models.RequestConfig` defaults

    Raises:
        ConfigError: If any source holds invalid values.
    """
    merged: dict[str, Any] = {}
    merged.update(load_config_file())
    merged.update(load_env_config())
    merged.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return RequestConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid request config: {exc}") from exc
