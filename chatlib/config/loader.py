"""Configuration file loading.

The file is JSON with a ``log`` section and an ``irc`` section. Keys in the
``irc`` section follow the command-line flag names (``auth-method``,
``tls-ca-certs``...); dashes and underscores are interchangeable and
``host`` is accepted as an alias of ``server``.

Settings are layered, later layers winning: file, then environment
variables (``CHATLIB_IRC_<KEY>``, ``CHATLIB_LOG_LEVEL``), then command-line
overrides.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..constants import CONF_FILE_ENV, CONF_FILE_NAME, CONF_SEARCH_DIRS, ENV_PREFIX
from ..errors import ConfigurationError
from ..logs.logger import logger
from .model import IRCConfig

_IRC_FIELD_MAP = {
    "server": "host",
    "port": "port",
    "nick": "nick",
    "channels": "channels",
    "dial_timeout": "dial_timeout",
    "keepalive": "keepalive",
    "login_delay": "login_delay",
    "msg_buffer_size": "msg_buffer_size",
    "auth_method": "auth_method",
    "auth_password": "auth_password",
}

_TLS_FIELD_MAP = {
    "tls_server_name": "server_name",
    "tls_ca_certs": "ca_certs",
    "tls_client_cert": "client_cert",
    "tls_client_key": "client_key",
    "tls_insecure_skip_verify": "insecure_skip_verify",
}

_KEY_ALIASES = {"host": "server"}

IRC_KEYS = (*_IRC_FIELD_MAP, *_TLS_FIELD_MAP, "no_tls", "enable")
_LIST_KEYS = frozenset({"channels", "tls_ca_certs"})

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True)
class AppConfig:
    """Everything the command line entry point needs."""

    log_level: str = "info"
    irc_enabled: bool = True
    irc: IRCConfig | None = None


def _normalize_keys(section: Mapping[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for k, v in section.items():
        key = str(k).strip().lower().replace("-", "_")
        normalized[_KEY_ALIASES.get(key, key)] = v
    return normalized


def as_bool(value: Any, key: str) -> bool:
    """Interpret a switch given as a bool, a number or a string like ``"false"``.

    Raises:
        ConfigurationError: If the value is not recognizably true or false.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ConfigurationError(
        f"invalid boolean for {key}: {value!r}", data={"key": key}
    )


def irc_settings_from_section(section: Mapping[str, Any]) -> dict[str, Any]:
    """Translate a flag-style ``irc`` section into :class:`IRCConfig` fields.

    TLS is on unless ``no-tls`` is true.
    """
    flat = _normalize_keys(section)
    settings: dict[str, Any] = {}
    for key, field in _IRC_FIELD_MAP.items():
        if key in flat and flat[key] is not None:
            settings[field] = flat[key]

    if not as_bool(flat.get("no_tls", False), "no-tls"):
        tls: dict[str, Any] = {"server_name": flat.get("server")}
        for key, field in _TLS_FIELD_MAP.items():
            if flat.get(key) is not None:
                tls[field] = flat[key]
        if "insecure_skip_verify" in tls:
            tls["insecure_skip_verify"] = as_bool(
                tls["insecure_skip_verify"], "tls-insecure-skip-verify"
            )
        settings["tls"] = tls
    return settings


def env_overrides(
    environ: Mapping[str, str], prefix: str = ENV_PREFIX
) -> tuple[dict[str, Any], str | None]:
    """Collect ``<prefix>_IRC_<KEY>`` settings and ``<prefix>_LOG_LEVEL``.

    List settings (channels, CA certificates) are comma separated.
    """
    irc: dict[str, Any] = {}
    for key in IRC_KEYS:
        value = environ.get(f"{prefix}_IRC_{key.upper()}")
        if value is None:
            continue
        irc[key] = value.split(",") if key in _LIST_KEYS else value
    if irc:
        logger.log_event(
            "config", "env_overrides", level=logging.DEBUG, keys=", ".join(sorted(irc))
        )
    return irc, environ.get(f"{prefix}_LOG_LEVEL")


def find_config_file(
    search_dirs: Iterable[str | Path] | None = None, name: str | None = None
) -> Path | None:
    """First ``name`` found in ``search_dirs`` (``~`` and ``$VARS`` expanded)."""
    dirs = CONF_SEARCH_DIRS if search_dirs is None else search_dirs
    for directory in dirs:
        candidate = Path(os.path.expandvars(str(directory))).expanduser() / (
            name or CONF_FILE_NAME
        )
        if candidate.is_file():
            logger.log_event(
                "config", "file_found", level=logging.DEBUG, path=str(candidate)
            )
            return candidate
    return None


def resolve_config_path(
    explicit: str | Path | None = None, environ: Mapping[str, str] | None = None
) -> Path | None:
    """Explicit path, else ``$CHATLIB_CONF_FILE``, else the directory search."""
    if explicit:
        return Path(explicit)
    env_path = (os.environ if environ is None else environ).get(CONF_FILE_ENV)
    if env_path:
        return Path(env_path)
    return find_config_file()


def read_config_file(path: str | Path) -> dict[str, Any]:
    """Read the raw JSON document.

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a JSON object.
    """
    p = Path(path)
    try:
        with p.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"config file not found: {p}", data={"path": str(p)}
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"config file is not valid JSON: {p}: {e}", data={"path": str(p)}
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"cannot read config file: {p}: {e}", data={"path": str(p)}
        ) from e
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"config file must contain a JSON object: {p}", data={"path": str(p)}
        )
    logger.log_event("config", "file_loaded", level=logging.DEBUG, path=str(p))
    return data


def build_app_config(
    data: Mapping[str, Any],
    irc_overrides: Mapping[str, Any] | None = None,
    log_level: str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """Validate a raw document plus environment and command-line layers.

    ``environ`` is only consulted when given.
    """
    log_section = data.get("log") or {}
    irc_section = data.get("irc") or {}
    if not isinstance(log_section, Mapping) or not isinstance(irc_section, Mapping):
        raise ConfigurationError("'log' and 'irc' sections must be JSON objects")

    merged = _normalize_keys(irc_section)
    env_level: str | None = None
    if environ is not None:
        env_irc, env_level = env_overrides(environ)
        merged.update(_normalize_keys(env_irc))
    if irc_overrides:
        merged.update(
            {k: v for k, v in _normalize_keys(irc_overrides).items() if v is not None}
        )

    level = log_level or env_level or str(log_section.get("level", "info"))
    if not as_bool(merged.pop("enable", True), "enable"):
        logger.log_event("config", "irc_disabled")
        return AppConfig(log_level=level, irc_enabled=False, irc=None)

    irc = IRCConfig.from_dict(irc_settings_from_section(merged))
    return AppConfig(log_level=level, irc_enabled=True, irc=irc)


def load_config(
    path: str | Path | None,
    irc_overrides: Mapping[str, Any] | None = None,
    log_level: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load, merge and validate configuration.

    With ``path`` set to None only the environment and overrides are used.
    """
    data = read_config_file(path) if path is not None else {}
    return build_app_config(data, irc_overrides, log_level, environ=environ)
