"""Configuration models, file loading and TLS context construction."""

from .loader import (  # noqa: F401
    AppConfig,
    build_app_config,
    find_config_file,
    load_config,
    resolve_config_path,
)
from .model import AuthMethod, IRCConfig, TLSSettings  # noqa: F401
from .tls import build_ssl_context  # noqa: F401

__all__ = [
    "AppConfig",
    "AuthMethod",
    "IRCConfig",
    "TLSSettings",
    "build_app_config",
    "build_ssl_context",
    "find_config_file",
    "load_config",
    "resolve_config_path",
]
