from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ..constants import (
    DEFAULT_DIAL_TIMEOUT_SECONDS,
    DEFAULT_KEEPALIVE_SECONDS,
    DEFAULT_LOGIN_DELAY_SECONDS,
    DEFAULT_MSG_BUFFER_SIZE,
    DEFAULT_NICK,
    DEFAULT_PLAIN_PORT,
    DEFAULT_REALNAME,
    DEFAULT_TLS_PORT,
)
from ..errors import ConfigurationError


class AuthMethod(str, Enum):
    """Authentication schemes a connection can be configured with.

    Only recorded; the client does not execute any of them.
    """

    NONE = "none"
    NICKSERV = "nickserv"
    SASL = "sasl"
    CERTFP = "certfp"


def _normalize_channels(channels: Any) -> tuple[str, ...]:
    """Strip blanks and drop duplicates while keeping configuration order."""
    if channels is None:
        return ()
    if isinstance(channels, str):
        channels = channels.split(",")
    if not isinstance(channels, list | tuple):
        raise ValueError("channels must be a list")
    cleaned = (str(c).strip() for c in channels if c is not None)
    return tuple(dict.fromkeys(c for c in cleaned if c))


def _normalize_paths(paths: Any) -> tuple[str, ...]:
    """File paths are taken verbatim; a single string is one path."""
    if paths is None:
        return ()
    if isinstance(paths, str | Path):
        paths = [paths]
    if not isinstance(paths, list | tuple):
        raise ValueError("ca_certs must be a path or a list of paths")
    cleaned = (str(p).strip() for p in paths if p is not None)
    return tuple(dict.fromkeys(p for p in cleaned if p))


class TLSSettings(BaseModel):
    """Transport encryption settings.

    Attributes:
        server_name: Name verified against the server certificate. Defaults
            to the connection host when unset.
        ca_certs: PEM files forming the trusted root set. Empty means the
            system defaults.
        client_cert: Client certificate for mutual authentication.
        client_key: Key matching ``client_cert``.
        insecure_skip_verify: Disable certificate and hostname verification.
    """

    model_config = ConfigDict(frozen=True)

    server_name: str | None = None
    ca_certs: tuple[str, ...] = ()
    client_cert: str | None = None
    client_key: str | None = None
    insecure_skip_verify: bool = False

    @field_validator("ca_certs", mode="before")
    @classmethod
    def validate_ca_certs(cls, v: Any) -> tuple[str, ...]:
        return _normalize_paths(v)

    @model_validator(mode="after")
    def validate_client_pair(self) -> TLSSettings:
        if bool(self.client_cert) != bool(self.client_key):
            raise ValueError("tls client certificate and key must be given together")
        return self


class IRCConfig(BaseModel):
    """Immutable connection configuration.

    Build it with :meth:`from_dict` to get a :class:`ConfigurationError`
    instead of a pydantic ``ValidationError`` on bad input. A missing port
    resolves to the TLS or plaintext default depending on ``tls``.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="", validate_default=True)
    port: int = Field(default=0, ge=1, le=65535)
    nick: str = Field(default=DEFAULT_NICK, min_length=1)
    channels: tuple[str, ...] = ()
    dial_timeout: float = Field(default=DEFAULT_DIAL_TIMEOUT_SECONDS, gt=0)
    keepalive: float = Field(default=DEFAULT_KEEPALIVE_SECONDS, ge=0)
    login_delay: float = Field(default=DEFAULT_LOGIN_DELAY_SECONDS, ge=0)
    msg_buffer_size: int = Field(default=DEFAULT_MSG_BUFFER_SIZE, gt=0)
    tls: TLSSettings | None = None
    auth_method: AuthMethod = AuthMethod.NONE
    auth_password: str | None = None

    @model_validator(mode="before")
    @classmethod
    def resolve_port(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and not data.get("port"):
            data = dict(data)
            data["port"] = (
                DEFAULT_TLS_PORT if data.get("tls") is not None else DEFAULT_PLAIN_PORT
            )
        return data

    @field_validator("host", mode="before")
    @classmethod
    def validate_host(cls, v: Any) -> str:
        host = str(v or "").strip()
        if not host:
            raise ValueError("no server specified")
        return host

    @field_validator("nick", mode="before")
    @classmethod
    def validate_nick(cls, v: Any) -> str:
        return str(v).strip() if v is not None else DEFAULT_NICK

    @field_validator("channels", mode="before")
    @classmethod
    def validate_channels(cls, v: Any) -> tuple[str, ...]:
        return _normalize_channels(v)

    @field_validator("auth_method", mode="before")
    @classmethod
    def validate_auth_method(cls, v: Any) -> AuthMethod:
        if isinstance(v, AuthMethod):
            return v
        name = str(v or "none").strip().lower()
        try:
            return AuthMethod(name)
        except ValueError:
            raise ValueError(f"invalid auth method: {v}") from None

    @model_validator(mode="after")
    def validate_auth(self) -> IRCConfig:
        if (
            self.auth_method in (AuthMethod.NICKSERV, AuthMethod.SASL)
            and not self.auth_password
        ):
            raise ValueError(f"auth method {self.auth_method.value} requires a password")
        if self.auth_method is AuthMethod.CERTFP and (
            self.tls is None or not self.tls.client_cert
        ):
            raise ValueError("auth method certfp requires tls with a client certificate")
        return self

    @property
    def tls_enabled(self) -> bool:
        return self.tls is not None

    @property
    def server_name(self) -> str:
        """Name used for certificate verification."""
        if self.tls is not None and self.tls.server_name:
            return self.tls.server_name
        return self.host

    @property
    def realname(self) -> str:
        if self.nick == DEFAULT_NICK:
            return DEFAULT_REALNAME
        return f"{DEFAULT_REALNAME} ({self.nick})"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IRCConfig:
        """Validate ``data`` and build a config.

        Raises:
            ConfigurationError: If any setting is missing or invalid.
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigurationError(
                f"invalid irc configuration: {e}", data={"errors": e.error_count()}
            ) from e

    @classmethod
    def build(cls, **settings: Any) -> IRCConfig:
        return cls.from_dict(settings)
