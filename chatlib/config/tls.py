"""Client TLS context construction."""

from __future__ import annotations

import logging
import ssl
from pathlib import Path

from ..errors import ConfigurationError
from ..logs.logger import logger
from .model import TLSSettings


def build_ssl_context(settings: TLSSettings) -> ssl.SSLContext:
    """Build a client-side SSL context from ``settings``.

    When CA files are listed they replace the system trust store, otherwise
    the system defaults are loaded.

    Raises:
        ConfigurationError: If a CA file or the client key pair cannot be loaded.
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    if settings.ca_certs:
        for ca in settings.ca_certs:
            _load_ca(context, ca)
        logger.log_event("tls", "ca_certs", ca_certs=list(settings.ca_certs))
    else:
        context.load_default_certs(ssl.Purpose.SERVER_AUTH)

    if settings.client_cert and settings.client_key:
        try:
            context.load_cert_chain(settings.client_cert, settings.client_key)
        except (OSError, ssl.SSLError) as e:
            raise ConfigurationError(
                f"failed to load client certificate pair: {settings.client_cert}, {settings.client_key}",
                data={"client_cert": settings.client_cert},
            ) from e
        logger.log_event("tls", "client_cert", client_cert=settings.client_cert)

    if settings.insecure_skip_verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        logger.log_event("tls", "insecure_skip_verify", level=logging.WARNING)
    return context


def _load_ca(context: ssl.SSLContext, ca: str) -> None:
    path = Path(ca)
    if not path.is_file():
        raise ConfigurationError(
            f"CA certificate does not exist: {ca}", data={"ca_cert": ca}
        )
    try:
        context.load_verify_locations(cafile=str(path))
    except (OSError, ssl.SSLError) as e:
        raise ConfigurationError(
            f"failed to read CA certificate: {ca}", data={"ca_cert": ca}
        ) from e
    logger.log_event("tls", "ca_cert_added", level=logging.DEBUG, ca_cert=ca)
