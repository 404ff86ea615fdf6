"""Command line entry point: ``chatlib start``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from .chat.dispatcher import CommandDispatcher
from .chat.handler import ChatHandler
from .config.loader import AppConfig, load_config, resolve_config_path
from .constants import CONF_FILE_NAME, CONF_SEARCH_DIRS
from .errors import ChatError, ConfigurationError
from .errors.handling import log_error
from .irc.client import IRCClient
from .logging_config import LoggerConfigurator
from .logs.logger import logger


def _add_common_options(parser: argparse.ArgumentParser, default: object) -> None:
    parser.add_argument(
        "--config",
        default=default,
        help=(
            "JSON config file (default: $CHATLIB_CONF_FILE, else the first "
            f"{CONF_FILE_NAME} in {', '.join(CONF_SEARCH_DIRS)})"
        ),
    )
    parser.add_argument(
        "-l",
        "--log-level",
        default=default,
        help="Log level. One of: trace, debug, info, warn, error, fatal",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chatlib", description="IRC chat bot")
    _add_common_options(parser, None)
    sub = parser.add_subparsers(dest="command", required=True)
    start = sub.add_parser("start", help="Connect and run the bot")
    # Accepted after the subcommand too; SUPPRESS keeps top-level values.
    _add_common_options(start, argparse.SUPPRESS)
    start.add_argument("--server", default=None, help="IRC server to connect to")
    start.add_argument(
        "--port",
        type=int,
        default=None,
        help="Server port. Defaults to 6697 with TLS, otherwise 6667",
    )
    start.add_argument("--nick", default=None, help="IRC nick to use")
    start.add_argument(
        "--channel",
        dest="channels",
        action="append",
        default=None,
        help="Channel to join once registered (repeatable)",
    )
    start.add_argument(
        "--no-tls",
        action="store_true",
        default=None,
        help="Disable TLS. Check the port you are connecting to",
    )
    start.add_argument(
        "--auth-method",
        default=None,
        help="One of: none, nickserv, sasl, certfp",
    )
    start.add_argument(
        "--auth-password",
        default=None,
        help="Authentication password. Required for nickserv and sasl",
    )
    start.add_argument(
        "--dial-timeout",
        type=float,
        default=None,
        help="Seconds allowed for the dial and for the server's first line",
    )
    start.add_argument(
        "--keepalive", type=float, default=None, help="TCP keep-alive interval in seconds"
    )
    start.add_argument(
        "--login-delay",
        type=float,
        default=None,
        help="Seconds to wait before sending NICK/USER",
    )
    start.add_argument(
        "--msg-buffer-size", type=int, default=None, help="Inbound message buffer size"
    )
    start.add_argument(
        "--tls-server-name",
        default=None,
        help="Name to verify the server certificate against (default: --server)",
    )
    start.add_argument(
        "--tls-ca-cert",
        dest="tls_ca_certs",
        action="append",
        default=None,
        help="CA certificate file replacing the system trust store (repeatable)",
    )
    start.add_argument(
        "--tls-client-cert",
        default=None,
        help="TLS client certificate. Required for certfp",
    )
    start.add_argument(
        "--tls-client-key", default=None, help="TLS client key. Required for certfp"
    )
    start.add_argument(
        "--tls-insecure-skip-verify",
        action="store_true",
        default=None,
        help="Do not verify the server certificate",
    )
    return parser


_OVERRIDE_KEYS = (
    "server",
    "port",
    "nick",
    "channels",
    "no_tls",
    "auth_method",
    "auth_password",
    "dial_timeout",
    "keepalive",
    "login_delay",
    "msg_buffer_size",
    "tls_server_name",
    "tls_ca_certs",
    "tls_client_cert",
    "tls_client_key",
    "tls_insecure_skip_verify",
)


def resolve_config(args: argparse.Namespace) -> AppConfig:
    """File, then ``CHATLIB_*`` environment variables, then flags."""
    overrides = {key: getattr(args, key, None) for key in _OVERRIDE_KEYS}
    path = resolve_config_path(args.config)
    return load_config(path, overrides, args.log_level, environ=os.environ)


async def run_bot(app_config: AppConfig) -> None:
    if not app_config.irc_enabled or app_config.irc is None:
        logger.log_event("app", "nothing_enabled", level=logging.WARNING)
        return
    client = IRCClient.from_config(app_config.irc)
    dispatcher = CommandDispatcher()
    client.register_actions(dispatcher)
    handler = ChatHandler(client, dispatcher)
    await handler.run()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        app_config = resolve_config(args)
        LoggerConfigurator(app_config.log_level).configure()
    except (ConfigurationError, ValueError) as e:
        LoggerConfigurator(None).configure()
        log_error("Configuration error", e)
        return 1
    logger.log_event("app", "start")
    try:
        asyncio.run(run_bot(app_config))
    except KeyboardInterrupt:
        pass
    except ChatError as e:
        log_error("Failed to start", e)
        return 1
    finally:
        logger.log_event("app", "shutdown_complete")
    return 0


def run() -> None:
    sys.exit(main())
