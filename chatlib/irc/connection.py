"""Transport management: dial, TLS, keep-alive and serialized writes."""

from __future__ import annotations

import asyncio
import logging
import socket
import ssl

from ..constants import STREAM_READ_LIMIT, WRITE_TERMINATOR
from ..errors import ConnectionClosedError, ConnectionSetupError, NetworkError
from ..logs.logger import logger


class IRCConnection:
    """Owns the socket to the server.

    Writes go through a lock so concurrent senders (handlers, PONG replies,
    the handshake) never interleave partial lines.
    """

    def __init__(
        self,
        host: str,
        port: int,
        *,
        dial_timeout: float,
        keepalive: float,
        ssl_context: ssl.SSLContext | None = None,
        server_hostname: str | None = None,
        nick: str | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.dial_timeout = dial_timeout
        self.keepalive = keepalive
        self.ssl_context = ssl_context
        self.server_hostname = server_hostname or host
        self.nick = nick
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None
        self._write_lock = asyncio.Lock()

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def is_open(self) -> bool:
        return self.writer is not None and not self.writer.is_closing()

    async def connect(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        """Dial the server within ``dial_timeout``.

        Raises:
            ConnectionSetupError: On timeout, socket or TLS failure.
        """
        logger.log_event(
            "irc",
            "connect_start",
            user=self.nick,
            server=self.host,
            port=self.port,
            tls=self.ssl_context is not None,
        )
        kwargs: dict[str, object] = {"limit": STREAM_READ_LIMIT}
        if self.ssl_context is not None:
            kwargs["ssl"] = self.ssl_context
            kwargs["server_hostname"] = self.server_hostname
            kwargs["ssl_handshake_timeout"] = self.dial_timeout
        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port, **kwargs),
                timeout=self.dial_timeout,
            )
        except TimeoutError as e:
            raise ConnectionSetupError(
                f"timed out dialing {self.address}",
                data={"timeout": self.dial_timeout},
            ) from e
        except (OSError, ssl.SSLError) as e:
            raise ConnectionSetupError(
                f"failed to connect to {self.address}: {e}",
                data={"error_type": type(e).__name__},
            ) from e
        self._enable_keepalive()
        logger.log_event(
            "irc", "connection_established", level=logging.DEBUG, user=self.nick
        )
        return self.reader, self.writer

    def _enable_keepalive(self) -> None:
        if self.writer is None or self.keepalive <= 0:
            return
        sock = self.writer.get_extra_info("socket")
        if sock is None:
            return
        interval = max(1, int(self.keepalive))
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
            if hasattr(socket, "TCP_KEEPIDLE"):
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, interval)
            if hasattr(socket, "TCP_KEEPINTVL"):
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, interval)
        except OSError as e:
            logger.log_event(
                "irc",
                "keepalive_unavailable",
                level=logging.WARNING,
                user=self.nick,
                error=str(e),
            )

    async def read_line(self) -> bytes:
        """Read one delimiter-terminated record; ``b""`` means EOF.

        Raises:
            ConnectionClosedError: If the connection was never opened.
            ValueError: If the record exceeds the reader limit (it is discarded).
        """
        if self.reader is None:
            raise ConnectionClosedError("connection is not open")
        return await self.reader.readline()

    async def send_line(self, line: str) -> None:
        """Write ``line`` plus the terminator.

        Raises:
            ConnectionClosedError: If the transport is not open.
            NetworkError: If the write fails.
        """
        async with self._write_lock:
            if not self.is_open:
                raise ConnectionClosedError(
                    "use of closed network connection", data={"line": line}
                )
            try:
                self.writer.write(f"{line}{WRITE_TERMINATOR}".encode())  # type: ignore[union-attr]
                await self.writer.drain()  # type: ignore[union-attr]
            except (OSError, RuntimeError) as e:
                raise NetworkError(
                    f"write failed: {e}", data={"error_type": type(e).__name__}
                ) from e
        logger.log_event(
            "irc", "line_sent", level=logging.DEBUG, user=self.nick, line=line
        )

    async def ping(self) -> None:
        await self.send_line(f"PING {self.host}")

    async def disconnect(self) -> None:
        writer = self.writer
        if writer is None:
            return
        self.writer = None
        try:
            writer.close()
            await writer.wait_closed()
        except (OSError, ssl.SSLError) as e:
            logger.log_event(
                "irc",
                "close_error",
                level=logging.WARNING,
                user=self.nick,
                error=str(e),
            )
        logger.log_event("irc", "disconnected", level=logging.DEBUG, user=self.nick)


__all__ = ["IRCConnection"]
