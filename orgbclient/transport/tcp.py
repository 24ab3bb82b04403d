"""A TCP ORGBTransport for the OpenRGB SDK server."""

from __future__ import annotations

import errno
import logging
import select
import socket
from typing import Final

from typing_extensions import override

from orgbclient.transport import (
    ORGBTransport,
    ORGBTransportError,
    TransportAlreadyConnected,
    TransportConnectFailed,
    TransportDisconnected,
    TransportHostNotResolved,
    TransportNetworkingInitFailed,
    TransportNotConnected,
    TransportTimeout,
    TransportWouldBlock,
)

logger = logging.getLogger(__name__)


class ORGBTCPTransport(ORGBTransport):
    def __init__(self, connect_timeout_s: float = 5.0) -> None:
        """Initialize the TCP transport.

        Args:
            connect_timeout_s: The timeout of establishing the TCP connection.
                Send and receive use the timeout given to `set_timeout`, and
                block indefinitely until then.
        """
        self._connect_timeout_s: Final = connect_timeout_s
        self._timeout_s: float | None = None
        self._sock: socket.socket | None = None
        self._last_system_error = 0

    def _record(self, e: OSError, default: int = 0) -> int:
        self._last_system_error = e.errno or default
        return self._last_system_error

    def _connected_socket(self) -> socket.socket:
        if self._sock is None:
            raise TransportNotConnected(f"{self.__class__.__name__} is not connected")
        return self._sock

    @override
    def connect(self, host: str, port: int) -> None:
        if self._sock is not None:
            raise TransportAlreadyConnected(f"{self.__class__.__name__} is already connected")

        logger.debug(f"Resolving {host=} {port=}")
        try:
            addresses: Final = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except socket.gaierror as e:
            raise TransportHostNotResolved(f"Failed to resolve {host}: {e}", self._record(e))

        last_error: OSError | None = None
        for family, type_, proto, _, address in addresses:
            try:
                sock = socket.socket(family, type_, proto)
            except OSError as e:
                raise TransportNetworkingInitFailed(
                    f"Failed to create a socket: {e}", self._record(e)
                )

            try:
                sock.settimeout(self._connect_timeout_s)
                sock.connect(address)
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
                sock.settimeout(self._timeout_s)
            except OSError as e:
                logger.debug(f"Failed to connect to {address}: {e}")
                sock.close()
                last_error = e
                continue

            self._sock = sock
            self._last_system_error = 0
            logger.info(f"Connected to {host=} {port=}")
            return

        if last_error is not None:
            self._record(last_error, errno.ECONNREFUSED)
        raise TransportConnectFailed(
            f"Failed to connect to {host}:{port}: {last_error}", self._last_system_error
        )

    @override
    def disconnect(self) -> None:
        sock: Final = self._connected_socket()
        self._sock = None
        logger.debug("Disconnecting")
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            # the server may have already reset the connection
            raise ORGBTransportError(f"Connection was not closed cleanly: {e}", self._record(e))
        finally:
            sock.close()
            logger.info("Disconnected")

    @override
    def send(self, data: bytes) -> None:
        sock: Final = self._connected_socket()
        logger.debug(f"Sending {len(data)} B")
        try:
            sock.sendall(data)
        except TimeoutError as e:
            raise TransportTimeout(
                f"Timeout sending {len(data)} B", self._record(e, errno.ETIMEDOUT)
            )
        except (BrokenPipeError, ConnectionResetError) as e:
            raise TransportDisconnected(f"Server closed the connection: {e}", self._record(e))
        except OSError as e:
            raise ORGBTransportError(f"Failed to send {len(data)} B: {e}", self._record(e))
        logger.debug(f"Sent {len(data)} B")

    @override
    def receive(self, size: int) -> bytes:
        sock: Final = self._connected_socket()
        buffer: Final = bytearray()
        while len(buffer) < size:
            try:
                chunk = sock.recv(size - len(buffer))
            except BlockingIOError as e:
                if len(buffer) == 0:
                    self._record(e, errno.EAGAIN)
                    raise TransportWouldBlock("No data is queued")
                # in non-blocking mode, the rest of a message is on its way
                self._wait_until_readable(sock)
                continue
            except TimeoutError as e:
                raise TransportTimeout(
                    f"Timeout ({self._timeout_s}s) waiting for {size - len(buffer)} B",
                    self._record(e, errno.ETIMEDOUT),
                )
            except ConnectionResetError as e:
                raise TransportDisconnected(f"Server reset the connection: {e}", self._record(e))
            except OSError as e:
                raise ORGBTransportError(f"Failed to receive: {e}", self._record(e))

            if len(chunk) == 0:
                raise TransportDisconnected("Server closed the connection")
            buffer.extend(chunk)

        logger.debug(f"Received {size} B")
        return bytes(buffer)

    def _wait_until_readable(self, sock: socket.socket) -> None:
        readable, _, _ = select.select([sock], [], [], self._timeout_s)
        if not readable:
            self._last_system_error = errno.ETIMEDOUT
            raise TransportTimeout(
                f"Timeout ({self._timeout_s}s) waiting for the rest of a message"
            )

    @override
    def set_timeout(self, timeout_s: float) -> None:
        """Set the timeout of blocking sends and receives, `0` waits forever."""
        sock: Final = self._connected_socket()
        if timeout_s < 0:
            raise ORGBTransportError(f"{timeout_s=} must not be negative")
        # a socket timeout of 0.0 would make the socket non-blocking
        timeout: Final = timeout_s if timeout_s > 0 else None
        try:
            sock.settimeout(timeout)
        except (OSError, ValueError) as e:
            raise ORGBTransportError(f"Failed to set {timeout_s=}: {e}")
        self._timeout_s = timeout

    @override
    def set_blocking_mode(self, blocking: bool) -> None:
        sock: Final = self._connected_socket()
        try:
            # a blocking socket gets its configured timeout back
            sock.settimeout(self._timeout_s if blocking else 0.0)
        except OSError as e:
            raise ORGBTransportError(f"Failed to set {blocking=}: {e}", self._record(e))

    @override
    def is_connected(self) -> bool:
        return self._sock is not None

    @override
    def last_system_error(self) -> int:
        return self._last_system_error
