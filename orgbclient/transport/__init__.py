"""OpenRGB SDK Client Transport Protocol."""

from __future__ import annotations

from typing import Protocol


class ORGBTransportError(Exception):
    """Raised when the transport fails; `system_error` is the OS error code, if any."""

    def __init__(self, msg: str, system_error: int = 0) -> None:
        self.msg: str = msg
        self.system_error: int = system_error
        super().__init__(msg)


class TransportNetworkingInitFailed(ORGBTransportError):
    """Raised when a socket cannot be created."""


class TransportAlreadyConnected(ORGBTransportError): ...


class TransportHostNotResolved(ORGBTransportError): ...


class TransportConnectFailed(ORGBTransportError): ...


class TransportNotConnected(ORGBTransportError): ...


class TransportDisconnected(ORGBTransportError):
    """Raised when the server has closed the connection."""


class TransportTimeout(ORGBTransportError):
    """Raised when nothing arrived within the configured timeout."""


class TransportWouldBlock(ORGBTransportError):
    """Raised by a receive in non-blocking mode when no data is queued."""


class ORGBTransport(Protocol):
    """A connection-oriented byte stream to an OpenRGB server.

    Every method may raise `ORGBTransportError` or one of its subclasses.
    """

    def connect(self, host: str, port: int) -> None:  # pragma: no cover
        """Connect the `ORGBTransport`.

        Args:
            host: The server host name or IP address.
            port: The server TCP port.

        Raises:
            TransportNetworkingInitFailed: if the socket could not be created
            TransportAlreadyConnected: if the transport is already connected
            TransportHostNotResolved: if `host` could not be resolved
            TransportConnectFailed: if the server refused or did not answer
        """

    def disconnect(self) -> None:  # pragma: no cover
        """Disconnect the `ORGBTransport`.

        Raises:
            TransportNotConnected: if there is no connection to close
        """

    def send(self, data: bytes) -> None:  # pragma: no cover
        """Send all of `data`."""

    def receive(self, size: int) -> bytes:  # pragma: no cover
        """Receive exactly `size` bytes.

        Raises:
            TransportDisconnected: if the server closed the connection
            TransportTimeout: if the timeout elapsed first
            TransportWouldBlock: if in non-blocking mode and nothing is queued
        """

    def set_timeout(self, timeout_s: float) -> None:  # pragma: no cover
        """Set the timeout of the blocking send and receive operations, `0` for none."""

    def set_blocking_mode(self, blocking: bool) -> None:  # pragma: no cover
        """Switch between blocking and non-blocking mode."""

    def is_connected(self) -> bool:  # pragma: no cover
        ...

    def last_system_error(self) -> int:  # pragma: no cover
        """The OS error code of the last failed operation, 0 if none."""
