"""Outcomes of the `ORGBClient` operations."""

from __future__ import annotations

from enum import IntEnum, unique
from typing import Dict, Final


@unique
class ConnectionState(IntEnum):
    """The state of the connection owned by an `ORGBClient`."""

    DISCONNECTED = 0
    CONNECTING = 1
    """The transport is connecting to the server."""
    VERSION_EXCHANGE = 2
    """The transport is connected and the protocol version is being negotiated."""
    READY = 3


@unique
class ConnectStatus(IntEnum):
    """All the possible ways how the connect operation can end up."""

    SUCCESS = 0
    NETWORKING_INIT_FAILED = 1
    """The underlying networking system could not be initialized."""
    ALREADY_CONNECTED = 2
    """The client is already connected.  Call `disconnect()` first."""
    HOST_NOT_RESOLVED = 3
    CONNECT_FAILED = 4
    REQUEST_VERSION_FAILED = 5
    VERSION_NOT_SUPPORTED = 6
    """The server speaks the legacy version-less protocol."""
    SEND_NAME_FAILED = 7
    OTHER_SYSTEM_ERROR = 8
    UNEXPECTED_ERROR = 9
    """Internal error of this library."""

    @property
    def description(self) -> str:
        return _CONNECT_STATUS_DESCRIPTIONS[self]


@unique
class RequestStatus(IntEnum):
    """All the possible ways how a request can end up."""

    SUCCESS = 0
    NOT_CONNECTED = 1
    """The client is not connected.  Call `connect()` first."""
    SEND_REQUEST_FAILED = 2
    CONNECTION_CLOSED = 3
    NO_REPLY = 4
    """No reply has arrived in the configured timeout."""
    RECEIVE_ERROR = 5
    INVALID_REPLY = 6
    UNEXPECTED_ERROR = 7
    """Internal error of this library."""

    @property
    def description(self) -> str:
        return _REQUEST_STATUS_DESCRIPTIONS[self]


@unique
class UpdateStatus(IntEnum):
    """All the possible results of a check whether the device list is out of date."""

    UP_TO_DATE = 0
    OUT_OF_DATE = 1
    """The server has announced a change.  Call `request_device_list()` again."""
    CONNECTION_CLOSED = 2
    UNEXPECTED_MESSAGE = 3
    CANT_RESTORE_SOCKET = 4
    """The socket could not be switched back to blocking mode and has been closed."""
    OTHER_SYSTEM_ERROR = 5
    UNEXPECTED_ERROR = 6
    """Internal error of this library."""

    @property
    def description(self) -> str:
        return _UPDATE_STATUS_DESCRIPTIONS[self]


_CONNECT_STATUS_DESCRIPTIONS: Final[Dict[ConnectStatus, str]] = {
    ConnectStatus.SUCCESS: "The operation was successful.",
    ConnectStatus.NETWORKING_INIT_FAILED: (
        "Operation failed because underlying networking system could not be initialized."
    ),
    ConnectStatus.ALREADY_CONNECTED: (
        "Connect operation failed because the socket is already connected."
    ),
    ConnectStatus.HOST_NOT_RESOLVED: "The hostname could not be resolved to an IP address.",
    ConnectStatus.CONNECT_FAILED: (
        "Could not connect to the target server, either it's down or the port is closed."
    ),
    ConnectStatus.REQUEST_VERSION_FAILED: (
        "Failed to send the client's protocol version or receive the server's protocol version."
    ),
    ConnectStatus.VERSION_NOT_SUPPORTED: (
        "The protocol version of the server is not supported. Please update the OpenRGB app."
    ),
    ConnectStatus.SEND_NAME_FAILED: "Failed to send the client name to the server.",
    ConnectStatus.OTHER_SYSTEM_ERROR: "Other system error.",
    ConnectStatus.UNEXPECTED_ERROR: "Internal error of this library.",
}

_REQUEST_STATUS_DESCRIPTIONS: Final[Dict[RequestStatus, str]] = {
    RequestStatus.SUCCESS: "The request was successful.",
    RequestStatus.NOT_CONNECTED: "Request failed because the client is not connected.",
    RequestStatus.SEND_REQUEST_FAILED: "Failed to send the request message.",
    RequestStatus.CONNECTION_CLOSED: "Server has closed the connection.",
    RequestStatus.NO_REPLY: "No reply has arrived from the server in given timeout.",
    RequestStatus.RECEIVE_ERROR: (
        "There has been some other error while trying to receive a reply."
    ),
    RequestStatus.INVALID_REPLY: "The reply from the server is invalid.",
    RequestStatus.UNEXPECTED_ERROR: "Internal error of this library.",
}

_UPDATE_STATUS_DESCRIPTIONS: Final[Dict[UpdateStatus, str]] = {
    UpdateStatus.UP_TO_DATE: "The current device list seems up to date.",
    UpdateStatus.OUT_OF_DATE: (
        "Server has sent a notification message indicating that the device list has changed."
    ),
    UpdateStatus.CONNECTION_CLOSED: "Server has closed the connection.",
    UpdateStatus.UNEXPECTED_MESSAGE: (
        "Server has sent some other kind of message that we didn't expect."
    ),
    UpdateStatus.CANT_RESTORE_SOCKET: (
        "Error has occurred while trying to restore socket to its original state "
        "and the socket has been closed."
    ),
    UpdateStatus.OTHER_SYSTEM_ERROR: "Other system error.",
    UpdateStatus.UNEXPECTED_ERROR: "Internal error of this library.",
}
