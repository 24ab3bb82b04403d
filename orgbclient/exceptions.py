"""`orgbclient` module exceptions."""

from __future__ import annotations

import os

from typing_extensions import assert_never

from orgbclient.status import ConnectStatus, RequestStatus, UpdateStatus


class ORGBClientException(Exception): ...


class ORGBCodecError(ORGBClientException): ...


class ORGBDecodeError(ORGBCodecError): ...


class ORGBEncodeError(ORGBCodecError): ...


class ORGBUserError(ORGBClientException):
    """The client was used in a way it does not support, e.g. not connected."""


class _ORGBSystemErrorInfo(ORGBClientException):
    def __init__(self, msg: str, system_error: int = 0) -> None:
        self.msg: str = msg
        self.system_error: int = system_error
        super().__init__(msg)

    @property
    def system_error_str(self) -> str:
        return os.strerror(self.system_error)

    def __str__(self) -> str:
        if self.system_error == 0:
            return self.msg
        return f"{self.msg} (system error {self.system_error}: {self.system_error_str})"


class ORGBConnectionError(_ORGBSystemErrorInfo):
    """The connection failed, closed, or the server did not speak the protocol."""


class ORGBSystemError(_ORGBSystemErrorInfo):
    """The operating system reported an error on the socket."""


def raise_for_connect_status(status: ConnectStatus, system_error: int = 0) -> None:
    """Raise the exception matching a failed `ConnectStatus`.

    Args:
        status: the status returned by the connect operation
        system_error: the last system error of the transport

    Raises:
        ORGBUserError: if the client is already connected
        ORGBConnectionError: if the server could not be reached or negotiated with
        ORGBSystemError: for all other failures
    """
    if status == ConnectStatus.SUCCESS:
        return
    elif status == ConnectStatus.ALREADY_CONNECTED:
        raise ORGBUserError(status.description)
    elif status in (
        ConnectStatus.HOST_NOT_RESOLVED,
        ConnectStatus.CONNECT_FAILED,
        ConnectStatus.REQUEST_VERSION_FAILED,
        ConnectStatus.VERSION_NOT_SUPPORTED,
        ConnectStatus.SEND_NAME_FAILED,
    ):
        raise ORGBConnectionError(status.description, system_error)
    elif status in (
        ConnectStatus.NETWORKING_INIT_FAILED,
        ConnectStatus.OTHER_SYSTEM_ERROR,
        ConnectStatus.UNEXPECTED_ERROR,
    ):
        raise ORGBSystemError(status.description, system_error)
    else:
        assert_never(status)


def raise_for_request_status(status: RequestStatus, system_error: int = 0) -> None:
    """Raise the exception matching a failed `RequestStatus`.

    Args:
        status: the status returned by the request
        system_error: the last system error of the transport

    Raises:
        ORGBUserError: if the client is not connected
        ORGBConnectionError: if the exchange with the server failed
        ORGBSystemError: for all other failures
    """
    if status == RequestStatus.SUCCESS:
        return
    elif status == RequestStatus.NOT_CONNECTED:
        raise ORGBUserError(status.description)
    elif status in (
        RequestStatus.SEND_REQUEST_FAILED,
        RequestStatus.CONNECTION_CLOSED,
        RequestStatus.NO_REPLY,
        RequestStatus.INVALID_REPLY,
    ):
        raise ORGBConnectionError(status.description, system_error)
    elif status in (RequestStatus.RECEIVE_ERROR, RequestStatus.UNEXPECTED_ERROR):
        raise ORGBSystemError(status.description, system_error)
    else:
        assert_never(status)


def raise_for_update_status(status: UpdateStatus, system_error: int = 0) -> None:
    """Raise the exception matching a failed `UpdateStatus`.

    `UP_TO_DATE` and `OUT_OF_DATE` are both valid answers and do not raise.

    Raises:
        ORGBConnectionError: if the connection closed or the server sent garbage
        ORGBSystemError: for all other failures
    """
    if status in (UpdateStatus.UP_TO_DATE, UpdateStatus.OUT_OF_DATE):
        return
    elif status in (UpdateStatus.CONNECTION_CLOSED, UpdateStatus.UNEXPECTED_MESSAGE):
        raise ORGBConnectionError(status.description, system_error)
    elif status in (
        UpdateStatus.CANT_RESTORE_SOCKET,
        UpdateStatus.OTHER_SYSTEM_ERROR,
        UpdateStatus.UNEXPECTED_ERROR,
    ):
        raise ORGBSystemError(status.description, system_error)
    else:
        assert_never(status)
