"""Tests for the status enums and their exception mapping."""

from __future__ import annotations

import errno
import os
from enum import IntEnum
from typing import Type

import pytest

from orgbclient.exceptions import (
    ORGBClientException,
    ORGBConnectionError,
    ORGBSystemError,
    ORGBUserError,
    raise_for_connect_status,
    raise_for_request_status,
    raise_for_update_status,
)
from orgbclient.status import ConnectStatus, RequestStatus, UpdateStatus


@pytest.mark.parametrize("status_type", (ConnectStatus, RequestStatus, UpdateStatus))
def test_every_status_has_a_description(status_type: Type[IntEnum]) -> None:
    for status in status_type:
        assert status.description  # type: ignore[attr-defined]


@pytest.mark.parametrize(
    "status, exception",
    (
        (ConnectStatus.NETWORKING_INIT_FAILED, ORGBSystemError),
        (ConnectStatus.ALREADY_CONNECTED, ORGBUserError),
        (ConnectStatus.HOST_NOT_RESOLVED, ORGBConnectionError),
        (ConnectStatus.CONNECT_FAILED, ORGBConnectionError),
        (ConnectStatus.REQUEST_VERSION_FAILED, ORGBConnectionError),
        (ConnectStatus.VERSION_NOT_SUPPORTED, ORGBConnectionError),
        (ConnectStatus.SEND_NAME_FAILED, ORGBConnectionError),
        (ConnectStatus.OTHER_SYSTEM_ERROR, ORGBSystemError),
        (ConnectStatus.UNEXPECTED_ERROR, ORGBSystemError),
    ),
)
def test_raise_for_connect_status(status: ConnectStatus, exception: type) -> None:
    with pytest.raises(exception) as e:
        raise_for_connect_status(status)
    assert str(e.value) == status.description


@pytest.mark.parametrize(
    "status, exception",
    (
        (RequestStatus.NOT_CONNECTED, ORGBUserError),
        (RequestStatus.SEND_REQUEST_FAILED, ORGBConnectionError),
        (RequestStatus.CONNECTION_CLOSED, ORGBConnectionError),
        (RequestStatus.NO_REPLY, ORGBConnectionError),
        (RequestStatus.RECEIVE_ERROR, ORGBSystemError),
        (RequestStatus.INVALID_REPLY, ORGBConnectionError),
        (RequestStatus.UNEXPECTED_ERROR, ORGBSystemError),
    ),
)
def test_raise_for_request_status(status: RequestStatus, exception: type) -> None:
    with pytest.raises(exception):
        raise_for_request_status(status)


@pytest.mark.parametrize(
    "status, exception",
    (
        (UpdateStatus.CONNECTION_CLOSED, ORGBConnectionError),
        (UpdateStatus.UNEXPECTED_MESSAGE, ORGBConnectionError),
        (UpdateStatus.CANT_RESTORE_SOCKET, ORGBSystemError),
        (UpdateStatus.OTHER_SYSTEM_ERROR, ORGBSystemError),
        (UpdateStatus.UNEXPECTED_ERROR, ORGBSystemError),
    ),
)
def test_raise_for_update_status(status: UpdateStatus, exception: type) -> None:
    with pytest.raises(exception):
        raise_for_update_status(status)


def test_success_does_not_raise() -> None:
    raise_for_connect_status(ConnectStatus.SUCCESS)
    raise_for_request_status(RequestStatus.SUCCESS)
    raise_for_update_status(UpdateStatus.UP_TO_DATE)
    raise_for_update_status(UpdateStatus.OUT_OF_DATE)


def test_system_error() -> None:
    e = ORGBSystemError("Receive failed", errno.ECONNRESET)

    assert isinstance(e, ORGBClientException)
    assert e.system_error == errno.ECONNRESET
    assert e.system_error_str == os.strerror(errno.ECONNRESET)
    assert str(e) == f"Receive failed (system error {errno.ECONNRESET}: {e.system_error_str})"
    assert str(ORGBSystemError("Receive failed")) == "Receive failed"
