"""OpenRGB SDK Client.

This package implements a client of the OpenRGB SDK network protocol.  The
OpenRGB server controls the RGB lighting of the devices in a computer:
motherboards, memory, GPUs, LED strips, keyboards, and more.  The client
enumerates these devices and changes their colors and modes, and manages the
profiles saved on the server.

Every operation is available in two flavors:

* the status API, e.g. `ORGBClient.request_device_list()`, returns a status
  enum (or a `RequestResult`) and never raises,
* the raising API, e.g. `ORGBClient.request_device_list_or_raise()`, returns
  the payload and raises an `orgbclient.exceptions` exception on failure.

### Examples

```python
from orgbclient import ORGBClient
from orgbclient.device import Color
from orgbclient.generics import success

with ORGBClient(client_name="example") as client:
    result = client.request_device_list()
    if success(result):
        for device in result.value:
            client.set_device_color(device, Color(r=255, g=0, b=0))
```

"""

from __future__ import annotations

import logging
import os
from functools import wraps
from types import TracebackType
from typing import Any, Callable, ClassVar, Final, List, Tuple, Type, TypeVar

from pydantic import ValidationError
from typing_extensions import ParamSpec

from orgbclient.device import LED, Color, Device, DeviceList, Mode, Zone
from orgbclient.exceptions import (
    ORGBClientException,
    ORGBDecodeError,
    ORGBEncodeError,
    ORGBSystemError,
    ORGBUserError,
    raise_for_connect_status,
    raise_for_request_status,
    raise_for_update_status,
)
from orgbclient.generics import (
    ORGBRequest,
    RequestFailure,
    RequestResult,
    RequestSuccess,
    T,
    TReply,
    error,
    success,
)
from orgbclient.header import HEADER_SIZE, Header, MessageType
from orgbclient.message import Message
from orgbclient.requests.controller import (
    ReplyProtocolVersion,
    RequestControllerCount,
    RequestControllerData,
    RequestProtocolVersion,
    SetClientName,
)
from orgbclient.requests.profile import (
    RequestDeleteProfile,
    RequestLoadProfile,
    RequestProfileList,
    RequestSaveProfile,
)
from orgbclient.requests.rgb_controller import (
    ResizeZone,
    SaveMode,
    SetCustomMode,
    UpdateLEDs,
    UpdateMode,
    UpdateSingleLED,
    UpdateZoneLEDs,
)
from orgbclient.status import ConnectionState, ConnectStatus, RequestStatus, UpdateStatus
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
from orgbclient.transport.tcp import ORGBTCPTransport

DEFAULT_HOST: Final = "127.0.0.1"
DEFAULT_PORT: Final = 6742
DEFAULT_CLIENT_NAME: Final = "orgb::Client"
DEFAULT_TIMEOUT_S: Final = 0.500
"""Receive timeout applied on connect; `ORGBClient.set_timeout` overrides it."""

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def _on_unexpected_error(default: R) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Return `default` instead of letting an unexpected exception escape."""

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return func(*args, **kwargs)
            except Exception:
                logger.exception(f"Unexpected exception in {func.__name__}")
                return default

        return wrapper

    return decorator


class _NonBlockingScope:
    """Keep the transport in non-blocking mode for the duration of a `with` block.

    Leaving the block always switches back to blocking mode.  If that fails,
    `on_restore_failed` is called and `restored` is `False`.
    """

    def __init__(self, transport: ORGBTransport, on_restore_failed: Callable[[], Any]) -> None:
        self._transport: Final = transport
        self._on_restore_failed: Final = on_restore_failed
        self.restored = True

    def __enter__(self) -> _NonBlockingScope:
        self._transport.set_blocking_mode(False)
        return self

    def __exit__(
        self,
        exc_type: Type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        try:
            self._transport.set_blocking_mode(True)
        except ORGBTransportError as e:
            logger.error(f"Failed to restore blocking mode: {e}")
            self.restored = False
            self._on_restore_failed()


class ORGBClient:
    """Create a client of an OpenRGB server, using `transport`.

    The client owns the connection: it negotiates the protocol version, keeps
    track of whether the server has announced a change of its device list,
    and maps typed requests to typed replies.

    Every operation blocks until it is done or the transport times out.  The
    client does no locking: at most one operation may be in flight
    at a time, so a client shared between threads must be guarded by the
    caller.

    Args:
        transport: the `ORGBTransport` to use, `ORGBTCPTransport` by default
        client_name: the name that the server shows for this client
        timeout_s: the receive timeout applied on every connect
    """

    IMPLEMENTED_PROTOCOL_VERSION: ClassVar[int] = 3
    """The newest protocol version that this client can speak."""

    def __init__(  # noqa: DOC301
        self,
        transport: ORGBTransport | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        self._transport: Final = transport if transport is not None else ORGBTCPTransport()
        self._client_name: Final = client_name
        self._timeout_s: Final = timeout_s
        self._negotiated_protocol_version = 0
        self._is_device_list_out_of_date = True
        self._state = ConnectionState.DISCONNECTED
        self._last_encode_error: ORGBEncodeError | None = None

    @property
    def client_name(self) -> str:
        return self._client_name

    @property
    def negotiated_protocol_version(self) -> int:
        """min(client version, server version) of this connection, 0 when disconnected."""

        return self._negotiated_protocol_version

    @property
    def is_device_list_out_of_date(self) -> bool:
        """`True` until a device list is fetched and after the server announces a change."""

        return self._is_device_list_out_of_date

    @property
    def state(self) -> ConnectionState:
        if not self._transport.is_connected():
            return ConnectionState.DISCONNECTED
        return self._state

    def is_connected(self) -> bool:
        return self._transport.is_connected()

    # status API

    @_on_unexpected_error(ConnectStatus.UNEXPECTED_ERROR)
    def connect(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> ConnectStatus:
        """Connect to the OpenRGB server and announce the client name.

        On failure, the client is left disconnected.
        """
        return self._connect(host, port)

    @_on_unexpected_error(False)
    def disconnect(self) -> bool:
        """Close the connection to the server.

        Returns:
            `True` if a connection was closed, `False` if there was none.
        """
        return self._disconnect()

    @_on_unexpected_error(False)
    def set_timeout(self, timeout_s: float) -> bool:
        """Set the timeout of receiving replies; only possible while connected."""

        return self._set_timeout(timeout_s)

    @_on_unexpected_error(RequestFailure(RequestStatus.UNEXPECTED_ERROR))
    def request(self, request: ORGBRequest[TReply]) -> RequestResult[TReply]:
        """Send `request` to the server and return its typed reply.

        Args:
            request: the `ORGBRequest` to send

        Returns:
            The status of the exchange and, on success, the reply.

        Example:

        ```python
        result = client.request(RequestControllerCount())
        if success(result):
            print(f"{result.value.count} devices")
        ```
        """
        if not self.is_connected():
            return RequestFailure(RequestStatus.NOT_CONNECTED)
        return self._request(request)

    @_on_unexpected_error(RequestFailure(RequestStatus.UNEXPECTED_ERROR))
    def request_device_list(self) -> RequestResult[DeviceList]:
        """Query the server for information about all its RGB devices.

        The list is a consistent snapshot: if the server announces a change
        while the list is being fetched, the fetch starts over.
        """
        return self._request_device_list()

    @_on_unexpected_error(RequestFailure(RequestStatus.UNEXPECTED_ERROR))
    def request_device_count(self) -> RequestResult[int]:
        return self._request_device_count()

    @_on_unexpected_error(RequestFailure(RequestStatus.UNEXPECTED_ERROR))
    def request_device_info(self, device_idx: int) -> RequestResult[Device]:
        return self._request_device_info(device_idx)

    @_on_unexpected_error(UpdateStatus.UNEXPECTED_ERROR)
    def check_for_device_updates(self) -> UpdateStatus:
        """Check whether the server has announced a change of its device list.

        This does not wait for the server.  Once `OUT_OF_DATE` is reported, it
        is reported without further checks until `request_device_list()`
        succeeds.
        """
        return self._check_for_device_updates()

    @_on_unexpected_error(RequestStatus.UNEXPECTED_ERROR)
    def switch_to_custom_mode(self, device: Device) -> RequestStatus:
        """Switch the device to its directly controlled mode.

        Call this a few milliseconds before setting colors of a device.
        """
        return self._switch_to_custom_mode(device)

    @_on_unexpected_error(RequestStatus.UNEXPECTED_ERROR)
    def change_mode(self, device: Device, mode: Mode) -> RequestStatus:
        return self._change_mode(device, mode)

    @_on_unexpected_error(RequestStatus.UNEXPECTED_ERROR)
    def save_mode(self, device: Device, mode: Mode) -> RequestStatus:
        return self._save_mode(device, mode)

    @_on_unexpected_error(RequestStatus.UNEXPECTED_ERROR)
    def set_device_color(self, device: Device, color: Color) -> RequestStatus:
        """Set one color for every LED of the device."""

        return self._set_device_color(device, color)

    @_on_unexpected_error(RequestStatus.UNEXPECTED_ERROR)
    def set_zone_color(self, zone: Zone, color: Color) -> RequestStatus:
        return self._set_zone_color(zone, color)

    @_on_unexpected_error(RequestStatus.UNEXPECTED_ERROR)
    def set_zone_size(self, zone: Zone, new_size: int) -> RequestStatus:
        """Resize a zone of LEDs, if the device supports it."""

        return self._set_zone_size(zone, new_size)

    @_on_unexpected_error(RequestStatus.UNEXPECTED_ERROR)
    def set_led_color(self, led: LED, color: Color) -> RequestStatus:
        return self._set_led_color(led, color)

    @_on_unexpected_error(RequestFailure(RequestStatus.UNEXPECTED_ERROR))
    def request_profile_list(self) -> RequestResult[List[str]]:
        return self._request_profile_list()

    @_on_unexpected_error(RequestStatus.UNEXPECTED_ERROR)
    def save_profile(self, profile_name: str) -> RequestStatus:
        return self._send_when_connected(lambda: RequestSaveProfile(name=profile_name))

    @_on_unexpected_error(RequestStatus.UNEXPECTED_ERROR)
    def load_profile(self, profile_name: str) -> RequestStatus:
        return self._send_when_connected(lambda: RequestLoadProfile(name=profile_name))

    @_on_unexpected_error(RequestStatus.UNEXPECTED_ERROR)
    def delete_profile(self, profile_name: str) -> RequestStatus:
        return self._send_when_connected(lambda: RequestDeleteProfile(name=profile_name))

    def get_last_system_error(self) -> int:
        """Call this if your requests keep failing and you don't know why."""

        return self._transport.last_system_error()

    def get_last_system_error_str(self, system_error: int | None = None) -> str:
        return os.strerror(self.get_last_system_error() if system_error is None else system_error)

    # raising API

    def connect_or_raise(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
        """Like `connect()`, but raises instead of returning a failed status.

        Raises:
            ORGBUserError: if the client is already connected
            ORGBConnectionError: if the server could not be reached or negotiated with
            ORGBSystemError: if the operating system reported an error
        """
        raise_for_connect_status(self._connect(host, port), self.get_last_system_error())

    def disconnect_or_raise(self) -> None:
        if not self._disconnect():
            raise ORGBUserError("The client is not connected.")

    def set_timeout_or_raise(self, timeout_s: float) -> None:
        if not self.is_connected():
            raise ORGBUserError("The timeout can only be set while connected.")
        if not self._set_timeout(timeout_s):
            raise ORGBSystemError("Failed to set timeout", self.get_last_system_error())

    def request_device_list_or_raise(self) -> DeviceList:
        return self._unwrap(self._request_device_list())

    def request_device_count_or_raise(self) -> int:
        return self._unwrap(self._request_device_count())

    def request_device_info_or_raise(self, device_idx: int) -> Device:
        return self._unwrap(self._request_device_info(device_idx))

    def is_device_list_out_of_date_or_raise(self) -> bool:
        """Like `check_for_device_updates()`, but raises on a failed check.

        Returns:
            `True` if the device list needs to be requested again.
        """
        status: Final = self._check_for_device_updates()
        raise_for_update_status(status, self.get_last_system_error())
        return status == UpdateStatus.OUT_OF_DATE

    def switch_to_custom_mode_or_raise(self, device: Device) -> None:
        self._raise_for_status(self._switch_to_custom_mode(device))

    def change_mode_or_raise(self, device: Device, mode: Mode) -> None:
        self._raise_for_status(self._change_mode(device, mode))

    def save_mode_or_raise(self, device: Device, mode: Mode) -> None:
        self._raise_for_status(self._save_mode(device, mode))

    def set_device_color_or_raise(self, device: Device, color: Color) -> None:
        self._raise_for_status(self._set_device_color(device, color))

    def set_zone_color_or_raise(self, zone: Zone, color: Color) -> None:
        self._raise_for_status(self._set_zone_color(zone, color))

    def set_zone_size_or_raise(self, zone: Zone, new_size: int) -> None:
        self._raise_for_status(self._set_zone_size(zone, new_size))

    def set_led_color_or_raise(self, led: LED, color: Color) -> None:
        self._raise_for_status(self._set_led_color(led, color))

    def request_profile_list_or_raise(self) -> List[str]:
        return self._unwrap(self._request_profile_list())

    def save_profile_or_raise(self, profile_name: str) -> None:
        self._raise_for_status(
            self._send_when_connected(lambda: RequestSaveProfile(name=profile_name))
        )

    def load_profile_or_raise(self, profile_name: str) -> None:
        self._raise_for_status(
            self._send_when_connected(lambda: RequestLoadProfile(name=profile_name))
        )

    def delete_profile_or_raise(self, profile_name: str) -> None:
        self._raise_for_status(
            self._send_when_connected(lambda: RequestDeleteProfile(name=profile_name))
        )

    def __enter__(self) -> ORGBClient:
        self.connect_or_raise()
        return self

    def __exit__(
        self,
        exc_type: Type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if exc_value is not None:
            logger.error(f"Exception in ORGBClient: {exc_type=}, {exc_value=}")
        self._disconnect()

    # operations

    def _connect(self, host: str, port: int) -> ConnectStatus:
        if self._transport.is_connected():
            logger.error("Already connected, disconnect first")
            return ConnectStatus.ALREADY_CONNECTED

        logger.debug(f"Connecting to {host}:{port}")
        self._state = ConnectionState.CONNECTING
        try:
            self._transport.connect(host, port)
        except TransportAlreadyConnected:
            return self._connect_failed(ConnectStatus.ALREADY_CONNECTED)
        except TransportNetworkingInitFailed as e:
            logger.error(f"{e}")
            return self._connect_failed(ConnectStatus.NETWORKING_INIT_FAILED)
        except TransportHostNotResolved as e:
            logger.error(f"{e}")
            return self._connect_failed(ConnectStatus.HOST_NOT_RESOLVED)
        except TransportConnectFailed as e:
            logger.error(f"{e}")
            return self._connect_failed(ConnectStatus.CONNECT_FAILED)
        except ORGBTransportError as e:
            logger.error(f"{e}")
            return self._connect_failed(ConnectStatus.OTHER_SYSTEM_ERROR)

        # the transport is connected: from here on, a failure must disconnect it
        try:
            status: Final = self._negotiate()
        except Exception:
            self._disconnect()
            raise
        if status != ConnectStatus.SUCCESS:
            logger.error(f"Connection to {host}:{port} failed: {status.description}")
            self._disconnect()
            return status

        logger.info(
            f"Connected to {host}:{port} as {self._client_name!r}, "
            f"protocol version {self._negotiated_protocol_version}"
        )
        return status

    def _connect_failed(self, status: ConnectStatus) -> ConnectStatus:
        self._state = ConnectionState.DISCONNECTED
        return status

    def _negotiate(self) -> ConnectStatus:
        self._state = ConnectionState.VERSION_EXCHANGE

        try:
            self._transport.set_timeout(self._timeout_s)
        except ORGBTransportError as e:
            logger.warning(f"Failed to set the default timeout: {e}")

        if not self._send_message(
            RequestProtocolVersion(client_version=self.IMPLEMENTED_PROTOCOL_VERSION)
        ):
            return ConnectStatus.REQUEST_VERSION_FAILED

        status, reply = self._await_message(ReplyProtocolVersion)
        if status != RequestStatus.SUCCESS or reply is None:
            logger.error(f"No protocol version from the server: {status.description}")
            return ConnectStatus.REQUEST_VERSION_FAILED

        if reply.server_version == 0:
            # the very first, version-less protocol is not supported
            return ConnectStatus.VERSION_NOT_SUPPORTED

        self._negotiated_protocol_version = min(
            self.IMPLEMENTED_PROTOCOL_VERSION, reply.server_version
        )
        logger.debug(
            f"Server protocol version {reply.server_version}, "
            f"negotiated {self._negotiated_protocol_version}"
        )

        if not self._send_message(SetClientName(name=self._client_name)):
            return ConnectStatus.SEND_NAME_FAILED

        # There is no list yet, but calling it out of date makes the first
        # check_for_device_updates() ask for one.
        self._is_device_list_out_of_date = True
        self._state = ConnectionState.READY
        return ConnectStatus.SUCCESS

    def _disconnect(self) -> bool:
        self._negotiated_protocol_version = 0
        self._state = ConnectionState.DISCONNECTED
        try:
            self._transport.disconnect()
        except TransportNotConnected:
            return False
        except ORGBTransportError as e:
            # The server has ended the connection forcibly.  The socket is
            # closed either way, which is what the caller asked for.
            logger.debug(f"Connection was closed by the server: {e}")
        return True

    def _set_timeout(self, timeout_s: float) -> bool:
        # there is no socket to apply the timeout to until connect
        if not self._transport.is_connected():
            return False
        try:
            self._transport.set_timeout(timeout_s)
        except ORGBTransportError as e:
            logger.error(f"Failed to set timeout: {e}")
            return False
        return True

    def _request_device_list(self) -> RequestResult[DeviceList]:
        if not self.is_connected():
            return RequestFailure(RequestStatus.NOT_CONNECTED)

        while True:
            self._is_device_list_out_of_date = False
            devices: List[Device] = []

            count_result = self._request(RequestControllerCount())
            if error(count_result):
                return self._device_list_failed(count_result.status)

            for device_idx in range(count_result.value.count):
                data_result = self._request(RequestControllerData(device_idx=device_idx))
                if error(data_result):
                    return self._device_list_failed(data_result.status)
                devices.append(data_result.value.device)

            # a DeviceListUpdated may have arrived in the middle of the fetch
            if not self._is_device_list_out_of_date:
                break
            logger.info("Device list changed during the request, requesting it again")

        logger.debug(f"Received {len(devices)} devices")
        return RequestSuccess(DeviceList(devices))

    def _device_list_failed(self, status: RequestStatus) -> RequestResult[DeviceList]:
        self._is_device_list_out_of_date = True
        return RequestFailure(status)

    def _request_device_count(self) -> RequestResult[int]:
        if not self.is_connected():
            return RequestFailure(RequestStatus.NOT_CONNECTED)

        result: Final = self._request(RequestControllerCount())
        if error(result):
            return result
        return RequestSuccess(result.value.count)

    def _request_device_info(self, device_idx: int) -> RequestResult[Device]:
        if not self.is_connected():
            return RequestFailure(RequestStatus.NOT_CONNECTED)

        try:
            request: Final = self._build(lambda: RequestControllerData(device_idx=device_idx))
        except ORGBEncodeError as e:
            return RequestFailure(self._encode_failed(e))

        result: Final = self._request(request)
        if error(result):
            return result
        return RequestSuccess(result.value.device)

    def _request_profile_list(self) -> RequestResult[List[str]]:
        if not self.is_connected():
            return RequestFailure(RequestStatus.NOT_CONNECTED)

        result: Final = self._request(RequestProfileList())
        if error(result):
            return result
        return RequestSuccess(list(result.value.profiles))

    def _check_for_device_updates(self) -> UpdateStatus:
        if self._is_device_list_out_of_date:
            # keep reporting it until the list is requested again
            return UpdateStatus.OUT_OF_DATE

        if not self.is_connected():
            return UpdateStatus.CONNECTION_CLOSED

        status: Final = self._check_for_update_message_arrival()
        if status == UpdateStatus.OUT_OF_DATE:
            self._is_device_list_out_of_date = True
        return status

    def _switch_to_custom_mode(self, device: Device) -> RequestStatus:
        return self._send_when_connected(lambda: SetCustomMode(device_idx=device.idx))

    def _change_mode(self, device: Device, mode: Mode) -> RequestStatus:
        return self._send_when_connected(lambda: UpdateMode(device_idx=device.idx, mode=mode))

    def _save_mode(self, device: Device, mode: Mode) -> RequestStatus:
        if 0 < self._negotiated_protocol_version < 3:
            logger.warning(
                f"Saving a mode requires protocol version 3, "
                f"the server speaks {self._negotiated_protocol_version}"
            )
        return self._send_when_connected(lambda: SaveMode(device_idx=device.idx, mode=mode))

    def _set_device_color(self, device: Device, color: Color) -> RequestStatus:
        return self._send_when_connected(
            lambda: UpdateLEDs(device_idx=device.idx, colors=[color] * len(device.leds))
        )

    def _set_zone_color(self, zone: Zone, color: Color) -> RequestStatus:
        return self._send_when_connected(
            lambda: UpdateZoneLEDs(
                device_idx=zone.parent_idx, zone_idx=zone.idx, colors=[color] * zone.leds_count
            )
        )

    def _set_zone_size(self, zone: Zone, new_size: int) -> RequestStatus:
        return self._send_when_connected(
            lambda: ResizeZone(device_idx=zone.parent_idx, zone_idx=zone.idx, new_size=new_size)
        )

    def _set_led_color(self, led: LED, color: Color) -> RequestStatus:
        return self._send_when_connected(
            lambda: UpdateSingleLED(device_idx=led.parent_idx, led_idx=led.idx, color=color)
        )

    # helpers

    def _unwrap(self, result: RequestResult[T]) -> T:
        if success(result):
            return result.value
        self._raise_for_status(result.status)
        raise ORGBClientException(f"A failed request reported {result.status.name}")

    def _raise_for_status(self, status: RequestStatus) -> None:
        encode_error: Final = self._last_encode_error
        if status == RequestStatus.SEND_REQUEST_FAILED and encode_error is not None:
            # the arguments did not fit the message, nothing was sent
            raise ORGBUserError(f"{encode_error}") from encode_error
        raise_for_request_status(status, self.get_last_system_error())

    def _build(self, build: Callable[[], T]) -> T:
        """Build a message from the arguments of an operation.

        Raises:
            ORGBEncodeError: if an argument does not fit its field of the message
        """
        self._last_encode_error = None
        try:
            return build()
        except ValidationError as e:
            raise ORGBEncodeError(f"{e}") from e

    def _encode_failed(self, e: ORGBEncodeError) -> RequestStatus:
        logger.error(f"Failed to encode the request: {e}")
        self._last_encode_error = e
        return RequestStatus.SEND_REQUEST_FAILED

    def _send_when_connected(self, build: Callable[[], Message]) -> RequestStatus:
        """Send a message that the server does not reply to.

        The message is built only once the client is known to be connected.
        """
        if not self.is_connected():
            return RequestStatus.NOT_CONNECTED
        try:
            message: Final = self._build(build)
        except ORGBEncodeError as e:
            return self._encode_failed(e)
        if not self._send_message(message):
            return RequestStatus.SEND_REQUEST_FAILED
        return RequestStatus.SUCCESS

    def _request(self, request: ORGBRequest[TReply]) -> RequestResult[TReply]:
        if not self._send_message(request):
            return RequestFailure(RequestStatus.SEND_REQUEST_FAILED)
        status, reply = self._await_message(request.REPLY)
        if reply is None:
            return RequestFailure(status)
        return RequestSuccess(reply)

    def _send_message(self, message: Message | ORGBRequest[Any]) -> bool:
        name: Final = message.__class__.__name__
        self._last_encode_error = None
        try:
            # the whole frame is encoded before anything is sent
            frame: Final = message.dumps(self._negotiated_protocol_version)
        except ORGBEncodeError as e:
            self._encode_failed(e)
            return False

        logger.debug(f"Sending {name} ({len(frame)} B)")
        try:
            self._transport.send(frame)
        except ORGBTransportError as e:
            logger.error(f"Failed to send {name}: {e}")
            return False
        return True

    def _receive(self, size: int) -> Tuple[RequestStatus, bytes]:
        try:
            return RequestStatus.SUCCESS, self._transport.receive(size)
        except TransportDisconnected as e:
            logger.error(f"{e}")
            return RequestStatus.CONNECTION_CLOSED, b""
        except TransportTimeout as e:
            logger.error(f"{e}")
            return RequestStatus.NO_REPLY, b""
        except ORGBTransportError as e:
            logger.error(f"{e}")
            return RequestStatus.RECEIVE_ERROR, b""

    def _await_message(self, reply_type: Type[TReply]) -> Tuple[RequestStatus, TReply | None]:
        """Receive the next message, which must be a `reply_type`.

        `DeviceListUpdated` messages that arrive first are consumed and only
        mark the device list as out of date.
        """
        while True:
            status, data = self._receive(HEADER_SIZE)
            if status != RequestStatus.SUCCESS:
                return status, None

            try:
                header = Header.loads(data)
            except ORGBDecodeError as e:
                logger.error(f"Invalid header {data.hex()}: {e}")
                return RequestStatus.INVALID_REPLY, None

            if header.message_type != MessageType.DEVICE_LIST_UPDATED:
                break

            # the server may have sent it before it received our request
            logger.warning("Server reports that the device list has been updated")
            self._is_device_list_out_of_date = True
            if header.body_size > 0:
                status, _ = self._receive(header.body_size)
                if status != RequestStatus.SUCCESS:
                    return status, None

        # the body is received even for an unexpected type to stay aligned on headers
        status, body = self._receive(header.body_size)
        if status != RequestStatus.SUCCESS:
            return status, None

        if header.message_type != reply_type.TYPE:
            logger.error(
                f"Expected {reply_type.TYPE.name}, received {header.message_type.name}"
            )
            return RequestStatus.INVALID_REPLY, None

        try:
            reply: Final = reply_type.loads(header, body, self._negotiated_protocol_version)
        except ORGBDecodeError as e:
            logger.error(f"Invalid {reply_type.__name__}: {e}")
            return RequestStatus.INVALID_REPLY, None

        logger.debug(f"Received {reply_type.__name__}")
        return RequestStatus.SUCCESS, reply

    def _check_for_update_message_arrival(self) -> UpdateStatus:
        # Only check whether a message is already queued, don't wait for one.
        try:
            with _NonBlockingScope(self._transport, self._disconnect) as scope:
                status, body_size = self._peek_update_message()
        except ORGBTransportError as e:
            logger.error(f"Failed to switch to non-blocking mode: {e}")
            return UpdateStatus.OTHER_SYSTEM_ERROR

        if not scope.restored:
            # the socket is closed now rather than left in non-blocking mode
            return UpdateStatus.CANT_RESTORE_SOCKET
        if status == UpdateStatus.OUT_OF_DATE and body_size > 0:
            # received in blocking mode, the body may still be on its way
            return self._drain_update_body(body_size)
        return status

    def _peek_update_message(self) -> Tuple[UpdateStatus, int]:
        """Receive the header of a `DeviceListUpdated` if one is queued.

        Returns:
            The status of the check and the size of the body that follows the header.
        """
        try:
            data: Final = self._transport.receive(HEADER_SIZE)
        except TransportWouldBlock:
            return UpdateStatus.UP_TO_DATE, 0
        except TransportDisconnected as e:
            logger.error(f"{e}")
            return UpdateStatus.CONNECTION_CLOSED, 0
        except ORGBTransportError as e:
            logger.error(f"{e}")
            return UpdateStatus.OTHER_SYSTEM_ERROR, 0

        try:
            header: Final = Header.loads(data)
        except ORGBDecodeError as e:
            logger.error(f"Received an invalid header {data.hex()}: {e}")
            return UpdateStatus.UNEXPECTED_MESSAGE, 0

        if header.message_type != MessageType.DEVICE_LIST_UPDATED:
            logger.error(f"Received an unsolicited {header.message_type.name}")
            return UpdateStatus.UNEXPECTED_MESSAGE, 0

        logger.info("Server reports that the device list has been updated")
        return UpdateStatus.OUT_OF_DATE, header.body_size

    def _drain_update_body(self, body_size: int) -> UpdateStatus:
        # the notification counts even if its body is lost
        self._is_device_list_out_of_date = True
        try:
            self._transport.receive(body_size)
        except TransportDisconnected as e:
            logger.error(f"{e}")
            return UpdateStatus.CONNECTION_CLOSED
        except ORGBTransportError as e:
            logger.error(f"{e}")
            return UpdateStatus.OTHER_SYSTEM_ERROR
        return UpdateStatus.OUT_OF_DATE
