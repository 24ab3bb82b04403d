"""Connection negotiation and device enumeration messages."""

from __future__ import annotations

from typing import ClassVar, Type

from pydantic import Field

from orgbclient.codec import BinaryReader, BinaryWriter
from orgbclient.device import Device
from orgbclient.header import UINT32_MAX, MessageType
from orgbclient.message import Message, StringMessage


class ReplyProtocolVersion(Message):
    TYPE: ClassVar[MessageType] = MessageType.REQUEST_PROTOCOL_VERSION

    server_version: int = Field(ge=0, le=UINT32_MAX)

    def _dump_body(self, writer: BinaryWriter, protocol_version: int) -> None:
        writer.u32(self.server_version)

    @classmethod
    def _load_body(
        cls, reader: BinaryReader, device_idx: int, protocol_version: int
    ) -> ReplyProtocolVersion:
        return cls(device_idx=device_idx, server_version=reader.u32())


class RequestProtocolVersion(Message):
    """Announce the client's protocol version; the body is independent of any version."""

    TYPE: ClassVar[MessageType] = MessageType.REQUEST_PROTOCOL_VERSION
    REPLY: ClassVar[Type[ReplyProtocolVersion]] = ReplyProtocolVersion

    client_version: int = Field(ge=0, le=UINT32_MAX)

    def _dump_body(self, writer: BinaryWriter, protocol_version: int) -> None:
        writer.u32(self.client_version)

    @classmethod
    def _load_body(
        cls, reader: BinaryReader, device_idx: int, protocol_version: int
    ) -> RequestProtocolVersion:
        return cls(device_idx=device_idx, client_version=reader.u32())


class SetClientName(StringMessage):
    TYPE: ClassVar[MessageType] = MessageType.SET_CLIENT_NAME


class ReplyControllerCount(Message):
    TYPE: ClassVar[MessageType] = MessageType.REQUEST_CONTROLLER_COUNT

    count: int = Field(ge=0, le=UINT32_MAX)

    def _dump_body(self, writer: BinaryWriter, protocol_version: int) -> None:
        writer.u32(self.count)

    @classmethod
    def _load_body(
        cls, reader: BinaryReader, device_idx: int, protocol_version: int
    ) -> ReplyControllerCount:
        return cls(device_idx=device_idx, count=reader.u32())


class RequestControllerCount(Message):
    TYPE: ClassVar[MessageType] = MessageType.REQUEST_CONTROLLER_COUNT
    REPLY: ClassVar[Type[ReplyControllerCount]] = ReplyControllerCount


class ReplyControllerData(Message):
    TYPE: ClassVar[MessageType] = MessageType.REQUEST_CONTROLLER_DATA

    device: Device

    def _dump_body(self, writer: BinaryWriter, protocol_version: int) -> None:
        self.device.dump_to(writer, protocol_version)

    @classmethod
    def _load_body(
        cls, reader: BinaryReader, device_idx: int, protocol_version: int
    ) -> ReplyControllerData:
        return cls(
            device_idx=device_idx,
            device=Device.load_from(reader, device_idx, protocol_version),
        )


class RequestControllerData(Message):
    """Request the description of the device at `device_idx`.

    The server describes the device in the layout of the version that the
    request carries, so the body is the negotiated version itself.  Servers
    without versioning expect an empty body.
    """

    TYPE: ClassVar[MessageType] = MessageType.REQUEST_CONTROLLER_DATA
    REPLY: ClassVar[Type[ReplyControllerData]] = ReplyControllerData

    def _dump_body(self, writer: BinaryWriter, protocol_version: int) -> None:
        if protocol_version > 0:
            writer.u32(protocol_version)

    @classmethod
    def _load_body(
        cls, reader: BinaryReader, device_idx: int, protocol_version: int
    ) -> RequestControllerData:
        if protocol_version > 0:
            reader.u32()
        return cls(device_idx=device_idx)


class DeviceListUpdated(Message):
    """Pushed by the server, never requested; the body is empty."""

    TYPE: ClassVar[MessageType] = MessageType.DEVICE_LIST_UPDATED
