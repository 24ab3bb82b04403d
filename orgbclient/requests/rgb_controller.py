"""Messages that change the lighting of a device.

None of them is answered by the server.
"""

from __future__ import annotations

from typing import ClassVar, Final, List

from pydantic import Field

from orgbclient.codec import BinaryReader, BinaryWriter
from orgbclient.device import Color, Mode, dump_colors, load_colors
from orgbclient.header import MessageType
from orgbclient.message import Message

INT32_MAX: Final = 0x7FFFFFFF


class ResizeZone(Message):
    TYPE: ClassVar[MessageType] = MessageType.RGBCONTROLLER_RESIZEZONE

    zone_idx: int = Field(ge=0, le=INT32_MAX)
    new_size: int = Field(ge=0, le=INT32_MAX)

    def _dump_body(self, writer: BinaryWriter, protocol_version: int) -> None:
        writer.i32(self.zone_idx)
        writer.i32(self.new_size)

    @classmethod
    def _load_body(
        cls, reader: BinaryReader, device_idx: int, protocol_version: int
    ) -> ResizeZone:
        return cls(device_idx=device_idx, zone_idx=reader.i32(), new_size=reader.i32())


class UpdateLEDs(Message):
    """Set the color of every LED of the device, in LED index order."""

    TYPE: ClassVar[MessageType] = MessageType.RGBCONTROLLER_UPDATELEDS

    colors: List[Color]

    def _dump_body(self, writer: BinaryWriter, protocol_version: int) -> None:
        colors: Final = BinaryWriter()
        dump_colors(colors, self.colors)
        writer.u32(4 + len(colors))
        writer.write_bytes(colors.getvalue())

    @classmethod
    def _load_body(
        cls, reader: BinaryReader, device_idx: int, protocol_version: int
    ) -> UpdateLEDs:
        reader.u32()  # data size
        return cls(device_idx=device_idx, colors=load_colors(reader))


class UpdateZoneLEDs(Message):
    """Set the color of every LED of one zone of the device."""

    TYPE: ClassVar[MessageType] = MessageType.RGBCONTROLLER_UPDATEZONELEDS

    zone_idx: int = Field(ge=0, le=INT32_MAX)
    colors: List[Color]

    def _dump_body(self, writer: BinaryWriter, protocol_version: int) -> None:
        payload: Final = BinaryWriter()
        payload.u32(self.zone_idx)
        dump_colors(payload, self.colors)
        writer.u32(4 + len(payload))
        writer.write_bytes(payload.getvalue())

    @classmethod
    def _load_body(
        cls, reader: BinaryReader, device_idx: int, protocol_version: int
    ) -> UpdateZoneLEDs:
        reader.u32()  # data size
        return cls(device_idx=device_idx, zone_idx=reader.u32(), colors=load_colors(reader))


class UpdateSingleLED(Message):
    TYPE: ClassVar[MessageType] = MessageType.RGBCONTROLLER_UPDATESINGLELED

    led_idx: int = Field(ge=0, le=INT32_MAX)
    color: Color

    def _dump_body(self, writer: BinaryWriter, protocol_version: int) -> None:
        writer.i32(self.led_idx)
        self.color.dump_to(writer)

    @classmethod
    def _load_body(
        cls, reader: BinaryReader, device_idx: int, protocol_version: int
    ) -> UpdateSingleLED:
        return cls(device_idx=device_idx, led_idx=reader.i32(), color=Color.load_from(reader))


class SetCustomMode(Message):
    """Switch the device to its directly controlled mode; the body is empty."""

    TYPE: ClassVar[MessageType] = MessageType.RGBCONTROLLER_SETCUSTOMMODE


class _ModeMessage(Message):
    mode: Mode

    def _dump_body(self, writer: BinaryWriter, protocol_version: int) -> None:
        payload: Final = BinaryWriter()
        payload.i32(self.mode.idx)
        self.mode.dump_to(payload, protocol_version)
        writer.u32(4 + len(payload))
        writer.write_bytes(payload.getvalue())

    @classmethod
    def _load_body(
        cls, reader: BinaryReader, device_idx: int, protocol_version: int
    ) -> _ModeMessage:
        reader.u32()  # data size
        mode_idx: Final = reader.i32()
        return cls(
            device_idx=device_idx,
            mode=Mode.load_from(reader, device_idx, mode_idx, protocol_version),
        )


class UpdateMode(_ModeMessage):
    """Activate `mode` with its current parameters."""

    TYPE: ClassVar[MessageType] = MessageType.RGBCONTROLLER_UPDATEMODE


class SaveMode(_ModeMessage):
    """Store `mode` to the device's persistent memory, protocol version 3 and newer."""

    TYPE: ClassVar[MessageType] = MessageType.RGBCONTROLLER_SAVEMODE
