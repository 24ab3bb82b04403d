"""The RGB device model reported by an OpenRGB server.

A device (an "RGB controller" on the server side) is made of modes, zones and
LEDs.  Zones and LEDs remember the index of their parent device so that the
`ORGBClient` can address them without the device at hand.
"""

from __future__ import annotations

import re
from enum import IntEnum, IntFlag, unique
from typing import Annotated, Dict, Final, Iterator, List, Sequence, Union, overload

from pydantic import Field
from pydantic.dataclasses import dataclass

from orgbclient.codec import BinaryReader, BinaryWriter
from orgbclient.exceptions import ORGBDecodeError

ColorComponent = Annotated[int, Field(ge=0, le=0xFF)]


@unique
class DeviceType(IntEnum):
    MOTHERBOARD = 0
    DRAM = 1
    GPU = 2
    COOLER = 3
    LEDSTRIP = 4
    KEYBOARD = 5
    MOUSE = 6
    MOUSEMAT = 7
    HEADSET = 8
    HEADSET_STAND = 9
    GAMEPAD = 10
    LIGHT = 11
    SPEAKER = 12
    VIRTUAL = 13
    STORAGE = 14
    CASE = 15
    MICROPHONE = 16
    ACCESSORY = 17
    KEYPAD = 18
    UNKNOWN = 19


@unique
class ZoneType(IntEnum):
    SINGLE = 0
    LINEAR = 1
    MATRIX = 2


class ModeFlag(IntFlag):
    """Capabilities of a `Mode`."""

    HAS_SPEED = 1 << 0
    HAS_DIRECTION_LR = 1 << 1
    HAS_DIRECTION_UD = 1 << 2
    HAS_DIRECTION_HV = 1 << 3
    HAS_BRIGHTNESS = 1 << 4
    HAS_PER_LED_COLOR = 1 << 5
    HAS_MODE_SPECIFIC_COLOR = 1 << 6
    HAS_RANDOM_COLOR = 1 << 7
    MANUAL_SAVE = 1 << 8
    AUTOMATIC_SAVE = 1 << 9


@unique
class Direction(IntEnum):
    LEFT = 0
    RIGHT = 1
    UP = 2
    DOWN = 3
    HORIZONTAL = 4
    VERTICAL = 5


@unique
class ColorMode(IntEnum):
    NONE = 0
    PER_LED = 1
    MODE_SPECIFIC = 2
    RANDOM = 3


# Newer servers may report values this client does not know about yet.
DeviceTypeValue = Annotated[Union[DeviceType, int], Field(union_mode="left_to_right")]
ZoneTypeValue = Annotated[Union[ZoneType, int], Field(union_mode="left_to_right")]
DirectionValue = Annotated[Union[Direction, int], Field(union_mode="left_to_right")]
ColorModeValue = Annotated[Union[ColorMode, int], Field(union_mode="left_to_right")]

_NAMED_COLORS: Final[Dict[str, str]] = {
    "black": "000000",
    "white": "ffffff",
    "red": "ff0000",
    "green": "00ff00",
    "blue": "0000ff",
    "yellow": "ffff00",
    "cyan": "00ffff",
    "magenta": "ff00ff",
    "orange": "ff8000",
    "purple": "8000ff",
}

_HEX_COLOR: Final = re.compile(r"#?([0-9a-fA-F]{6})")


@dataclass(frozen=True)
class Color:
    r: ColorComponent
    g: ColorComponent
    b: ColorComponent

    @staticmethod
    def parse(text: str) -> 'Color':
        """Parse `"ff8000"`, `"#FF8000"` or one of the basic color names.

        Raises:
            ValueError: if `text` is not a color
        """
        text = _NAMED_COLORS.get(text.strip().lower(), text.strip())
        match = _HEX_COLOR.fullmatch(text)
        if match is None:
            raise ValueError(f"{text!r} is not a color, use RRGGBB or one of {list(_NAMED_COLORS)}")
        value: Final = int(match.group(1), 16)
        return Color(r=(value >> 16) & 0xFF, g=(value >> 8) & 0xFF, b=value & 0xFF)

    @staticmethod
    def load_from(reader: BinaryReader) -> 'Color':
        r, g, b = reader.color()
        return Color(r=r, g=g, b=b)

    def dump_to(self, writer: BinaryWriter) -> None:
        writer.color(self.r, self.g, self.b)

    def __str__(self) -> str:
        return f"{self.r:02x}{self.g:02x}{self.b:02x}"


def load_colors(reader: BinaryReader) -> List[Color]:
    """A `u16` count followed by the colors."""

    return [Color.load_from(reader) for _ in range(reader.u16())]


def dump_colors(writer: BinaryWriter, colors: Sequence[Color]) -> None:
    writer.u16(len(colors))
    for color in colors:
        color.dump_to(writer)


@dataclass(frozen=True)
class Mode:
    """A lighting effect that a device supports."""

    parent_idx: int
    idx: int
    name: str
    value: int
    flags: ModeFlag
    speed_min: int
    speed_max: int
    colors_min: int
    colors_max: int
    speed: int
    direction: DirectionValue
    color_mode: ColorModeValue
    colors: List[Color]
    brightness_min: int = 0
    """Protocol version 3 and newer."""
    brightness_max: int = 0
    """Protocol version 3 and newer."""
    brightness: int = 0
    """Protocol version 3 and newer."""

    @staticmethod
    def load_from(
        reader: BinaryReader, parent_idx: int, idx: int, protocol_version: int
    ) -> 'Mode':
        name = reader.string()
        value = reader.i32()
        flags = ModeFlag(reader.u32())
        speed_min = reader.u32()
        speed_max = reader.u32()
        brightness_min = brightness_max = 0
        if protocol_version >= 3:
            brightness_min = reader.u32()
            brightness_max = reader.u32()
        colors_min = reader.u32()
        colors_max = reader.u32()
        speed = reader.u32()
        brightness = reader.u32() if protocol_version >= 3 else 0
        direction = reader.u32()
        color_mode = reader.u32()
        colors = load_colors(reader)

        return Mode(
            parent_idx=parent_idx,
            idx=idx,
            name=name,
            value=value,
            flags=flags,
            speed_min=speed_min,
            speed_max=speed_max,
            brightness_min=brightness_min,
            brightness_max=brightness_max,
            colors_min=colors_min,
            colors_max=colors_max,
            speed=speed,
            brightness=brightness,
            direction=direction,
            color_mode=color_mode,
            colors=colors,
        )

    def dump_to(self, writer: BinaryWriter, protocol_version: int) -> None:
        writer.string(self.name)
        writer.i32(self.value)
        writer.u32(self.flags)
        writer.u32(self.speed_min)
        writer.u32(self.speed_max)
        if protocol_version >= 3:
            writer.u32(self.brightness_min)
            writer.u32(self.brightness_max)
        writer.u32(self.colors_min)
        writer.u32(self.colors_max)
        writer.u32(self.speed)
        if protocol_version >= 3:
            writer.u32(self.brightness)
        writer.u32(self.direction)
        writer.u32(self.color_mode)
        dump_colors(writer, self.colors)


@dataclass(frozen=True)
class Zone:
    """A group of LEDs of a device, e.g. an ARGB header on a motherboard."""

    parent_idx: int
    idx: int
    name: str
    type: ZoneTypeValue
    leds_min: int
    leds_max: int
    leds_count: int
    matrix_height: int = 0
    matrix_width: int = 0
    matrix: List[int] = Field(default_factory=list)
    """Row-major LED indices of a `ZoneType.MATRIX` zone."""

    @staticmethod
    def load_from(reader: BinaryReader, parent_idx: int, idx: int) -> 'Zone':
        name = reader.string()
        type_ = reader.i32()
        leds_min = reader.u32()
        leds_max = reader.u32()
        leds_count = reader.u32()

        matrix_size: Final = reader.u16()
        height = width = 0
        matrix: List[int] = []
        if matrix_size > 0:
            start = reader.offset
            height = reader.u32()
            width = reader.u32()
            matrix = [reader.u32() for _ in range(height * width)]
            if reader.offset - start != matrix_size:
                raise ORGBDecodeError(
                    f"Zone {name!r} matrix is {reader.offset - start} B, expected {matrix_size} B"
                )

        return Zone(
            parent_idx=parent_idx,
            idx=idx,
            name=name,
            type=type_,
            leds_min=leds_min,
            leds_max=leds_max,
            leds_count=leds_count,
            matrix_height=height,
            matrix_width=width,
            matrix=matrix,
        )

    def dump_to(self, writer: BinaryWriter) -> None:
        writer.string(self.name)
        writer.i32(self.type)
        writer.u32(self.leds_min)
        writer.u32(self.leds_max)
        writer.u32(self.leds_count)
        if self.matrix:
            writer.u16(8 + 4 * len(self.matrix))
            writer.u32(self.matrix_height)
            writer.u32(self.matrix_width)
            for value in self.matrix:
                writer.u32(value)
        else:
            writer.u16(0)


@dataclass(frozen=True)
class LED:
    parent_idx: int
    idx: int
    name: str
    value: int

    @staticmethod
    def load_from(reader: BinaryReader, parent_idx: int, idx: int) -> 'LED':
        return LED(parent_idx=parent_idx, idx=idx, name=reader.string(), value=reader.u32())

    def dump_to(self, writer: BinaryWriter) -> None:
        writer.string(self.name)
        writer.u32(self.value)


@dataclass(frozen=True)
class Device:
    """A snapshot of one RGB device of the server."""

    idx: int
    type: DeviceTypeValue
    name: str
    description: str
    version: str
    serial: str
    location: str
    active_mode: int
    modes: List[Mode]
    zones: List[Zone]
    leds: List[LED]
    colors: List[Color]
    vendor: str = ""
    """Protocol version 1 and newer."""

    @staticmethod
    def load_from(reader: BinaryReader, idx: int, protocol_version: int) -> 'Device':
        """Load a `Device` description, including its leading `u32` data size."""

        start: Final = reader.offset
        data_size: Final = reader.u32()

        type_ = reader.i32()
        name = reader.string()
        vendor = reader.string() if protocol_version >= 1 else ""
        description = reader.string()
        version = reader.string()
        serial = reader.string()
        location = reader.string()

        mode_count = reader.u16()
        active_mode = reader.i32()
        modes = [Mode.load_from(reader, idx, i, protocol_version) for i in range(mode_count)]
        zones = [Zone.load_from(reader, idx, i) for i in range(reader.u16())]
        leds = [LED.load_from(reader, idx, i) for i in range(reader.u16())]
        colors = load_colors(reader)

        if reader.offset - start != data_size:
            raise ORGBDecodeError(
                f"Device {name!r} description is {reader.offset - start} B, "
                f"but declares {data_size} B"
            )

        return Device(
            idx=idx,
            type=type_,
            name=name,
            vendor=vendor,
            description=description,
            version=version,
            serial=serial,
            location=location,
            active_mode=active_mode,
            modes=modes,
            zones=zones,
            leds=leds,
            colors=colors,
        )

    def dump_to(self, writer: BinaryWriter, protocol_version: int) -> None:
        body = BinaryWriter()
        body.i32(self.type)
        body.string(self.name)
        if protocol_version >= 1:
            body.string(self.vendor)
        body.string(self.description)
        body.string(self.version)
        body.string(self.serial)
        body.string(self.location)
        body.u16(len(self.modes))
        body.i32(self.active_mode)
        for mode in self.modes:
            mode.dump_to(body, protocol_version)
        body.u16(len(self.zones))
        for zone in self.zones:
            zone.dump_to(body)
        body.u16(len(self.leds))
        for led in self.leds:
            led.dump_to(body)
        dump_colors(body, self.colors)

        writer.u32(4 + len(body))
        writer.write_bytes(body.getvalue())

    def find_mode(self, name: str) -> Mode | None:
        return next((m for m in self.modes if m.name == name), None)

    def find_zone(self, name: str) -> Zone | None:
        return next((z for z in self.zones if z.name == name), None)

    def find_led(self, name: str) -> LED | None:
        return next((led for led in self.leds if led.name == name), None)


class DeviceList(Sequence[Device]):
    """The devices of a server, indexed by their device index."""

    def __init__(self, devices: Sequence[Device] = ()) -> None:
        self._devices: Final[List[Device]] = list(devices)

    @overload
    def __getitem__(self, index: int) -> Device: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[Device]: ...

    def __getitem__(self, index: int | slice) -> Device | Sequence[Device]:
        return self._devices[index]

    def __len__(self) -> int:
        return len(self._devices)

    def __iter__(self) -> Iterator[Device]:
        return iter(self._devices)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DeviceList):
            return self._devices == other._devices
        return NotImplemented

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._devices!r})"

    def find(self, name: str) -> Device | None:
        return next((d for d in self._devices if d.name == name), None)
