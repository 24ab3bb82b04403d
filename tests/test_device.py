"""Tests for the RGB device model and its wire layout."""

from __future__ import annotations

import dataclasses
import struct

import pytest
from conftest import make_device

from orgbclient.codec import BinaryReader, BinaryWriter
from orgbclient.device import (
    LED,
    Color,
    Device,
    DeviceList,
    DeviceType,
    Direction,
    Mode,
    ModeFlag,
    Zone,
    ZoneType,
    load_colors,
)
from orgbclient.exceptions import ORGBDecodeError


def _dump_device(device: Device, protocol_version: int) -> bytes:
    w = BinaryWriter()
    device.dump_to(w, protocol_version)
    return w.getvalue()


def _load_device(data: bytes, protocol_version: int, idx: int = 0) -> Device:
    r = BinaryReader(data)
    device = Device.load_from(r, idx, protocol_version)
    r.expect_end()
    return device


@pytest.mark.parametrize(
    "text, color",
    (
        ("ff8000", Color(r=255, g=128, b=0)),
        ("#FF8000", Color(r=255, g=128, b=0)),
        ("000000", Color(r=0, g=0, b=0)),
        ("Red", Color(r=255, g=0, b=0)),
        (" blue ", Color(r=0, g=0, b=255)),
    ),
)
def test_color_parse(text: str, color: Color) -> None:
    assert Color.parse(text) == color


@pytest.mark.parametrize("text", ("", "fff", "12345", "1234567", "gg0000", "chartreuse"))
def test_color_parse_invalid(text: str) -> None:
    with pytest.raises(ValueError):
        Color.parse(text)


def test_color_str() -> None:
    assert str(Color(r=1, g=0xAB, b=0xFF)) == "01abff"


def test_color_out_of_range() -> None:
    with pytest.raises(ValueError):
        Color(r=256, g=0, b=0)


def test_colors_layout() -> None:
    w = BinaryWriter()
    Color(r=1, g=2, b=3).dump_to(w)
    assert w.getvalue() == bytes([1, 2, 3, 0])

    r = BinaryReader(bytes([2, 0, 1, 2, 3, 0, 4, 5, 6, 0]))
    assert load_colors(r) == [Color(r=1, g=2, b=3), Color(r=4, g=5, b=6)]


def test_zone_layout() -> None:
    zone = Zone(
        parent_idx=3, idx=1, name="Z", type=ZoneType.LINEAR, leds_min=1, leds_max=2, leds_count=2
    )
    expected = bytes([2, 0]) + b"Z\x00" + struct.pack("<iIIIH", 1, 1, 2, 2, 0)

    w = BinaryWriter()
    zone.dump_to(w)

    assert w.getvalue() == expected
    assert Zone.load_from(BinaryReader(expected), 3, 1) == zone


def test_zone_matrix() -> None:
    matrix = struct.pack("<II", 1, 3) + struct.pack("<III", 0, 1, 0xFFFFFFFF)
    data = (
        bytes([2, 0])
        + b"M\x00"
        + struct.pack("<iIII", ZoneType.MATRIX, 2, 2, 2)
        + struct.pack("<H", len(matrix))
        + matrix
    )

    zone = Zone.load_from(BinaryReader(data), 0, 0)

    assert zone.type == ZoneType.MATRIX
    assert zone.matrix_height == 1
    assert zone.matrix_width == 3
    assert zone.matrix == [0, 1, 0xFFFFFFFF]


def test_zone_matrix_size_mismatch() -> None:
    matrix = struct.pack("<II", 2, 2) + struct.pack("<IIII", 0, 1, 2, 3)
    data = (
        bytes([2, 0])
        + b"M\x00"
        + struct.pack("<iIII", ZoneType.MATRIX, 4, 4, 4)
        + struct.pack("<H", len(matrix) - 4)
        + matrix
    )

    with pytest.raises(ORGBDecodeError):
        Zone.load_from(BinaryReader(data), 0, 0)


def test_led_layout() -> None:
    data = bytes([4, 0]) + b"Key\x00" + struct.pack("<I", 0x1234)

    led = LED.load_from(BinaryReader(data), 2, 5)

    assert led == LED(parent_idx=2, idx=5, name="Key", value=0x1234)
    w = BinaryWriter()
    led.dump_to(w)
    assert w.getvalue() == data


def test_mode_brightness_fields_depend_on_protocol_version(device: Device) -> None:
    mode = device.modes[1]
    v2, v3 = BinaryWriter(), BinaryWriter()

    mode.dump_to(v2, 2)
    mode.dump_to(v3, 3)

    # brightness_min, brightness_max and brightness
    assert len(v3) - len(v2) == 12

    loaded = Mode.load_from(BinaryReader(v2.getvalue()), 0, 1, 2)
    assert loaded == dataclasses.replace(mode, brightness_min=0, brightness_max=0, brightness=0)


def test_mode_flags() -> None:
    w = BinaryWriter().string("Rainbow").i32(7).u32(0x21)
    w.u32(0).u32(0).u32(0).u32(0).u32(0).u32(Direction.UP).u32(0).u16(0)

    mode = Mode.load_from(BinaryReader(w.getvalue()), 0, 0, 2)

    assert mode.flags == ModeFlag.HAS_SPEED | ModeFlag.HAS_PER_LED_COLOR
    assert ModeFlag.HAS_SPEED in mode.flags
    assert ModeFlag.HAS_BRIGHTNESS not in mode.flags
    assert mode.direction == Direction.UP


@pytest.mark.parametrize("protocol_version", (1, 2, 3))
def test_device_round_trip(device: Device, protocol_version: int) -> None:
    loaded = _load_device(_dump_device(device, 3), 3)

    assert loaded == device
    assert loaded.modes[1].parent_idx == 0
    assert loaded.zones[1].matrix == [3, 4, 5, 6]

    loaded = _load_device(_dump_device(device, protocol_version), protocol_version)
    assert loaded.vendor == "Generic"


def test_device_version_0_has_no_vendor(device: Device) -> None:
    v0 = _dump_device(device, 0)
    v1 = _dump_device(device, 1)

    assert len(v1) - len(v0) == 2 + len("Generic") + 1
    assert _load_device(v0, 0).vendor == ""


def test_device_indices(device: Device) -> None:
    loaded = _load_device(_dump_device(device, 3), 3, idx=4)

    assert loaded.idx == 4
    assert all(m.parent_idx == 4 for m in loaded.modes)
    assert all(z.parent_idx == 4 for z in loaded.zones)
    assert [led.idx for led in loaded.leds] == list(range(7))


def test_device_data_size_mismatch(device: Device) -> None:
    data = bytearray(_dump_device(device, 3))
    (size,) = struct.unpack_from("<I", data)
    struct.pack_into("<I", data, 0, size + 1)

    with pytest.raises(ORGBDecodeError):
        _load_device(bytes(data), 3)


def test_device_truncated(device: Device) -> None:
    data = _dump_device(device, 3)

    with pytest.raises(ORGBDecodeError):
        _load_device(data[:-1], 3)


def test_device_unknown_type(device: Device) -> None:
    future = dataclasses.replace(device, type=42)

    loaded = _load_device(_dump_device(future, 3), 3)

    assert loaded.type == 42
    assert _load_device(_dump_device(device, 3), 3).type == DeviceType.LEDSTRIP


def test_device_find(device: Device) -> None:
    assert device.find_mode("Breathing") == device.modes[1]
    assert device.find_mode("Rainbow") is None
    assert device.find_zone("Panel") == device.zones[1]
    assert device.find_led("LED 2") == device.leds[1]


def test_device_list() -> None:
    devices = DeviceList([make_device(0, "A"), make_device(1, "B")])

    assert len(devices) == 2
    assert devices[1].name == "B"
    assert [d.idx for d in devices] == [0, 1]
    assert devices.find("A") == devices[0]
    assert devices.find("C") is None
    assert devices == DeviceList([make_device(0, "A"), make_device(1, "B")])
    assert devices != DeviceList()
