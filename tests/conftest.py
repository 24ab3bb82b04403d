from __future__ import annotations

import pytest

from orgbclient.device import (
    LED,
    Color,
    ColorMode,
    Device,
    DeviceType,
    Direction,
    Mode,
    ModeFlag,
    Zone,
    ZoneType,
)


def make_device(idx: int = 0, name: str = "LED Strip") -> Device:
    """A device with two modes, a linear zone of 3 LEDs and a 2x2 matrix zone."""

    red = Color(r=255, g=0, b=0)
    return Device(
        idx=idx,
        type=DeviceType.LEDSTRIP,
        name=name,
        vendor="Generic",
        description="ARGB controller",
        version="1.2.3",
        serial="SN0001",
        location="HID: /dev/hidraw3",
        active_mode=1,
        modes=[
            Mode(
                parent_idx=idx,
                idx=0,
                name="Direct",
                value=0,
                flags=ModeFlag.HAS_PER_LED_COLOR,
                speed_min=0,
                speed_max=0,
                colors_min=0,
                colors_max=0,
                speed=0,
                direction=Direction.LEFT,
                color_mode=ColorMode.PER_LED,
                colors=[],
            ),
            Mode(
                parent_idx=idx,
                idx=1,
                name="Breathing",
                value=3,
                flags=(
                    ModeFlag.HAS_SPEED | ModeFlag.HAS_BRIGHTNESS | ModeFlag.HAS_MODE_SPECIFIC_COLOR
                ),
                speed_min=1,
                speed_max=10,
                brightness_min=0,
                brightness_max=100,
                colors_min=1,
                colors_max=2,
                speed=5,
                brightness=80,
                direction=Direction.RIGHT,
                color_mode=ColorMode.MODE_SPECIFIC,
                colors=[red],
            ),
        ],
        zones=[
            Zone(
                parent_idx=idx,
                idx=0,
                name="Strip",
                type=ZoneType.LINEAR,
                leds_min=1,
                leds_max=60,
                leds_count=3,
            ),
            Zone(
                parent_idx=idx,
                idx=1,
                name="Panel",
                type=ZoneType.MATRIX,
                leds_min=4,
                leds_max=4,
                leds_count=4,
                matrix_height=2,
                matrix_width=2,
                matrix=[3, 4, 5, 6],
            ),
        ],
        leds=[LED(parent_idx=idx, idx=i, name=f"LED {i + 1}", value=i) for i in range(7)],
        colors=[red] * 3 + [Color(r=0, g=0, b=255)] * 4,
    )


@pytest.fixture
def device() -> Device:
    return make_device()
