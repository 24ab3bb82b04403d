"""Tests for the `orgbcli` command line interface."""

from __future__ import annotations

from typing import Iterator
from unittest.mock import MagicMock, patch

import pytest
from conftest import make_device

from orgbclient.cli import _parse_host, orgbcli
from orgbclient.device import Color, DeviceList
from orgbclient.exceptions import ORGBConnectionError

DEVICES = DeviceList([make_device(0, "Motherboard"), make_device(1, "LED Strip")])


@pytest.fixture
def client() -> Iterator[MagicMock]:
    with patch("orgbclient.cli.ORGBClient", autospec=True) as ORGBClient:
        c = ORGBClient.return_value
        c.request_device_list_or_raise.return_value = DEVICES
        yield c


@pytest.mark.parametrize(
    "host, port, expected",
    (
        ("127.0.0.1", None, ("127.0.0.1", 6742)),
        ("127.0.0.1:1234", None, ("127.0.0.1", 1234)),
        ("127.0.0.1:1234", 4321, ("127.0.0.1", 4321)),
        ("openrgb.local", 4321, ("openrgb.local", 4321)),
        ("::1", None, ("::1", 6742)),
    ),
)
def test_parse_host(host: str, port: int | None, expected: tuple) -> None:
    assert _parse_host(host, port) == expected


def test_listdevs(client: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
    assert orgbcli(["listdevs"]) == 0

    client.connect_or_raise.assert_called_once_with("127.0.0.1", 6742)
    client.disconnect.assert_called_once()
    out = capsys.readouterr().out
    assert "[0] Motherboard (LEDSTRIP)" in out
    assert "[1] LED Strip (LEDSTRIP)" in out


def test_listdevs_verbose(client: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
    assert orgbcli(["-v", "listdevs"]) == 0

    out = capsys.readouterr().out
    assert "vendor:      Generic" in out
    assert "*[1] Breathing" in out
    assert "[1] Panel (MATRIX, 4 LEDs, 4-4)" in out
    assert "#ff0000" in out


def test_options() -> None:
    with patch("orgbclient.cli.ORGBClient", autospec=True) as ORGBClient:
        ORGBClient.return_value.request_device_count_or_raise.return_value = 2

        args = ["--host", "10.0.0.5:1234", "--name", "pytest", "--timeout", "2", "getcount"]
        assert orgbcli(args) == 0

    ORGBClient.assert_called_once_with(client_name="pytest", timeout_s=2.0)
    ORGBClient.return_value.connect_or_raise.assert_called_once_with("10.0.0.5", 1234)


def test_getcount(client: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
    client.request_device_count_or_raise.return_value = 2

    assert orgbcli(["getcount"]) == 0
    assert capsys.readouterr().out == "2\n"


def test_getdev(client: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
    client.request_device_info_or_raise.return_value = DEVICES[1]

    assert orgbcli(["getdev", "1"]) == 0

    client.request_device_info_or_raise.assert_called_once_with(1)
    assert "location:    HID: /dev/hidraw3" in capsys.readouterr().out


def test_setcolor_device(client: MagicMock) -> None:
    assert orgbcli(["setcolor", "LED Strip", "00ff00"]) == 0

    client.set_device_color_or_raise.assert_called_once_with(DEVICES[1], Color(r=0, g=255, b=0))


def test_setcolor_zone(client: MagicMock) -> None:
    assert orgbcli(["setcolor", "0", "zone:Panel", "#0000FF"]) == 0

    client.set_zone_color_or_raise.assert_called_once_with(
        DEVICES[0].zones[1], Color(r=0, g=0, b=255)
    )


def test_setcolor_led(client: MagicMock) -> None:
    assert orgbcli(["setcolor", "1", "led:2", "red"]) == 0

    client.set_led_color_or_raise.assert_called_once_with(
        DEVICES[1].leds[2], Color(r=255, g=0, b=0)
    )


def test_setcolor_invalid_target(client: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
    assert orgbcli(["setcolor", "1", "segment:2", "red"]) == 1
    assert "zone:<id> or led:<id>" in capsys.readouterr().err

    assert orgbcli(["setcolor", "Keyboard", "red"]) == 1
    client.set_device_color_or_raise.assert_not_called()


def test_setcolor_invalid_color(client: MagicMock) -> None:
    with pytest.raises(SystemExit):
        orgbcli(["setcolor", "1", "not-a-color"])


def test_modes(client: MagicMock) -> None:
    assert orgbcli(["custommode", "1"]) == 0
    client.switch_to_custom_mode_or_raise.assert_called_once_with(DEVICES[1])

    assert orgbcli(["changemode", "1", "Breathing"]) == 0
    client.change_mode_or_raise.assert_called_once_with(DEVICES[1], DEVICES[1].modes[1])

    assert orgbcli(["savemode", "Motherboard", "0"]) == 0
    client.save_mode_or_raise.assert_called_once_with(DEVICES[0], DEVICES[0].modes[0])


def test_resizezone(client: MagicMock) -> None:
    assert orgbcli(["resizezone", "1", "Strip", "30"]) == 0
    client.set_zone_size_or_raise.assert_called_once_with(DEVICES[1].zones[0], 30)

    assert orgbcli(["resizezone", "1", "Strip", "61"]) == 1
    client.set_zone_size_or_raise.assert_called_once()


def test_profiles(client: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
    client.request_profile_list_or_raise.return_value = ["Day", "Night"]

    assert orgbcli(["listprofiles"]) == 0
    assert capsys.readouterr().out == "Day\nNight\n"

    assert orgbcli(["saveprofile", "Night"]) == 0
    client.save_profile_or_raise.assert_called_once_with("Night")

    assert orgbcli(["loadprofile", "Night"]) == 0
    client.load_profile_or_raise.assert_called_once_with("Night")

    assert orgbcli(["delprofile", "Night"]) == 0
    client.delete_profile_or_raise.assert_called_once_with("Night")
    client.load_profile_or_raise.assert_called_once()


def test_connect_failure(client: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
    client.connect_or_raise.side_effect = ORGBConnectionError("Could not connect", 111)

    assert orgbcli(["listdevs"]) == 1

    assert "Failed to connect to 127.0.0.1:6742" in capsys.readouterr().err
    client.request_device_list_or_raise.assert_not_called()


def test_command_failure(client: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
    client.request_device_count_or_raise.side_effect = ORGBConnectionError("No reply")

    assert orgbcli(["getcount"]) == 1

    assert "getcount failed: No reply" in capsys.readouterr().err
    client.disconnect.assert_called_once()


def test_missing_command() -> None:
    with pytest.raises(SystemExit):
        orgbcli([])
