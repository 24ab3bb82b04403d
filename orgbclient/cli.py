"""A minimal CLI for controlling the RGB devices of an OpenRGB server."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, Final, List, Sequence, Tuple, TypeVar

from orgbclient import (
    DEFAULT_CLIENT_NAME,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT_S,
    ORGBClient,
)
from orgbclient.device import LED, Color, Device, DeviceList, Mode, Zone
from orgbclient.exceptions import ORGBClientException, ORGBUserError

logger = logging.getLogger(__name__)

TItem = TypeVar("TItem", Device, Mode, Zone, LED)


def _name(value: object) -> str:
    """Name of an enum member, or the raw number for values unknown to this client."""

    return getattr(value, "name", str(value))


def _find(items: Sequence[TItem], key: str, kind: str) -> TItem:
    """Find an item by its index or by its name."""

    if key.isdigit() and int(key) < len(items):
        return items[int(key)]
    for item in items:
        if item.name == key:
            return item
    raise ORGBUserError(
        f"There is no {kind} {key!r}, choose from: {', '.join(i.name for i in items)}"
    )


def _parse_host(host: str, port: int | None) -> Tuple[str, int]:
    """Split `HOST[:PORT]`; an explicit `port` takes precedence."""

    name, sep, suffix = host.rpartition(":")
    if sep and name.count(":") == 0 and suffix.isdigit():
        return name, port if port is not None else int(suffix)
    return host, port if port is not None else DEFAULT_PORT


def _format_device(device: Device, verbose: bool = False) -> str:
    lines: Final = [f"[{device.idx}] {device.name} ({_name(device.type)})"]
    if not verbose:
        return lines[0]

    lines.append(f"    vendor:      {device.vendor}")
    lines.append(f"    description: {device.description}")
    lines.append(f"    version:     {device.version}")
    lines.append(f"    serial:      {device.serial}")
    lines.append(f"    location:    {device.location}")
    lines.append("    modes:")
    for mode in device.modes:
        active = "*" if mode.idx == device.active_mode else " "
        lines.append(f"     {active}[{mode.idx}] {mode.name}")
    lines.append("    zones:")
    for zone in device.zones:
        lines.append(
            f"      [{zone.idx}] {zone.name} ({_name(zone.type)}, {zone.leds_count} LEDs, "
            f"{zone.leds_min}-{zone.leds_max})"
        )
    lines.append("    leds:")
    for led, color in zip(device.leds, device.colors):
        lines.append(f"      [{led.idx}] {led.name} #{color}")
    return "\n".join(lines)


def _list_devices(client: ORGBClient, args: argparse.Namespace) -> int:
    for device in client.request_device_list_or_raise():
        print(_format_device(device, args.verbose))
    return 0


def _get_count(client: ORGBClient, args: argparse.Namespace) -> int:
    print(client.request_device_count_or_raise())
    return 0


def _get_device(client: ORGBClient, args: argparse.Namespace) -> int:
    print(_format_device(client.request_device_info_or_raise(args.device_idx), verbose=True))
    return 0


def _device(client: ORGBClient, key: str) -> Device:
    devices: Final[DeviceList] = client.request_device_list_or_raise()
    return _find(devices, key, "device")


def _set_color(client: ORGBClient, args: argparse.Namespace) -> int:
    device: Final = _device(client, args.device)
    if args.target is None:
        client.set_device_color_or_raise(device, args.color)
        return 0

    kind, sep, key = args.target.partition(":")
    if not sep or kind not in ("zone", "led"):
        raise ORGBUserError(f"{args.target!r} must be zone:<id> or led:<id>")
    if kind == "zone":
        client.set_zone_color_or_raise(_find(device.zones, key, "zone"), args.color)
    else:
        client.set_led_color_or_raise(_find(device.leds, key, "LED"), args.color)
    return 0


def _custom_mode(client: ORGBClient, args: argparse.Namespace) -> int:
    client.switch_to_custom_mode_or_raise(_device(client, args.device))
    return 0


def _change_mode(client: ORGBClient, args: argparse.Namespace) -> int:
    device: Final = _device(client, args.device)
    client.change_mode_or_raise(device, _find(device.modes, args.mode, "mode"))
    return 0


def _save_mode(client: ORGBClient, args: argparse.Namespace) -> int:
    device: Final = _device(client, args.device)
    client.save_mode_or_raise(device, _find(device.modes, args.mode, "mode"))
    return 0


def _resize_zone(client: ORGBClient, args: argparse.Namespace) -> int:
    device: Final = _device(client, args.device)
    zone: Final = _find(device.zones, args.zone, "zone")
    if not zone.leds_min <= args.size <= zone.leds_max:
        raise ORGBUserError(
            f"Zone {zone.name!r} supports {zone.leds_min} to {zone.leds_max} LEDs"
        )
    client.set_zone_size_or_raise(zone, args.size)
    return 0


def _list_profiles(client: ORGBClient, args: argparse.Namespace) -> int:
    for profile in client.request_profile_list_or_raise():
        print(profile)
    return 0


def _save_profile(client: ORGBClient, args: argparse.Namespace) -> int:
    client.save_profile_or_raise(args.name)
    return 0


def _load_profile(client: ORGBClient, args: argparse.Namespace) -> int:
    client.load_profile_or_raise(args.name)
    return 0


def _delete_profile(client: ORGBClient, args: argparse.Namespace) -> int:
    client.delete_profile_or_raise(args.name)
    return 0


Command = Callable[[ORGBClient, argparse.Namespace], int]


def _make_parser() -> Tuple[argparse.ArgumentParser, Dict[str, Command]]:
    parser = argparse.ArgumentParser(
        prog="orgbcli",
        description="Control the RGB devices of an OpenRGB server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--host", default=DEFAULT_HOST, help=f"HOST[:PORT] of the server, {DEFAULT_HOST} by default"
    )
    parser.add_argument("--port", type=int, default=None, help=f"{DEFAULT_PORT} by default")
    parser.add_argument(
        "--name", default=DEFAULT_CLIENT_NAME, help="client name shown by the server"
    )
    parser.add_argument(
        "--timeout", type=float, default=DEFAULT_TIMEOUT_S, help="reply timeout in seconds"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging, more details")

    commands: Final[Dict[str, Command]] = {}
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add(name: str, command: Command, help: str) -> argparse.ArgumentParser:
        commands[name] = command
        return subparsers.add_parser(name, help=help)

    add("listdevs", _list_devices, "list the devices of the server")
    add("getcount", _get_count, "print the number of devices")
    add("getdev", _get_device, "describe one device").add_argument("device_idx", type=int)

    setcolor = add("setcolor", _set_color, "set the color of a device, a zone or an LED")
    setcolor.add_argument("device", help="device index or name")
    setcolor.add_argument(
        "target", nargs="?", help="zone:<id> or led:<id>, the whole device if omitted"
    )
    setcolor.add_argument("color", type=Color.parse, help="RRGGBB or a basic color name")

    add("custommode", _custom_mode, "switch a device to its direct control mode").add_argument(
        "device", help="device index or name"
    )
    for name, command, help in (
        ("changemode", _change_mode, "activate a mode of a device"),
        ("savemode", _save_mode, "save a mode to the device's memory"),
    ):
        mode_parser = add(name, command, help)
        mode_parser.add_argument("device", help="device index or name")
        mode_parser.add_argument("mode", help="mode index or name")

    resizezone = add("resizezone", _resize_zone, "change the number of LEDs of a zone")
    resizezone.add_argument("device", help="device index or name")
    resizezone.add_argument("zone", help="zone index or name")
    resizezone.add_argument("size", type=int)

    add("listprofiles", _list_profiles, "list the profiles saved on the server")
    for name, command, help in (
        ("saveprofile", _save_profile, "save the current state as a profile"),
        ("loadprofile", _load_profile, "apply a saved profile"),
        ("delprofile", _delete_profile, "delete a saved profile"),
    ):
        add(name, command, help).add_argument("name", help="profile name")

    return parser, commands


def orgbcli(argv: List[str] | None = None) -> int:
    """Run one command against an OpenRGB server."""

    parser, commands = _make_parser()
    args: Final = parser.parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s.%(msecs)03d %(levelname)-8s %(message)s",
        level=logging.DEBUG if args.verbose else logging.WARNING,
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    host, port = _parse_host(args.host, args.port)
    logger.debug(f"Running {args.command} against {host}:{port}")
    client: Final = ORGBClient(client_name=args.name, timeout_s=args.timeout)
    try:
        client.connect_or_raise(host, port)
    except ORGBClientException as e:
        print(f"Failed to connect to {host}:{port}: {e}", file=sys.stderr)
        return 1

    try:
        return commands[args.command](client, args)
    except ORGBClientException as e:
        print(f"{args.command} failed: {e}", file=sys.stderr)
        return 1
    finally:
        client.disconnect()
