"""List the RGB devices of an OpenRGB server and light them up."""

import argparse
import time
from typing import Final

from orgbclient import ORGBClient
from orgbclient.device import Color
from orgbclient.generics import error


def main() -> None:
    parser = argparse.ArgumentParser(description="Light up the devices of an OpenRGB server")
    parser.add_argument("host", help="The OpenRGB server", nargs="?", default="127.0.0.1")
    parser.add_argument("--color", help="RRGGBB or a basic color name", default="ff8000")
    args = parser.parse_args()

    color: Final = Color.parse(args.color)
    client: Final = ORGBClient(client_name="helloworld")

    print(f"Connecting to {args.host}...", end="", flush=True)
    client.connect_or_raise(args.host)
    print("OK")

    try:
        print("Requesting devices...", end="", flush=True)
        result = client.request_device_list()
        if error(result):
            raise SystemExit(f"Failed to request devices: {result.status.description}")
        print("OK")

        for device in result.value:
            print(f"{device.idx}: {device.name} ({len(device.leds)} LEDs)")
            client.switch_to_custom_mode(device)

        # give the devices some time to switch their mode
        time.sleep(0.05)

        for device in result.value:
            status = client.set_device_color(device, color)
            print(f"Set {device.name} to #{color}: {status.name}")
    finally:
        client.disconnect()


if __name__ == "__main__":
    main()
