"""Print the device list of an OpenRGB server whenever it changes."""

import argparse
import logging
import time

from orgbclient import ORGBClient
from orgbclient.status import UpdateStatus

logging.basicConfig(
    format="%(asctime)s.%(msecs)03d %(levelname)-8s %(message)s",
    level=logging.INFO,
    datefmt="%Y-%m-%d %H:%M:%S",
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Watch the devices of an OpenRGB server")
    parser.add_argument("host", help="The OpenRGB server", nargs="?", default="127.0.0.1")
    parser.add_argument("--interval", type=float, default=1.0, help="Seconds between checks")
    args = parser.parse_args()

    client = ORGBClient(client_name="watch_devices")
    client.connect_or_raise(args.host)

    try:
        while True:
            status = client.check_for_device_updates()
            if status == UpdateStatus.OUT_OF_DATE:
                for device in client.request_device_list_or_raise():
                    print(f"{device.idx}: {device.name}")
            elif status != UpdateStatus.UP_TO_DATE:
                raise SystemExit(f"Stopped watching: {status.description}")
            time.sleep(args.interval)
    except KeyboardInterrupt:
        pass
    finally:
        client.disconnect()


if __name__ == "__main__":
    main()
