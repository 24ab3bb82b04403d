"""The fixed-size header that precedes every OpenRGB SDK message body."""

from __future__ import annotations

import struct
from enum import IntEnum, unique
from typing import Final

from pydantic.dataclasses import dataclass

from orgbclient.exceptions import ORGBDecodeError

MAGIC: Final = b"ORGB"

HEADER_STRUCT: Final = struct.Struct("<4sIII")
HEADER_SIZE: Final = 16
assert HEADER_STRUCT.size == HEADER_SIZE

UINT32_MAX: Final = 0xFFFFFFFF


@unique
class MessageType(IntEnum):
    """Wire tags of the message variants.

    A reply uses the same tag as the request that it answers.
    """

    REQUEST_CONTROLLER_COUNT = 0
    REQUEST_CONTROLLER_DATA = 1
    REQUEST_PROTOCOL_VERSION = 40
    SET_CLIENT_NAME = 50
    DEVICE_LIST_UPDATED = 100
    """Pushed by the server whenever its device list changes."""
    REQUEST_PROFILE_LIST = 150
    REQUEST_SAVE_PROFILE = 151
    REQUEST_LOAD_PROFILE = 152
    REQUEST_DELETE_PROFILE = 153
    RGBCONTROLLER_RESIZEZONE = 1000
    RGBCONTROLLER_UPDATELEDS = 1050
    RGBCONTROLLER_UPDATEZONELEDS = 1051
    RGBCONTROLLER_UPDATESINGLELED = 1052
    RGBCONTROLLER_SETCUSTOMMODE = 1100
    RGBCONTROLLER_UPDATEMODE = 1101
    RGBCONTROLLER_SAVEMODE = 1102


@dataclass(frozen=True)
class Header:
    """An OpenRGB SDK message header."""

    device_idx: int
    message_type: MessageType
    body_size: int
    """Exact size of the body that follows the header, in 8-bit bytes."""

    def __post_init__(self) -> None:
        if not 0 <= self.device_idx <= UINT32_MAX:
            raise ValueError(f"{self.device_idx=} does not fit in a u32")
        if not 0 <= self.body_size <= UINT32_MAX:
            raise ValueError(f"{self.body_size=} does not fit in a u32")

    @staticmethod
    def loads(data: bytes) -> 'Header':
        """Load a `Header` from `bytes`.

        Raises:
            ORGBDecodeError: if the data is not a valid header
        """
        if len(data) != HEADER_SIZE:
            raise ORGBDecodeError(f"Header requires {HEADER_SIZE} B, got {len(data)} B")

        magic, device_idx, message_type, body_size = HEADER_STRUCT.unpack(data)
        if magic != MAGIC:
            raise ORGBDecodeError(f"Magic is {magic!r}, expected {MAGIC!r}")

        try:
            return Header(
                device_idx=device_idx,
                message_type=MessageType(message_type),
                body_size=body_size,
            )
        except ValueError as e:  # unknown MessageType
            raise ORGBDecodeError(f"Invalid header: {e}") from e

    def dumps(self) -> bytes:
        return HEADER_STRUCT.pack(MAGIC, self.device_idx, self.message_type, self.body_size)

    def __bytes__(self) -> bytes:
        return self.dumps()
