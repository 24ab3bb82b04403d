"""Little-endian field codecs shared by the header and the message bodies."""

from __future__ import annotations

import struct
from typing import Final

from orgbclient.exceptions import ORGBDecodeError, ORGBEncodeError

U8: Final = struct.Struct("<B")
U16: Final = struct.Struct("<H")
U32: Final = struct.Struct("<I")
I32: Final = struct.Struct("<i")
COLOR: Final = struct.Struct("<BBBx")
assert COLOR.size == 4

STRING_ENCODING: Final = "utf-8"


class BinaryReader:
    """Read fields from a message body, raising `ORGBDecodeError` on truncation."""

    def __init__(self, data: bytes) -> None:
        self._data: Final = bytes(data)
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def read_bytes(self, size: int) -> bytes:
        if size < 0 or size > self.remaining:
            raise ORGBDecodeError(
                f"Need {size} B at offset {self._offset}, only {self.remaining} B remaining"
            )
        data: Final = self._data[self._offset : self._offset + size]
        self._offset += size
        return data

    def _unpack(self, s: struct.Struct) -> int:
        return s.unpack(self.read_bytes(s.size))[0]  # type: ignore[no-any-return]

    def u8(self) -> int:
        return self._unpack(U8)

    def u16(self) -> int:
        return self._unpack(U16)

    def u32(self) -> int:
        return self._unpack(U32)

    def i32(self) -> int:
        return self._unpack(I32)

    def color(self) -> tuple[int, int, int]:
        r, g, b = COLOR.unpack(self.read_bytes(COLOR.size))
        return r, g, b

    def string(self) -> str:
        """A `u16` length (including the NUL terminator) followed by the bytes."""

        length: Final = self.u16()
        return self._decode(self.read_bytes(length))

    def cstring(self) -> str:
        """A NUL terminated string that spans the rest of the body."""

        return self._decode(self.read_bytes(self.remaining))

    def expect_end(self) -> None:
        if self.remaining != 0:
            raise ORGBDecodeError(
                f"{self.remaining} B of trailing data after offset {self._offset}"
            )

    @staticmethod
    def _decode(raw: bytes) -> str:
        return raw.split(b"\x00", 1)[0].decode(STRING_ENCODING, errors="replace")


class BinaryWriter:
    """Build a message body, raising `ORGBEncodeError` on values that do not fit."""

    def __init__(self) -> None:
        self._buffer: Final = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def _pack(self, s: struct.Struct, *values: int) -> BinaryWriter:
        try:
            self._buffer.extend(s.pack(*values))
        except struct.error as e:
            raise ORGBEncodeError(f"Cannot pack {values} as {s.format!r}: {e}") from e
        return self

    def write_bytes(self, data: bytes) -> BinaryWriter:
        self._buffer.extend(data)
        return self

    def u8(self, value: int) -> BinaryWriter:
        return self._pack(U8, value)

    def u16(self, value: int) -> BinaryWriter:
        return self._pack(U16, value)

    def u32(self, value: int) -> BinaryWriter:
        return self._pack(U32, value)

    def i32(self, value: int) -> BinaryWriter:
        return self._pack(I32, value)

    def color(self, r: int, g: int, b: int) -> BinaryWriter:
        return self._pack(COLOR, r, g, b)

    def string(self, value: str) -> BinaryWriter:
        raw: Final = value.encode(STRING_ENCODING) + b"\x00"
        return self.u16(len(raw)).write_bytes(raw)

    def cstring(self, value: str) -> BinaryWriter:
        return self.write_bytes(value.encode(STRING_ENCODING) + b"\x00")

    def getvalue(self) -> bytes:
        return bytes(self._buffer)
