"""The framing contract that every OpenRGB SDK message variant plugs into.

A message is a `Header` followed by a body of exactly `Header.body_size`
bytes.  The layout of some bodies depends on the protocol version negotiated
for the connection, so both directions take the `protocol_version`.

Variants inherit from `Message`, declare their wire tag as `TYPE`, and
override `_dump_body` / `_load_body` when their body is not empty.  Requests
that expect a reply declare the reply variant as `REPLY`.
"""

from __future__ import annotations

from typing import ClassVar, Final, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from orgbclient.codec import BinaryReader, BinaryWriter
from orgbclient.exceptions import ORGBDecodeError, ORGBEncodeError
from orgbclient.header import UINT32_MAX, Header, MessageType

TMessage = TypeVar("TMessage", bound="Message")


class Message(BaseModel):
    """Base of all OpenRGB SDK messages."""

    model_config = ConfigDict(frozen=True)

    TYPE: ClassVar[MessageType]

    device_idx: int = Field(default=0, ge=0, le=UINT32_MAX)
    """The device that the message refers to, 0 where it does not apply."""

    def _dump_body(self, writer: BinaryWriter, protocol_version: int) -> None:
        """Serialize the body; empty by default."""

    @classmethod
    def _load_body(
        cls: Type[TMessage], reader: BinaryReader, device_idx: int, protocol_version: int
    ) -> TMessage:
        """Deserialize the body; empty by default."""
        return cls(device_idx=device_idx)

    def dumps_body(self, protocol_version: int) -> bytes:
        writer: Final = BinaryWriter()
        self._dump_body(writer, protocol_version)
        return writer.getvalue()

    def dumps(self, protocol_version: int) -> bytes:
        """Serialize the header and the body.

        Raises:
            ORGBEncodeError: if a field does not fit its wire representation
        """
        body: Final = self.dumps_body(protocol_version)
        if len(body) > UINT32_MAX:
            raise ORGBEncodeError(f"Body of {len(body)} B does not fit in a u32")
        header: Final = Header(
            device_idx=self.device_idx, message_type=self.TYPE, body_size=len(body)
        )
        return header.dumps() + body

    @classmethod
    def loads(
        cls: Type[TMessage], header: Header, body: bytes, protocol_version: int
    ) -> TMessage:
        """Load a message of this variant from a received `header` and `body`.

        Raises:
            ORGBDecodeError: if the header does not belong to this variant or
                the body does not match its layout exactly
        """
        if header.message_type != cls.TYPE:
            raise ORGBDecodeError(
                f"{cls.__name__} requires {cls.TYPE.name}, got {header.message_type.name}"
            )
        if len(body) != header.body_size:
            raise ORGBDecodeError(f"{header.body_size=} but the body is {len(body)} B")

        reader: Final = BinaryReader(body)
        try:
            message: Final = cls._load_body(reader, header.device_idx, protocol_version)
        except ValueError as e:  # pydantic.ValidationError
            raise ORGBDecodeError(f"Invalid {cls.__name__} body: {e}") from e
        reader.expect_end()
        return message


class StringMessage(Message):
    """A message whose body is a single NUL terminated string."""

    name: str

    def _dump_body(self, writer: BinaryWriter, protocol_version: int) -> None:
        writer.cstring(self.name)

    @classmethod
    def _load_body(
        cls: Type[TMessage], reader: BinaryReader, device_idx: int, protocol_version: int
    ) -> TMessage:
        return cls(device_idx=device_idx, name=reader.cstring())
