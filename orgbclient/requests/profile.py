"""Messages that manage the profiles saved on the server."""

from __future__ import annotations

from typing import ClassVar, Final, List, Type

from orgbclient.codec import BinaryReader, BinaryWriter
from orgbclient.header import MessageType
from orgbclient.message import Message, StringMessage


class ReplyProfileList(Message):
    TYPE: ClassVar[MessageType] = MessageType.REQUEST_PROFILE_LIST

    profiles: List[str]

    def _dump_body(self, writer: BinaryWriter, protocol_version: int) -> None:
        payload: Final = BinaryWriter()
        payload.u16(len(self.profiles))
        for profile in self.profiles:
            payload.string(profile)
        writer.u32(4 + len(payload))
        writer.write_bytes(payload.getvalue())

    @classmethod
    def _load_body(
        cls, reader: BinaryReader, device_idx: int, protocol_version: int
    ) -> ReplyProfileList:
        reader.u32()  # data size
        return cls(
            device_idx=device_idx, profiles=[reader.string() for _ in range(reader.u16())]
        )


class RequestProfileList(Message):
    TYPE: ClassVar[MessageType] = MessageType.REQUEST_PROFILE_LIST
    REPLY: ClassVar[Type[ReplyProfileList]] = ReplyProfileList


class RequestSaveProfile(StringMessage):
    TYPE: ClassVar[MessageType] = MessageType.REQUEST_SAVE_PROFILE


class RequestLoadProfile(StringMessage):
    TYPE: ClassVar[MessageType] = MessageType.REQUEST_LOAD_PROFILE


class RequestDeleteProfile(StringMessage):
    TYPE: ClassVar[MessageType] = MessageType.REQUEST_DELETE_PROFILE
