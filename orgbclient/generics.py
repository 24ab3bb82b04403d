"""Generics for OpenRGB SDK requests and their results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Generic, Protocol, Type, TypeVar, Union

from typing_extensions import TypeIs

from orgbclient.message import Message
from orgbclient.status import RequestStatus

TReply = TypeVar("TReply", bound=Message)
"""Type of the reply message that a request expects."""

T = TypeVar("T")
"""Type of the payload of a `RequestResult`."""


class ORGBRequest(Protocol[TReply]):
    """A `Protocol` that groups the expected reply with a request.

    To use, inherit from `Message` and define its expected `REPLY`.

    Example:
    ```python
    class RequestControllerCount(Message):
        TYPE: ClassVar[MessageType] = MessageType.REQUEST_CONTROLLER_COUNT
        REPLY: ClassVar[Type[ReplyControllerCount]] = ReplyControllerCount
    ```
    """

    REPLY: ClassVar[Type[TReply]]  # type: ignore[misc]

    @property
    def device_idx(self) -> int:  # pragma: no cover
        ...

    def dumps(self, protocol_version: int) -> bytes:  # pragma: no cover
        ...


@dataclass(frozen=True)
class RequestSuccess(Generic[T]):
    """The payload of a successful request.

    The payload is created for each call and is not referenced by the client
    afterwards.
    """

    value: T
    status: RequestStatus = field(default=RequestStatus.SUCCESS, init=False)


@dataclass(frozen=True)
class RequestFailure:
    """The status of a failed request, which has no payload."""

    status: RequestStatus
    value: None = field(default=None, init=False)


RequestResult = Union[RequestSuccess[T], RequestFailure]
"""The result of a request of the status API: `RequestSuccess` or `RequestFailure`."""


def success(result: RequestResult[T]) -> TypeIs[RequestSuccess[T]]:
    """`TypeIs` that returns `True` if the request of `result` succeeded.

    Args:
        result: The result to check.

    Returns:
        `True` if `result` is a `RequestSuccess`.
    """
    return isinstance(result, RequestSuccess)


def error(result: RequestResult[T]) -> TypeIs[RequestFailure]:
    """`TypeIs` that returns `True` if the request of `result` failed.

    Args:
        result: The result to check.

    Returns:
        `True` if `result` is a `RequestFailure`.
    """
    return isinstance(result, RequestFailure)
