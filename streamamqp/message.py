"""The public message type for inbound and outbound stream messages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from .amqp_message import AmqpMessage
from .annotations import ApplicationProperties, DeliveryAnnotations, MessageAnnotations
from .header import Header
from .properties import Properties

if TYPE_CHECKING:
    from .builder import MessageBuilder

_U64_MAX = 2**64 - 1


class Message:
    """An AMQP message together with the publishing id it is sent under."""

    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        message: Optional[AmqpMessage] = None,
        publishing_id: Optional[int] = None,
    ) -> None:
        if publishing_id is not None:
            if isinstance(publishing_id, bool) or not isinstance(publishing_id, int):
                raise TypeError("publishing id must be an int")
            if not 0 <= publishing_id <= _U64_MAX:
                raise ValueError(f"{publishing_id} is out of range for a publishing id")
        self._message = message if message is not None else AmqpMessage()
        self._publishing_id = publishing_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        return (
            self._publishing_id == other._publishing_id
            and self._message == other._message
        )

    def __repr__(self) -> str:
        return (
            f"Message(message={self._message!r}, "
            f"publishing_id={self._publishing_id!r})"
        )

    @classmethod
    def builder(cls) -> "MessageBuilder":
        """Start building a new message."""
        from .builder import MessageBuilder

        return MessageBuilder()

    def value(self) -> Any:
        """The amqp-value section of the body, if present."""
        return self._message.body.value

    def data(self) -> Optional[bytes]:
        """The first data section of the body, if any."""
        return self._message.body.first_data()

    def properties(self) -> Optional[Properties]:
        return self._message.properties

    def header(self) -> Optional[Header]:
        return self._message.header

    def message_annotations(self) -> Optional[MessageAnnotations]:
        return self._message.message_annotations

    def application_properties(self) -> Optional[ApplicationProperties]:
        return self._message.application_properties

    def delivery_annotations(self) -> Optional[DeliveryAnnotations]:
        return self._message.delivery_annotations

    def publishing_id(self) -> Optional[int]:
        return self._publishing_id

    def encoded_size(self) -> int:
        return self._message.encoded_size()

    def encode(self, out: bytearray) -> None:
        self._message.encode(out)

    def to_bytes(self) -> bytes:
        """Return the AMQP encoding of the message."""
        return self._message.to_bytes()

    @classmethod
    def decode(cls, data) -> "Message":
        """Decode a message from its complete AMQP encoding."""
        return cls(AmqpMessage.from_bytes(data))