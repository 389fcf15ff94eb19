"""The body sections of an AMQP message."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .primitives import AmqpType
from .values import AmqpList, Descriptor, encode_value, to_value, value_size

MESSAGE_BODY_DATA = Descriptor(117)
MESSAGE_BODY_SEQUENCE = Descriptor(118)
MESSAGE_BODY_VALUE = Descriptor(119)


@dataclass
class MessageBody:
    """Data sections, sequence sections and an optional value section."""

    data: list = field(default_factory=list)
    sequence: list = field(default_factory=list)
    value: Any = None

    def first_data(self) -> Optional[bytes]:
        """The first data section, if there is one."""
        return self.data[0] if self.data else None

    def set_data(self, data) -> "MessageBody":
        """Replace every data section with the single section ``data``."""
        self.data = [bytes(data)]
        return self

    def set_value(self, value: Any) -> "MessageBody":
        """Set the value section, converting ``value`` to an AMQP value."""
        self.value = to_value(value)
        return self

    def encoded_size(self) -> int:
        size = sum(
            AmqpType.BINARY.encoded_size(chunk) + MESSAGE_BODY_DATA.encoded_size()
            for chunk in self.data
        )
        size += sum(
            sequence.encoded_size() + MESSAGE_BODY_SEQUENCE.encoded_size()
            for sequence in self.sequence
        )
        if self.value is not None:
            size += value_size(self.value) + MESSAGE_BODY_VALUE.encoded_size()
        return size

    def encode(self, out: bytearray) -> None:
        for chunk in self.data:
            MESSAGE_BODY_DATA.encode(out)
            AmqpType.BINARY.encode(chunk, out)
        for sequence in self.sequence:
            MESSAGE_BODY_SEQUENCE.encode(out)
            if not isinstance(sequence, AmqpList):
                sequence = AmqpList(list(sequence))
            sequence.encode(out)
        if self.value is not None:
            MESSAGE_BODY_VALUE.encode(out)
            encode_value(self.value, out)