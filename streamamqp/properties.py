"""Message ids and the properties section of an AMQP message."""

from __future__ import annotations

import struct
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, Optional

from .codec import Reader, TypeCode, invalid_type_code, write_type_code
from .errors import MessageParseError
from .primitives import AmqpType, SimpleValue, decode_optional, encode_optional, optional_size
from .symbol import Symbol
from .values import Descriptor, decode_list_fields, decode_value

MESSAGE_PROPERTIES = Descriptor(115)

_U8_MAX = 0xFF
_ID_KINDS = (AmqpType.ULONG, AmqpType.LONG, AmqpType.UUID, AmqpType.BINARY, AmqpType.STRING)
_KIND_BY_CODE = {
    TypeCode.ULONG0: AmqpType.ULONG,
    TypeCode.ULONG: AmqpType.ULONG,
    TypeCode.ULONG_SMALL: AmqpType.ULONG,
    TypeCode.LONG: AmqpType.LONG,
    TypeCode.LONG_SMALL: AmqpType.LONG,
    TypeCode.UUID: AmqpType.UUID,
    TypeCode.BINARY8: AmqpType.BINARY,
    TypeCode.BINARY32: AmqpType.BINARY,
    TypeCode.STRING8: AmqpType.STRING,
    TypeCode.STRING32: AmqpType.STRING,
}


@dataclass(frozen=True)
class MessageId:
    """A message or correlation id: ulong, long, uuid, binary or string."""

    kind: AmqpType
    value: Any

    def __post_init__(self) -> None:
        if self.kind not in _ID_KINDS:
            raise ValueError(f"{self.kind} cannot be used as a message id")
        object.__setattr__(self, "value", SimpleValue(self.kind, self.value).value)

    @classmethod
    def of(cls, value: Any) -> "MessageId":
        """Convert a Python value to a message id."""
        if isinstance(value, MessageId):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(AmqpType.ULONG if value >= 0 else AmqpType.LONG, value)
        if isinstance(value, str):
            return cls(AmqpType.STRING, value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(AmqpType.BINARY, value)
        if isinstance(value, uuid.UUID):
            return cls(AmqpType.UUID, value)
        raise TypeError(f"cannot use {type(value).__name__} as a message id")

    def encoded_size(self) -> int:
        return self.kind.encoded_size(self.value)

    def encode(self, out: bytearray) -> None:
        self.kind.encode(self.value, out)

    @classmethod
    def decode(cls, reader: Reader) -> "MessageId":
        code = reader.peek_type_code()
        kind = _KIND_BY_CODE.get(code)
        if kind is None:
            raise invalid_type_code("MessageId", code)
        return cls(kind, kind.decode(reader))


_FIELDS = (
    ("message_id", MessageId),
    ("user_id", AmqpType.BINARY),
    ("to", AmqpType.STRING),
    ("subject", AmqpType.STRING),
    ("reply_to", AmqpType.STRING),
    ("correlation_id", MessageId),
    ("content_type", AmqpType.SYMBOL),
    ("content_encoding", AmqpType.SYMBOL),
    ("absolute_expiry_time", AmqpType.TIMESTAMP),
    ("creation_time", AmqpType.TIMESTAMP),
    ("group_id", AmqpType.STRING),
    ("group_sequence", AmqpType.UINT),
    ("reply_to_group_id", AmqpType.STRING),
)


def _list_size(content: int) -> int:
    return (9 if content + 1 > _U8_MAX else 3) + content


def _write_list_header(out: bytearray, content: int, count: int) -> None:
    if content + 1 > _U8_MAX:
        write_type_code(out, TypeCode.LIST32)
        out += struct.pack(">II", content + 4, count)
    else:
        write_type_code(out, TypeCode.LIST8)
        out += bytes((content + 1, count))


@dataclass
class Properties:
    """The immutable properties section of a message."""

    message_id: Optional[MessageId] = None
    user_id: Optional[bytes] = None
    to: Optional[str] = None
    subject: Optional[str] = None
    reply_to: Optional[str] = None
    correlation_id: Optional[MessageId] = None
    content_type: Optional[Symbol] = None
    content_encoding: Optional[Symbol] = None
    absolute_expiry_time: Optional[datetime] = None
    creation_time: Optional[datetime] = None
    group_id: Optional[str] = None
    group_sequence: Optional[int] = None
    reply_to_group_id: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("message_id", "correlation_id"):
            value = getattr(self, name)
            if value is not None:
                setattr(self, name, MessageId.of(value))
        for name in ("content_type", "content_encoding"):
            value = getattr(self, name)
            if isinstance(value, str):
                setattr(self, name, Symbol(value))
        if self.user_id is not None:
            self.user_id = bytes(self.user_id)

    def _items(self) -> Iterator[tuple]:
        for name, kind in _FIELDS:
            value = getattr(self, name)
            if kind is MessageId and value is not None:
                value = MessageId.of(value)
            yield kind, value

    def _content_size(self) -> int:
        return sum(optional_size(kind, value) for kind, value in self._items())

    def encoded_size(self) -> int:
        return MESSAGE_PROPERTIES.encoded_size() + _list_size(self._content_size())

    def encode(self, out: bytearray) -> None:
        MESSAGE_PROPERTIES.encode(out)
        _write_list_header(out, self._content_size(), len(_FIELDS))
        for kind, value in self._items():
            encode_optional(kind, value, out)

    @classmethod
    def decode(cls, reader: Reader) -> "Properties":
        descriptor = Descriptor.decode(reader)
        if descriptor != MESSAGE_PROPERTIES:
            raise MessageParseError(f"Invalid descriptor for properties {descriptor}")
        properties = cls()

        def read_field(inner: Reader, index: int) -> None:
            if index < len(_FIELDS):
                name, kind = _FIELDS[index]
                setattr(properties, name, decode_optional(kind, inner))
            else:
                decode_value(inner)

        decode_list_fields(reader, read_field)
        return properties