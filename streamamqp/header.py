"""The header section of an AMQP message."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Optional

from .codec import Reader, TypeCode, write_type_code
from .errors import MessageParseError
from .primitives import AmqpType, decode_optional, encode_optional, optional_size
from .values import Descriptor, decode_list_fields, decode_value

MESSAGE_HEADER = Descriptor(112)

_U8_MAX = 0xFF

# name, type, value used when the field is null
_FIELDS = (
    ("durable", AmqpType.BOOLEAN, False),
    ("priority", AmqpType.UBYTE, 4),
    ("ttl", AmqpType.UINT, None),
    ("first_acquirer", AmqpType.BOOLEAN, False),
    ("delivery_count", AmqpType.UINT, 4),
)


@dataclass
class Header:
    """Transport headers of a message."""

    durable: bool = False
    priority: int = 4
    ttl: Optional[int] = None
    first_acquirer: bool = False
    delivery_count: int = 0

    def _content_size(self) -> int:
        return sum(
            optional_size(kind, getattr(self, name)) for name, kind, _ in _FIELDS
        )

    def encoded_size(self) -> int:
        content = self._content_size()
        return MESSAGE_HEADER.encoded_size() + (9 if content + 1 > _U8_MAX else 3) + content

    def encode(self, out: bytearray) -> None:
        MESSAGE_HEADER.encode(out)
        content = self._content_size()
        if content + 1 > _U8_MAX:
            write_type_code(out, TypeCode.LIST32)
            out += struct.pack(">II", content + 4, len(_FIELDS))
        else:
            write_type_code(out, TypeCode.LIST8)
            out += bytes((content + 1, len(_FIELDS)))
        for name, kind, _ in _FIELDS:
            encode_optional(kind, getattr(self, name), out)

    @classmethod
    def decode(cls, reader: Reader) -> "Header":
        descriptor = Descriptor.decode(reader)
        if descriptor != MESSAGE_HEADER:
            raise MessageParseError(f"Invalid descriptor for header {descriptor}")
        header = cls()

        def read_field(inner: Reader, index: int) -> None:
            if index < len(_FIELDS):
                name, kind, default = _FIELDS[index]
                value = decode_optional(kind, inner)
                setattr(header, name, default if value is None else value)
            else:
                decode_value(inner)

        decode_list_fields(reader, read_field)
        return header