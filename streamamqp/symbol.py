"""The AMQP symbol type."""

import struct
from dataclasses import dataclass

from .codec import Reader, TypeCode, invalid_type_code, write_type_code
from .errors import MessageParseError

_U8_MAX = 0xFF


@dataclass(frozen=True)
class Symbol:
    """An AMQP symbol: a string kept distinct from ordinary strings."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError("Symbol value must be a str")

    def __str__(self) -> str:
        return self.value

    def __len__(self) -> int:
        return len(self.value.encode("utf-8"))

    def encoded_size(self) -> int:
        length = len(self)
        return (5 if length > _U8_MAX else 2) + length

    def encode(self, out: bytearray) -> None:
        raw = self.value.encode("utf-8")
        if len(raw) > _U8_MAX:
            write_type_code(out, TypeCode.SYMBOL32)
            out += struct.pack(">I", len(raw))
        else:
            write_type_code(out, TypeCode.SYMBOL8)
            out.append(len(raw))
        out += raw

    @classmethod
    def decode(cls, reader: Reader) -> "Symbol":
        code = reader.read_type_code()
        if code is TypeCode.SYMBOL8:
            length = reader.read_u8()
        elif code is TypeCode.SYMBOL32:
            length = reader.read_u32()
        else:
            raise invalid_type_code("Symbol", code)
        raw = reader.read_exact(length)
        try:
            return cls(raw.decode("utf-8"))
        except UnicodeDecodeError as err:
            raise MessageParseError(f"invalid utf-8 in symbol: {err}") from err