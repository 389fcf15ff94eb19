"""Primitive AMQP 1.0 types and the tagged simple value built on them."""

from __future__ import annotations

import math
import struct
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable

from .codec import Reader, TypeCode, invalid_type_code, write_type_code
from .errors import MessageParseError
from .symbol import Symbol

_U8_MAX = 0xFF
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MILLI = timedelta(milliseconds=1)

_I8 = struct.Struct(">b")
_I32 = struct.Struct(">i")
_I64 = struct.Struct(">q")


class AmqpType(Enum):
    """The primitive AMQP types a simple value can carry."""

    BOOLEAN = "boolean"
    UBYTE = "ubyte"
    USHORT = "ushort"
    UINT = "uint"
    ULONG = "ulong"
    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    CHAR = "char"
    TIMESTAMP = "timestamp"
    UUID = "uuid"
    BINARY = "binary"
    STRING = "string"
    SYMBOL = "symbol"

    def _normalize(self, value: Any) -> Any:
        return _CODECS[self].normalize(value)

    def encoded_size(self, value: Any) -> int:
        """Number of bytes ``value`` takes when written as this type."""
        codec = _CODECS[self]
        return codec.size(codec.normalize(value))

    def encode(self, value: Any, out: bytearray) -> None:
        """Append ``value``, written as this type, to ``out``."""
        codec = _CODECS[self]
        codec.encode(codec.normalize(value), out)

    def decode(self, reader: Reader) -> Any:
        """Read one value of this type from ``reader``."""
        return _CODECS[self].decode(reader)


@dataclass(frozen=True)
class _Codec:
    normalize: Callable[[Any], Any]
    size: Callable[[Any], int]
    encode: Callable[[Any, bytearray], None]
    decode: Callable[[Reader], Any]


# --- normalizers -----------------------------------------------------------


def _integer(lo: int, hi: int, name: str) -> Callable[[Any], int]:
    def normalize(value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{name} value must be an int, got {type(value).__name__}")
        if not lo <= value <= hi:
            raise ValueError(f"{value} is out of range for {name}")
        return value

    return normalize


def _normalize_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"boolean value must be a bool, got {type(value).__name__}")
    return value


def _normalize_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"float value must be a number, got {type(value).__name__}")
    try:
        return struct.unpack(">f", struct.pack(">f", float(value)))[0]
    except OverflowError:
        raise ValueError(f"{value} is out of range for float") from None


def _normalize_double(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"double value must be a number, got {type(value).__name__}")
    return float(value)


def _normalize_char(value: Any) -> str:
    if not isinstance(value, str) or len(value) != 1:
        raise TypeError("char value must be a single character string")
    if 0xD800 <= ord(value) <= 0xDFFF:
        raise ValueError("char value must not be a surrogate")
    return value


def _normalize_timestamp(value: Any) -> datetime:
    if not isinstance(value, datetime):
        raise TypeError(f"timestamp value must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def _normalize_uuid(value: Any) -> uuid.UUID:
    if not isinstance(value, uuid.UUID):
        raise TypeError(f"uuid value must be a UUID, got {type(value).__name__}")
    return value


def _normalize_binary(value: Any) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"binary value must be bytes, got {type(value).__name__}")
    return bytes(value)


def _normalize_string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"string value must be a str, got {type(value).__name__}")
    return value


def _normalize_symbol(value: Any) -> Symbol:
    if isinstance(value, Symbol):
        return value
    if isinstance(value, str):
        return Symbol(value)
    raise TypeError(f"symbol value must be a Symbol, got {type(value).__name__}")


# --- codecs ----------------------------------------------------------------


def _fixed(code: TypeCode, fmt: str, name: str, normalize) -> _Codec:
    packer = struct.Struct(fmt)

    def encode(value: Any, out: bytearray) -> None:
        write_type_code(out, code)
        out += packer.pack(value)

    def decode(reader: Reader) -> Any:
        found = reader.read_type_code()
        if found is not code:
            raise invalid_type_code(name, found)
        return packer.unpack(reader.read_exact(packer.size))[0]

    return _Codec(normalize, lambda _value: 1 + packer.size, encode, decode)


def _bool_encode(value: bool, out: bytearray) -> None:
    write_type_code(out, TypeCode.BOOLEAN_TRUE if value else TypeCode.BOOLEAN_FALSE)


def _bool_decode(reader: Reader) -> bool:
    code = reader.read_type_code()
    if code is TypeCode.BOOLEAN:
        return reader.read_u8() != 0
    if code is TypeCode.BOOLEAN_TRUE:
        return True
    if code is TypeCode.BOOLEAN_FALSE:
        return False
    raise invalid_type_code("Boolean", code)


def _uint_size(value: int) -> int:
    if value == 0:
        return 1
    return 5 if value > _U8_MAX else 2


def _uint_encode(value: int, out: bytearray) -> None:
    if value == 0:
        write_type_code(out, TypeCode.UINT0)
    elif value > _U8_MAX:
        write_type_code(out, TypeCode.UINT)
        out += struct.pack(">I", value)
    else:
        write_type_code(out, TypeCode.UINT_SMALL)
        out.append(value)


def _uint_decode(reader: Reader) -> int:
    code = reader.read_type_code()
    if code is TypeCode.UINT0:
        return 0
    if code is TypeCode.UINT_SMALL:
        return reader.read_u8()
    if code is TypeCode.UINT:
        return reader.read_u32()
    raise invalid_type_code("UInt", code)


def _ulong_size(value: int) -> int:
    if value == 0:
        return 1
    return 9 if value > _U8_MAX else 2


def _ulong_encode(value: int, out: bytearray) -> None:
    if value == 0:
        write_type_code(out, TypeCode.ULONG0)
    elif value > _U8_MAX:
        write_type_code(out, TypeCode.ULONG)
        out += struct.pack(">Q", value)
    else:
        write_type_code(out, TypeCode.ULONG_SMALL)
        out.append(value)


def _ulong_decode(reader: Reader) -> int:
    code = reader.read_type_code()
    if code is TypeCode.ULONG:
        return reader.read_u64()
    if code is TypeCode.ULONG_SMALL:
        return reader.read_u8()
    if code is TypeCode.ULONG0:
        return 0
    raise invalid_type_code("ULong", code)


def _fits_i8(value: int) -> bool:
    return -128 <= value <= 127


def _signed_packer(value: int, wide: struct.Struct) -> struct.Struct:
    """The packer for ``value``: one byte when it fits, ``wide`` otherwise."""
    if _fits_i8(value):
        return _I8
    return wide


def _int_size(value: int) -> int:
    packer = _signed_packer(value, _I32)
    return 1 + packer.size


def _int_encode(value: int, out: bytearray) -> None:
    packer = _signed_packer(value, _I32)
    write_type_code(out, TypeCode.INT_SMALL if packer is _I8 else TypeCode.INT)
    out += packer.pack(value)


def _int_decode(reader: Reader) -> int:
    code = reader.read_type_code()
    if code is TypeCode.INT:
        return reader.read_i32()
    if code is TypeCode.INT_SMALL:
        return reader.read_i8()
    raise invalid_type_code("Int", code)


def _long_size(value: int) -> int:
    packer = _signed_packer(value, _I64)
    return 1 + packer.size


def _long_encode(value: int, out: bytearray) -> None:
    packer = _signed_packer(value, _I64)
    write_type_code(out, TypeCode.LONG_SMALL if packer is _I8 else TypeCode.LONG)
    out += packer.pack(value)


def _long_decode(reader: Reader) -> int:
    code = reader.read_type_code()
    if code is TypeCode.LONG:
        return reader.read_i64()
    if code is TypeCode.LONG_SMALL:
        return reader.read_i8()
    raise invalid_type_code("Long", code)


def _char_encode(value: str, out: bytearray) -> None:
    write_type_code(out, TypeCode.CHAR)
    out += struct.pack(">I", ord(value))


def _char_decode(reader: Reader) -> str:
    code = reader.read_type_code()
    if code is not TypeCode.CHAR:
        raise invalid_type_code("Char", code)
    point = reader.read_u32()
    if point > 0x10FFFF or 0xD800 <= point <= 0xDFFF:
        raise invalid_type_code("Char", code)
    return chr(point)


def _timestamp_encode(value: datetime, out: bytearray) -> None:
    write_type_code(out, TypeCode.TIMESTAMP)
    out += struct.pack(">q", (value - _EPOCH) // _ONE_MILLI)


def _timestamp_decode(reader: Reader) -> datetime:
    code = reader.read_type_code()
    if code is not TypeCode.TIMESTAMP:
        raise invalid_type_code("Timestamp", code)
    millis = reader.read_i64()
    try:
        return _EPOCH + timedelta(milliseconds=millis)
    except OverflowError:
        raise MessageParseError(f"Invalid timestamp millis {millis}") from None


def _uuid_encode(value: uuid.UUID, out: bytearray) -> None:
    write_type_code(out, TypeCode.UUID)
    out += value.bytes


def _uuid_decode(reader: Reader) -> uuid.UUID:
    code = reader.read_type_code()
    if code is not TypeCode.UUID:
        raise invalid_type_code("Uuid", code)
    return uuid.UUID(bytes=reader.read_exact(16))


def _sized_size(raw: bytes) -> int:
    return (5 if len(raw) > _U8_MAX else 2) + len(raw)


def _write_sized(raw: bytes, short: TypeCode, long: TypeCode, out: bytearray) -> None:
    if len(raw) > _U8_MAX:
        write_type_code(out, long)
        out += struct.pack(">I", len(raw))
    else:
        write_type_code(out, short)
        out.append(len(raw))
    out += raw


def _read_sized(reader: Reader, short: TypeCode, long: TypeCode, name: str) -> bytes:
    code = reader.read_type_code()
    if code is short:
        length = reader.read_u8()
    elif code is long:
        length = reader.read_u32()
    else:
        raise invalid_type_code(name, code)
    return reader.read_exact(length)


def _string_decode(reader: Reader) -> str:
    raw = _read_sized(reader, TypeCode.STRING8, TypeCode.STRING32, "Str")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as err:
        raise MessageParseError(f"invalid utf-8 in string: {err}") from err


_CODECS: dict[AmqpType, _Codec] = {
    AmqpType.BOOLEAN: _Codec(_normalize_bool, lambda _v: 1, _bool_encode, _bool_decode),
    AmqpType.UBYTE: _fixed(TypeCode.UBYTE, ">B", "UByte", _integer(0, 0xFF, "ubyte")),
    AmqpType.USHORT: _fixed(TypeCode.USHORT, ">H", "UShort", _integer(0, 0xFFFF, "ushort")),
    AmqpType.UINT: _Codec(
        _integer(0, 0xFFFF_FFFF, "uint"), _uint_size, _uint_encode, _uint_decode
    ),
    AmqpType.ULONG: _Codec(
        _integer(0, 0xFFFF_FFFF_FFFF_FFFF, "ulong"), _ulong_size, _ulong_encode, _ulong_decode
    ),
    AmqpType.BYTE: _fixed(TypeCode.BYTE, ">b", "Byte", _integer(-128, 127, "byte")),
    AmqpType.SHORT: _fixed(TypeCode.SHORT, ">h", "Short", _integer(-(2**15), 2**15 - 1, "short")),
    AmqpType.INT: _Codec(
        _integer(-(2**31), 2**31 - 1, "int"), _int_size, _int_encode, _int_decode
    ),
    AmqpType.LONG: _Codec(
        _integer(-(2**63), 2**63 - 1, "long"), _long_size, _long_encode, _long_decode
    ),
    AmqpType.FLOAT: _fixed(TypeCode.FLOAT, ">f", "Float", _normalize_float),
    AmqpType.DOUBLE: _fixed(TypeCode.DOUBLE, ">d", "Double", _normalize_double),
    AmqpType.CHAR: _Codec(_normalize_char, lambda _v: 5, _char_encode, _char_decode),
    AmqpType.TIMESTAMP: _Codec(
        _normalize_timestamp, lambda _v: 9, _timestamp_encode, _timestamp_decode
    ),
    AmqpType.UUID: _Codec(_normalize_uuid, lambda _v: 17, _uuid_encode, _uuid_decode),
    AmqpType.BINARY: _Codec(
        _normalize_binary,
        _sized_size,
        lambda v, out: _write_sized(v, TypeCode.BINARY8, TypeCode.BINARY32, out),
        lambda r: _read_sized(r, TypeCode.BINARY8, TypeCode.BINARY32, "Binary"),
    ),
    AmqpType.STRING: _Codec(
        _normalize_string,
        lambda v: _sized_size(v.encode("utf-8")),
        lambda v, out: _write_sized(v.encode("utf-8"), TypeCode.STRING8, TypeCode.STRING32, out),
        _string_decode,
    ),
    AmqpType.SYMBOL: _Codec(
        _normalize_symbol,
        lambda v: v.encoded_size(),
        lambda v, out: v.encode(out),
        Symbol.decode,
    ),
}

_KIND_BY_CODE: dict[TypeCode, AmqpType] = {
    TypeCode.BOOLEAN: AmqpType.BOOLEAN,
    TypeCode.BOOLEAN_TRUE: AmqpType.BOOLEAN,
    TypeCode.BOOLEAN_FALSE: AmqpType.BOOLEAN,
    TypeCode.UINT0: AmqpType.UINT,
    TypeCode.UINT_SMALL: AmqpType.UINT,
    TypeCode.UINT: AmqpType.UINT,
    TypeCode.ULONG0: AmqpType.ULONG,
    TypeCode.ULONG_SMALL: AmqpType.ULONG,
    TypeCode.ULONG: AmqpType.ULONG,
    TypeCode.UBYTE: AmqpType.UBYTE,
    TypeCode.USHORT: AmqpType.USHORT,
    TypeCode.BYTE: AmqpType.BYTE,
    TypeCode.SHORT: AmqpType.SHORT,
    TypeCode.INT_SMALL: AmqpType.INT,
    TypeCode.INT: AmqpType.INT,
    TypeCode.LONG_SMALL: AmqpType.LONG,
    TypeCode.LONG: AmqpType.LONG,
    TypeCode.FLOAT: AmqpType.FLOAT,
    TypeCode.DOUBLE: AmqpType.DOUBLE,
    TypeCode.CHAR: AmqpType.CHAR,
    TypeCode.TIMESTAMP: AmqpType.TIMESTAMP,
    TypeCode.UUID: AmqpType.UUID,
    TypeCode.BINARY8: AmqpType.BINARY,
    TypeCode.BINARY32: AmqpType.BINARY,
    TypeCode.STRING8: AmqpType.STRING,
    TypeCode.STRING32: AmqpType.STRING,
    TypeCode.SYMBOL8: AmqpType.SYMBOL,
    TypeCode.SYMBOL32: AmqpType.SYMBOL,
}


# --- optional fields -------------------------------------------------------


def optional_size(kind, value) -> int:
    """Encoded size of an optional field; an absent value takes one null byte."""
    if value is None:
        return 1
    if isinstance(kind, AmqpType):
        return kind.encoded_size(value)
    return value.encoded_size()


def encode_optional(kind, value, out: bytearray) -> None:
    """Write an optional field, or a null when ``value`` is None."""
    if value is None:
        write_type_code(out, TypeCode.NULL)
    elif isinstance(kind, AmqpType):
        kind.encode(value, out)
    else:
        value.encode(out)


def decode_optional(kind, reader: Reader):
    """Read an optional field, returning None for a null."""
    if reader.peek_type_code() is TypeCode.NULL:
        reader.read_type_code()
        return None
    return kind.decode(reader)


# --- simple value ----------------------------------------------------------


@dataclass(frozen=True, eq=False)
class SimpleValue:
    """A primitive AMQP value tagged with its type; no type means null."""

    kind: AmqpType | None = None
    value: Any = field(default=None)

    def __post_init__(self) -> None:
        if self.kind is None:
            if self.value is not None:
                raise ValueError("a null value carries no payload")
            return
        object.__setattr__(self, "value", self.kind._normalize(self.value))

    def _key(self):
        if isinstance(self.value, float) and math.isnan(self.value):
            return (self.kind, "nan")
        return (self.kind, self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SimpleValue):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    @property
    def is_null(self) -> bool:
        return self.kind is None

    @classmethod
    def of(cls, value: Any) -> "SimpleValue":
        """Wrap a plain Python value, choosing the AMQP type it maps to."""
        if isinstance(value, SimpleValue):
            return value
        if value is None:
            return cls()
        if isinstance(value, bool):
            return cls(AmqpType.BOOLEAN, value)
        if isinstance(value, int):
            if -(2**31) <= value < 2**31:
                return cls(AmqpType.INT, value)
            if -(2**63) <= value < 2**63:
                return cls(AmqpType.LONG, value)
            return cls(AmqpType.ULONG, value)
        if isinstance(value, float):
            return cls(AmqpType.DOUBLE, value)
        if isinstance(value, str):
            return cls(AmqpType.STRING, value)
        if isinstance(value, Symbol):
            return cls(AmqpType.SYMBOL, value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(AmqpType.BINARY, value)
        if isinstance(value, datetime):
            return cls(AmqpType.TIMESTAMP, value)
        if isinstance(value, uuid.UUID):
            return cls(AmqpType.UUID, value)
        raise TypeError(f"cannot convert {type(value).__name__} to an AMQP simple value")

    def encoded_size(self) -> int:
        if self.kind is None:
            return 1
        return self.kind.encoded_size(self.value)

    def encode(self, out: bytearray) -> None:
        if self.kind is None:
            write_type_code(out, TypeCode.NULL)
        else:
            self.kind.encode(self.value, out)

    @classmethod
    def decode(cls, reader: Reader) -> "SimpleValue":
        code = reader.peek_type_code()
        if code is TypeCode.NULL:
            reader.read_type_code()
            return cls()
        kind = _KIND_BY_CODE.get(code)
        if kind is None:
            raise invalid_type_code("SimpleValue", code)
        return cls(kind, kind.decode(reader))