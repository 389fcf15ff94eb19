"""AMQP 1.0 type codes and a cursor for reading big-endian binary input."""

import struct
from enum import IntEnum

from .errors import IncompleteError, InvalidTypeCodeError, InvalidTypeCodeForError


class TypeCode(IntEnum):
    """Format codes of the AMQP 1.0 type system."""

    DESCRIBED = 0x00
    NULL = 0x40
    BOOLEAN = 0x56
    BOOLEAN_TRUE = 0x41
    BOOLEAN_FALSE = 0x42
    UINT0 = 0x43
    ULONG0 = 0x44
    UBYTE = 0x50
    USHORT = 0x60
    UINT = 0x70
    ULONG = 0x80
    BYTE = 0x51
    SHORT = 0x61
    INT = 0x71
    LONG = 0x81
    UINT_SMALL = 0x52
    ULONG_SMALL = 0x53
    INT_SMALL = 0x54
    LONG_SMALL = 0x55
    FLOAT = 0x72
    DOUBLE = 0x82
    CHAR = 0x73
    TIMESTAMP = 0x83
    UUID = 0x98
    BINARY8 = 0xA0
    BINARY32 = 0xB0
    STRING8 = 0xA1
    STRING32 = 0xB1
    SYMBOL8 = 0xA3
    SYMBOL32 = 0xB3
    LIST0 = 0x45
    LIST8 = 0xC0
    LIST32 = 0xD0
    MAP8 = 0xC1
    MAP32 = 0xD1
    ARRAY8 = 0xE0
    ARRAY32 = 0xF0


_U8 = struct.Struct(">B")
_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")
_I8 = struct.Struct(">b")
_I16 = struct.Struct(">h")
_I32 = struct.Struct(">i")
_I64 = struct.Struct(">q")
_F32 = struct.Struct(">f")
_F64 = struct.Struct(">d")


class Reader:
    """A forward-only cursor over a bytes-like input."""

    def __init__(self, data) -> None:
        self._data = bytes(data)
        self._pos = 0

    def __len__(self) -> int:
        return len(self._data) - self._pos

    def remaining(self) -> bytes:
        """Return the bytes not yet consumed."""
        return self._data[self._pos:]

    def at_end(self) -> bool:
        """Return True when every byte has been consumed."""
        return self._pos >= len(self._data)

    def read_exact(self, size: int) -> bytes:
        """Consume and return exactly ``size`` bytes."""
        if size < 0:
            raise ValueError("size must not be negative")
        available = len(self._data) - self._pos
        if size > available:
            raise IncompleteError(size - available)
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk

    def _unpack(self, fmt: struct.Struct):
        return fmt.unpack(self.read_exact(fmt.size))[0]

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_u16(self) -> int:
        return self._unpack(_U16)

    def read_u32(self) -> int:
        return self._unpack(_U32)

    def read_u64(self) -> int:
        return self._unpack(_U64)

    def read_i8(self) -> int:
        return self._unpack(_I8)

    def read_i16(self) -> int:
        return self._unpack(_I16)

    def read_i32(self) -> int:
        return self._unpack(_I32)

    def read_i64(self) -> int:
        return self._unpack(_I64)

    def read_f32(self) -> float:
        return self._unpack(_F32)

    def read_f64(self) -> float:
        return self._unpack(_F64)

    def read_type_code(self) -> TypeCode:
        """Consume one byte and interpret it as a type code."""
        code = self.read_u8()
        try:
            return TypeCode(code)
        except ValueError:
            raise InvalidTypeCodeError(code) from None

    def peek_type_code(self) -> TypeCode:
        """Return the next type code without consuming it."""
        start = self._pos
        try:
            return self.read_type_code()
        finally:
            self._pos = start


def write_type_code(out: bytearray, code: TypeCode) -> None:
    """Append a single type code byte to ``out``."""
    out.append(int(code))


def invalid_type_code(target: str, code: TypeCode) -> InvalidTypeCodeForError:
    """Build the error for a type code that does not fit ``target``."""
    return InvalidTypeCodeForError(target, code)