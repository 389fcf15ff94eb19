"""Compound AMQP 1.0 values: descriptors, described values, lists and maps."""

from __future__ import annotations

import struct
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Union

from .codec import Reader, TypeCode, invalid_type_code, write_type_code
from .errors import MessageParseError
from .primitives import AmqpType, SimpleValue
from .symbol import Symbol

_U8_MAX = 0xFF
_ULONG_MAX = 2**64 - 1

_LIST_CODES = (TypeCode.LIST0, TypeCode.LIST8, TypeCode.LIST32)
_MAP_CODES = (TypeCode.MAP8, TypeCode.MAP32)
_ARRAY_CODES = (TypeCode.ARRAY8, TypeCode.ARRAY32)


@dataclass(frozen=True)
class Descriptor:
    """Descriptor of a described type: an unsigned long code or a symbol."""

    value: Union[int, Symbol]

    def __post_init__(self) -> None:
        value = self.value
        if isinstance(value, Symbol):
            return
        if isinstance(value, str):
            object.__setattr__(self, "value", Symbol(value))
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(
                f"descriptor must be an int or a Symbol, got {type(value).__name__}"
            )
        if not 0 <= value <= _ULONG_MAX:
            raise ValueError(f"{value} is out of range for a descriptor code")

    def encoded_size(self) -> int:
        if isinstance(self.value, Symbol):
            return 1 + self.value.encoded_size()
        return 1 + AmqpType.ULONG.encoded_size(self.value)

    def encode(self, out: bytearray) -> None:
        write_type_code(out, TypeCode.DESCRIBED)
        if isinstance(self.value, Symbol):
            self.value.encode(out)
        else:
            AmqpType.ULONG.encode(self.value, out)

    @classmethod
    def decode(cls, reader: Reader) -> "Descriptor":
        code = reader.read_type_code()
        if code is not TypeCode.DESCRIBED:
            raise invalid_type_code("Descriptor", code)
        code = reader.peek_type_code()
        if code in (TypeCode.ULONG, TypeCode.ULONG_SMALL, TypeCode.ULONG0):
            return cls(AmqpType.ULONG.decode(reader))
        if code in (TypeCode.SYMBOL8, TypeCode.SYMBOL32):
            return cls(Symbol.decode(reader))
        raise invalid_type_code("Descriptor", code)


@dataclass(frozen=True)
class DescribedValue:
    """A value annotated with a descriptor."""

    descriptor: Descriptor
    value: Any

    def __post_init__(self) -> None:
        if not isinstance(self.descriptor, Descriptor):
            object.__setattr__(self, "descriptor", Descriptor(self.descriptor))
        object.__setattr__(self, "value", to_value(self.value))

    def encoded_size(self) -> int:
        return 1 + self.descriptor.encoded_size() + value_size(self.value)

    def encode(self, out: bytearray) -> None:
        write_type_code(out, TypeCode.DESCRIBED)
        self.descriptor.encode(out)
        encode_value(self.value, out)

    @classmethod
    def decode(cls, reader: Reader) -> "DescribedValue":
        code = reader.read_type_code()
        if code is not TypeCode.DESCRIBED:
            raise invalid_type_code("DescribedValue", code)
        descriptor = Descriptor.decode(reader)
        value = decode_value(reader)
        return cls(descriptor, value)


def _read_compound_header(reader: Reader, code: TypeCode, short: TypeCode, long: TypeCode):
    """Read size and count after a compound type code; None if the code does not match."""
    if code is short:
        reader.read_u8()
        return reader.read_u8()
    if code is long:
        reader.read_u32()
        return reader.read_u32()
    return None


@dataclass
class AmqpList:
    """An ordered AMQP list of values."""

    items: list = field(default_factory=list)

    def __post_init__(self) -> None:
        self.items = [to_value(item) for item in self.items]

    def __hash__(self) -> int:
        return hash(tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]

    def push(self, item: Any) -> None:
        """Append ``item``, converted to an AMQP value."""
        self.items.append(to_value(item))

    def _content_size(self) -> int:
        return sum(value_size(item) for item in self.items)

    def encoded_size(self) -> int:
        content = self._content_size()
        return (9 if content + 1 > _U8_MAX else 3) + content

    def encode(self, out: bytearray) -> None:
        content = self._content_size()
        if content + 1 > _U8_MAX:
            write_type_code(out, TypeCode.LIST32)
            out += struct.pack(">II", content + 4, len(self.items))
        else:
            write_type_code(out, TypeCode.LIST8)
            out += bytes((content + 1, len(self.items)))
        for item in self.items:
            encode_value(item, out)

    @classmethod
    def decode(cls, reader: Reader) -> "AmqpList":
        code = reader.read_type_code()
        if code is TypeCode.LIST0:
            return cls()
        count = _read_compound_header(reader, code, TypeCode.LIST8, TypeCode.LIST32)
        if count is None:
            raise invalid_type_code("List", code)
        return cls([decode_value(reader) for _ in range(count)])


def decode_list_fields(reader: Reader, decode_field: Callable[[Reader, int], Any]) -> int:
    """Read a list header and call ``decode_field(reader, index)`` for each element.

    ``decode_field`` must consume exactly one element. Returns the element count.
    """
    code = reader.read_type_code()
    if code is TypeCode.LIST0:
        return 0
    count = _read_compound_header(reader, code, TypeCode.LIST8, TypeCode.LIST32)
    if count is None:
        raise MessageParseError(f"Invalid type code {code.name} for list")
    for index in range(count):
        decode_field(reader, index)
    return count


class AmqpMap(MutableMapping):
    """An AMQP map; keys and values are stored as AMQP values."""

    def __init__(self, entries=None) -> None:
        self._entries: dict = {}
        if entries:
            self.update(entries)

    def __getitem__(self, key):
        return self._entries[key]

    def __setitem__(self, key, value) -> None:
        self._entries[to_value(key)] = to_value(value)

    def __delitem__(self, key) -> None:
        try:
            stored_key = to_value(key)
        except (TypeError, ValueError):
            raise KeyError(key) from None
        if stored_key not in self._entries:
            raise KeyError(key)
        self._entries.pop(stored_key)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._entries!r})"

    def _content_size(self) -> int:
        return sum(value_size(k) + value_size(v) for k, v in self._entries.items())

    def encoded_size(self) -> int:
        content = self._content_size()
        return content + (9 if content + 1 > _U8_MAX else 3)

    def encode(self, out: bytearray) -> None:
        count = len(self._entries) * 2
        content = self._content_size()
        if content + 1 > _U8_MAX:
            write_type_code(out, TypeCode.MAP32)
            out += struct.pack(">II", content + 4, count)
        else:
            write_type_code(out, TypeCode.MAP8)
            out += bytes((content + 1, count))
        for key, value in self._entries.items():
            encode_value(key, out)
            encode_value(value, out)

    @classmethod
    def decode(cls, reader: Reader, decode_key, decode_value):
        """Read a map, decoding keys and values with the given functions."""
        code = reader.read_type_code()
        count = _read_compound_header(reader, code, TypeCode.MAP8, TypeCode.MAP32)
        if count is None:
            raise invalid_type_code("Map", code)
        if count % 2:
            raise MessageParseError(f"map has an odd number of elements: {count}")
        result = cls()
        for _ in range(count // 2):
            key = decode_key(reader)
            value = decode_value(reader)
            result._entries[key] = value
        return result


Value = Union[SimpleValue, AmqpList, AmqpMap, DescribedValue]
_VALUE_TYPES = (SimpleValue, AmqpList, AmqpMap, DescribedValue)


def to_value(obj: Any) -> Any:
    """Convert a Python object to an AMQP value; values are returned unchanged."""
    if isinstance(obj, _VALUE_TYPES):
        return obj
    if isinstance(obj, (list, tuple)):
        return AmqpList(list(obj))
    if isinstance(obj, Mapping):
        return AmqpMap(obj)
    return SimpleValue.of(obj)


def _encodable(obj: Any) -> Any:
    if callable(getattr(obj, "encoded_size", None)) and callable(getattr(obj, "encode", None)):
        return obj
    return to_value(obj)


def value_size(value: Any) -> int:
    """Number of bytes ``value`` takes when encoded."""
    return _encodable(value).encoded_size()


def encode_value(value: Any, out: bytearray) -> None:
    """Append the encoding of ``value`` to ``out``."""
    _encodable(value).encode(out)


def decode_value(reader: Reader) -> Any:
    """Read any AMQP value from ``reader``."""
    code = reader.peek_type_code()
    if code is TypeCode.DESCRIBED:
        return DescribedValue.decode(reader)
    if code in _LIST_CODES:
        return AmqpList.decode(reader)
    if code in _MAP_CODES:
        return AmqpMap.decode(reader, decode_value, decode_value)
    if code in _ARRAY_CODES:
        raise invalid_type_code("CollectionValue", code)
    return SimpleValue.decode(reader)