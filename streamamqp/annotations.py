"""Annotation maps keyed by symbols or integers, and application properties."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .codec import Reader, TypeCode, invalid_type_code
from .primitives import AmqpType, SimpleValue
from .symbol import Symbol
from .values import AmqpMap, decode_value, to_value

_KEY_KINDS = (AmqpType.SYMBOL, AmqpType.ULONG, AmqpType.LONG)
_SYMBOL_CODES = (TypeCode.SYMBOL8, TypeCode.SYMBOL32)
_ULONG_CODES = (TypeCode.ULONG, TypeCode.ULONG0, TypeCode.ULONG_SMALL)
_LONG_CODES = (TypeCode.LONG, TypeCode.LONG_SMALL)


@dataclass(frozen=True)
class AnnotationKey:
    """Key of an annotation map: a symbol, an unsigned long or a long."""

    kind: AmqpType
    value: Any

    def __post_init__(self) -> None:
        if self.kind not in _KEY_KINDS:
            raise ValueError(f"{self.kind} cannot be used as an annotation key")
        object.__setattr__(self, "value", SimpleValue(self.kind, self.value).value)

    @classmethod
    def of(cls, key: Any) -> "AnnotationKey":
        """Convert a string, symbol or non-negative int to a key."""
        if isinstance(key, AnnotationKey):
            return key
        if isinstance(key, (str, Symbol)):
            return cls(AmqpType.SYMBOL, key)
        if isinstance(key, int) and not isinstance(key, bool):
            return cls(AmqpType.ULONG, key)
        raise TypeError(f"cannot use {type(key).__name__} as an annotation key")

    @classmethod
    def long(cls, value: int) -> "AnnotationKey":
        """A key holding a signed long."""
        return cls(AmqpType.LONG, value)

    def encoded_size(self) -> int:
        return self.kind.encoded_size(self.value)

    def encode(self, out: bytearray) -> None:
        self.kind.encode(self.value, out)

    @classmethod
    def decode(cls, reader: Reader) -> "AnnotationKey":
        code = reader.peek_type_code()
        if code in _SYMBOL_CODES:
            kind = AmqpType.SYMBOL
        elif code in _ULONG_CODES:
            kind = AmqpType.ULONG
        elif code in _LONG_CODES:
            kind = AmqpType.LONG
        else:
            raise invalid_type_code("AnnotationKey", code)
        return cls(kind, kind.decode(reader))


class Annotations(AmqpMap):
    """A map of annotation keys to AMQP values."""

    @staticmethod
    def _lookup(key: Any) -> AnnotationKey:
        try:
            return AnnotationKey.of(key)
        except (TypeError, ValueError):
            raise KeyError(key) from None

    def __getitem__(self, key):
        return self._entries[self._lookup(key)]

    def __setitem__(self, key, value) -> None:
        self._entries[AnnotationKey.of(key)] = to_value(value)

    def __delitem__(self, key) -> None:
        del self._entries[self._lookup(key)]

    def put(self, key: Any, value: Any):
        """Store ``value`` under ``key``; return the value it replaced, if any."""
        annotation_key = AnnotationKey.of(key)
        previous = self._entries.get(annotation_key)
        self._entries[annotation_key] = to_value(value)
        return previous

    def get(self, key: Any, default: Any = None):
        try:
            return self[key]
        except KeyError:
            return default

    @classmethod
    def decode(cls, reader: Reader) -> "Annotations":
        return super().decode(reader, AnnotationKey.decode, decode_value)


Footer = Annotations
DeliveryAnnotations = Annotations
MessageAnnotations = Annotations


class ApplicationProperties(AmqpMap):
    """A map of string keys to simple AMQP values."""

    def __setitem__(self, key, value) -> None:
        if not isinstance(key, str):
            raise TypeError(
                f"application property keys must be str, got {type(key).__name__}"
            )
        self._entries[key] = SimpleValue.of(value)

    def insert(self, key: str, value: Any):
        """Store ``value`` under ``key``; return the value it replaced, if any."""
        previous = self._entries.get(key)
        self[key] = value
        return previous

    @classmethod
    def decode(cls, reader: Reader) -> "ApplicationProperties":
        return super().decode(reader, AmqpType.STRING.decode, SimpleValue.decode)