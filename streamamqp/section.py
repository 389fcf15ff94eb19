"""Decoding of the individual sections that make up an AMQP message."""

from __future__ import annotations

from enum import Enum
from typing import Any

from .annotations import Annotations, ApplicationProperties
from .body import MESSAGE_BODY_DATA, MESSAGE_BODY_SEQUENCE, MESSAGE_BODY_VALUE
from .codec import Reader
from .errors import MessageParseError
from .header import MESSAGE_HEADER, Header
from .primitives import AmqpType
from .properties import MESSAGE_PROPERTIES, Properties
from .values import AmqpList, Descriptor, decode_value

MESSAGE_DELIVERY_ANNOTATIONS = Descriptor(113)
MESSAGE_ANNOTATIONS = Descriptor(114)
MESSAGE_APPLICATION_PROPERTIES = Descriptor(116)
MESSAGE_FOOTER = Descriptor(120)


class SectionKind(Enum):
    """The kinds of section a message is built from."""

    HEADER = "header"
    DELIVERY_ANNOTATIONS = "delivery-annotations"
    MESSAGE_ANNOTATIONS = "message-annotations"
    APPLICATION_PROPERTIES = "application-properties"
    DATA = "data"
    AMQP_SEQUENCE = "amqp-sequence"
    AMQP_VALUE = "amqp-value"
    FOOTER = "footer"
    PROPERTIES = "properties"


# Sections whose decoder reads the descriptor itself.
_SELF_DESCRIBED = {
    MESSAGE_HEADER: (SectionKind.HEADER, Header.decode),
    MESSAGE_PROPERTIES: (SectionKind.PROPERTIES, Properties.decode),
}

# Sections whose payload follows the descriptor.
_PAYLOAD = {
    MESSAGE_BODY_DATA: (SectionKind.DATA, AmqpType.BINARY.decode),
    MESSAGE_BODY_VALUE: (SectionKind.AMQP_VALUE, decode_value),
    MESSAGE_APPLICATION_PROPERTIES: (
        SectionKind.APPLICATION_PROPERTIES,
        ApplicationProperties.decode,
    ),
    MESSAGE_ANNOTATIONS: (SectionKind.MESSAGE_ANNOTATIONS, Annotations.decode),
    MESSAGE_BODY_SEQUENCE: (SectionKind.AMQP_SEQUENCE, AmqpList.decode),
    MESSAGE_DELIVERY_ANNOTATIONS: (SectionKind.DELIVERY_ANNOTATIONS, Annotations.decode),
    MESSAGE_FOOTER: (SectionKind.FOOTER, Annotations.decode),
}


def decode_section(reader: Reader) -> tuple[SectionKind, Any]:
    """Read one message section, returning its kind and decoded content."""
    descriptor = Descriptor.decode(Reader(reader.remaining()))
    if descriptor in _SELF_DESCRIBED:
        kind, decode = _SELF_DESCRIBED[descriptor]
        return kind, decode(reader)
    if descriptor in _PAYLOAD:
        kind, decode = _PAYLOAD[descriptor]
        Descriptor.decode(reader)
        return kind, decode(reader)
    raise MessageParseError(f"Invalid section {descriptor}")