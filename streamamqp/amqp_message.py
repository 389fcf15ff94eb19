"""A complete AMQP 1.0 message made of its optional sections and a body."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .annotations import (
    ApplicationProperties,
    DeliveryAnnotations,
    Footer,
    MessageAnnotations,
)
from .body import MessageBody
from .codec import Reader
from .header import Header
from .properties import Properties
from .section import (
    MESSAGE_ANNOTATIONS,
    MESSAGE_APPLICATION_PROPERTIES,
    MESSAGE_DELIVERY_ANNOTATIONS,
    MESSAGE_FOOTER,
    SectionKind,
    decode_section,
)


@dataclass
class AmqpMessage:
    """An AMQP message: optional sections around a message body."""

    header: Optional[Header] = None
    delivery_annotations: Optional[DeliveryAnnotations] = None
    message_annotations: Optional[MessageAnnotations] = None
    properties: Optional[Properties] = None
    application_properties: Optional[ApplicationProperties] = None
    footer: Optional[Footer] = None
    body: MessageBody = field(default_factory=MessageBody)

    def ensure_header(self) -> Header:
        """Return the header, creating a default one if absent."""
        if self.header is None:
            self.header = Header()
        return self.header

    def ensure_properties(self) -> Properties:
        """Return the properties, creating empty ones if absent."""
        if self.properties is None:
            self.properties = Properties()
        return self.properties

    def ensure_message_annotations(self) -> MessageAnnotations:
        """Return the message annotations, creating an empty map if absent."""
        if self.message_annotations is None:
            self.message_annotations = MessageAnnotations()
        return self.message_annotations

    def ensure_application_properties(self) -> ApplicationProperties:
        """Return the application properties, creating an empty map if absent."""
        if self.application_properties is None:
            self.application_properties = ApplicationProperties()
        return self.application_properties

    def ensure_footer(self) -> Footer:
        """Return the footer, creating an empty map if absent."""
        if self.footer is None:
            self.footer = Footer()
        return self.footer

    def _described_maps(self):
        return (
            (MESSAGE_DELIVERY_ANNOTATIONS, self.delivery_annotations),
            (MESSAGE_ANNOTATIONS, self.message_annotations),
            (MESSAGE_APPLICATION_PROPERTIES, self.application_properties),
            (MESSAGE_FOOTER, self.footer),
        )

    def encoded_size(self) -> int:
        size = self.body.encoded_size()
        if self.header is not None:
            size += self.header.encoded_size()
        if self.properties is not None:
            size += self.properties.encoded_size()
        for descriptor, section in self._described_maps():
            if section is not None:
                size += section.encoded_size() + descriptor.encoded_size()
        return size

    def encode(self, out: bytearray) -> None:
        if self.header is not None:
            self.header.encode(out)
        if self.delivery_annotations is not None:
            MESSAGE_DELIVERY_ANNOTATIONS.encode(out)
            self.delivery_annotations.encode(out)
        if self.message_annotations is not None:
            MESSAGE_ANNOTATIONS.encode(out)
            self.message_annotations.encode(out)
        if self.properties is not None:
            self.properties.encode(out)
        if self.application_properties is not None:
            MESSAGE_APPLICATION_PROPERTIES.encode(out)
            self.application_properties.encode(out)
        self.body.encode(out)
        if self.footer is not None:
            MESSAGE_FOOTER.encode(out)
            self.footer.encode(out)

    def to_bytes(self) -> bytes:
        """Return the full encoding of the message."""
        out = bytearray()
        self.encode(out)
        return bytes(out)

    @classmethod
    def decode(cls, reader: Reader) -> "AmqpMessage":
        """Read sections until the input is exhausted."""
        message = cls()
        while not reader.at_end():
            kind, value = decode_section(reader)
            if kind is SectionKind.HEADER:
                message.header = value
            elif kind is SectionKind.DELIVERY_ANNOTATIONS:
                message.delivery_annotations = value
            elif kind is SectionKind.MESSAGE_ANNOTATIONS:
                message.message_annotations = value
            elif kind is SectionKind.APPLICATION_PROPERTIES:
                message.application_properties = value
            elif kind is SectionKind.FOOTER:
                message.footer = value
            elif kind is SectionKind.PROPERTIES:
                message.properties = value
            elif kind is SectionKind.AMQP_SEQUENCE:
                message.body.sequence.append(value)
            elif kind is SectionKind.AMQP_VALUE:
                message.body.value = value
            elif kind is SectionKind.DATA:
                message.body.data.append(value)
        return message

    @classmethod
    def from_bytes(cls, data) -> "AmqpMessage":
        """Decode a message from a complete encoding."""
        return cls.decode(Reader(data))