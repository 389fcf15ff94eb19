"""Fluent builders for creating messages."""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Any, Optional

from .amqp_message import AmqpMessage
from .message import Message
from .properties import MessageId, Properties
from .symbol import Symbol

_U32_MAX = 0xFFFF_FFFF


def _symbol(value: Any) -> Symbol:
    if isinstance(value, Symbol):
        return value
    if isinstance(value, str):
        return Symbol(value)
    raise TypeError(f"expected a str or Symbol, got {type(value).__name__}")


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a str, got {type(value).__name__}")
    return value


def _timestamp(value: Any) -> datetime:
    if not isinstance(value, datetime):
        raise TypeError(f"expected a datetime, got {type(value).__name__}")
    return value


class MessageBuilder:
    """Builds a :class:`Message` step by step."""

    def __init__(self) -> None:
        self._message = AmqpMessage()
        self._publishing_id: Optional[int] = None

    def body(self, data) -> "MessageBuilder":
        """Set the single data section of the body."""
        self._message.body.set_data(data)
        return self

    def properties(self) -> "PropertiesBuilder":
        return PropertiesBuilder(self)

    def message_annotations(self) -> "AnnotationBuilder":
        return AnnotationBuilder(self)

    def application_properties(self) -> "ApplicationPropertiesBuilder":
        return ApplicationPropertiesBuilder(self)

    def publishing_id(self, publishing_id: int) -> "MessageBuilder":
        self._publishing_id = publishing_id
        return self

    def build(self) -> Message:
        """Create the message; later builder changes do not affect it."""
        return Message(copy.deepcopy(self._message), self._publishing_id)


class PropertiesBuilder:
    """Sets fields of the properties section."""

    def __init__(self, parent: MessageBuilder) -> None:
        self._parent = parent

    def _props(self) -> Properties:
        return self._parent._message.ensure_properties()

    def message_builder(self) -> MessageBuilder:
        return self._parent

    def message_id(self, message_id) -> "PropertiesBuilder":
        self._props().message_id = MessageId.of(message_id)
        return self

    def user_id(self, user_id) -> "PropertiesBuilder":
        if not isinstance(user_id, (bytes, bytearray, memoryview)):
            raise TypeError(f"user id must be bytes, got {type(user_id).__name__}")
        self._props().user_id = bytes(user_id)
        return self

    def to(self, address: str) -> "PropertiesBuilder":
        self._props().to = _text(address)
        return self

    def subject(self, subject: str) -> "PropertiesBuilder":
        self._props().subject = _text(subject)
        return self

    def reply_to(self, address: str) -> "PropertiesBuilder":
        self._props().reply_to = _text(address)
        return self

    def correlation_id(self, correlation_id) -> "PropertiesBuilder":
        self._props().correlation_id = MessageId.of(correlation_id)
        return self

    def content_type(self, content_type) -> "PropertiesBuilder":
        self._props().content_type = _symbol(content_type)
        return self

    def content_encoding(self, content_encoding) -> "PropertiesBuilder":
        self._props().content_encoding = _symbol(content_encoding)
        return self

    def absolute_expiry_time(self, expiry_time: datetime) -> "PropertiesBuilder":
        self._props().absolute_expiry_time = _timestamp(expiry_time)
        return self

    def creation_time(self, creation_time: datetime) -> "PropertiesBuilder":
        self._props().creation_time = _timestamp(creation_time)
        return self

    def group_id(self, group_id: str) -> "PropertiesBuilder":
        self._props().group_id = _text(group_id)
        return self

    def group_sequence(self, group_sequence: int) -> "PropertiesBuilder":
        if isinstance(group_sequence, bool) or not isinstance(group_sequence, int):
            raise TypeError("group sequence must be an int")
        if not 0 <= group_sequence <= _U32_MAX:
            raise ValueError(f"{group_sequence} is out of range for a group sequence")
        self._props().group_sequence = group_sequence
        return self

    def reply_to_group_id(self, reply_to_group_id: str) -> "PropertiesBuilder":
        self._props().reply_to_group_id = _text(reply_to_group_id)
        return self


class AnnotationBuilder:
    """Inserts entries into the message annotations."""

    def __init__(self, parent: MessageBuilder) -> None:
        self._parent = parent

    def insert(self, key: Any, value: Any) -> "AnnotationBuilder":
        self._parent._message.ensure_message_annotations().put(key, value)
        return self

    def message_builder(self) -> MessageBuilder:
        return self._parent


class ApplicationPropertiesBuilder:
    """Inserts entries into the application properties."""

    def __init__(self, parent: MessageBuilder) -> None:
        self._parent = parent

    def insert(self, key: str, value: Any) -> "ApplicationPropertiesBuilder":
        self._parent._message.ensure_application_properties().insert(key, value)
        return self

    def message_builder(self) -> MessageBuilder:
        return self._parent