from datetime import datetime, timezone

import pytest

from streamamqp.builder import MessageBuilder
from streamamqp.message import Message
from streamamqp.primitives import AmqpType, SimpleValue
from streamamqp.properties import MessageId
from streamamqp.symbol import Symbol


def test_body_and_publishing_id():
    message = MessageBuilder().body(b"test").publishing_id(42).build()
    assert message.data() == b"test"
    assert message.publishing_id() == 42


def test_properties_round_trip():
    created = datetime(2022, 1, 2, 3, 4, 5, 123000, tzinfo=timezone.utc)
    message = (
        Message.builder()
        .body(b"test")
        .properties()
        .message_id("test")
        .user_id(b"test")
        .to("test")
        .subject("test")
        .reply_to("test")
        .correlation_id(5)
        .content_type("test")
        .content_encoding("test")
        .absolute_expiry_time(created)
        .creation_time(created)
        .group_id("test")
        .group_sequence(7)
        .reply_to_group_id("test")
        .message_builder()
        .build()
    )
    props = message.properties()
    assert props.message_id == MessageId(AmqpType.STRING, "test")
    assert props.content_type == Symbol("test")
    assert props.user_id == b"test"

    decoded = Message.decode(message.to_bytes())
    assert decoded.properties() == props
    assert decoded.data() == b"test"


def test_message_annotations():
    message = (
        Message.builder()
        .message_annotations()
        .insert("test", "test")
        .insert(100000, 1)
        .message_builder()
        .build()
    )
    annotations = message.message_annotations()
    assert annotations.get("test") == SimpleValue.of("test")
    decoded = Message.decode(message.to_bytes())
    assert decoded.message_annotations() == annotations
    assert decoded.message_annotations().get(100000) == SimpleValue.of(1)


def test_application_properties():
    message = (
        Message.builder()
        .application_properties()
        .insert("test", "test")
        .insert("count", 3)
        .message_builder()
        .build()
    )
    props = message.application_properties()
    assert props["test"] == SimpleValue.of("test")
    decoded = Message.decode(message.to_bytes())
    assert decoded.application_properties() == props


def test_built_message_is_independent_of_builder():
    builder = Message.builder().body(b"first")
    first = builder.build()
    builder.body(b"second")
    assert first.data() == b"first"
    assert builder.build().data() == b"second"


def test_sub_builders_return_parent():
    builder = Message.builder()
    assert builder.properties().message_builder() is builder
    assert builder.message_annotations().message_builder() is builder
    assert builder.application_properties().message_builder() is builder


def test_encoded_size_of_built_message():
    message = (
        Message.builder()
        .body(b"x" * 300)
        .properties()
        .subject("s" * 300)
        .message_builder()
        .build()
    )
    assert message.encoded_size() == len(message.to_bytes())


def test_invalid_message_id():
    with pytest.raises(TypeError):
        Message.builder().properties().message_id(1.5)


def test_invalid_annotation_key():
    with pytest.raises(TypeError):
        Message.builder().message_annotations().insert(1.5, "value")


def test_invalid_application_property_key():
    with pytest.raises(TypeError):
        Message.builder().application_properties().insert(1, "value")


def test_group_sequence_out_of_range():
    with pytest.raises(ValueError):
        Message.builder().properties().group_sequence(-1)