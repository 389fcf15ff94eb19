import pytest

from streamamqp.amqp_message import AmqpMessage
from streamamqp.errors import IncompleteError, MessageParseError
from streamamqp.message import Message
from streamamqp.primitives import AmqpType, SimpleValue


def _message_with_data(data: bytes) -> Message:
    amqp = AmqpMessage()
    amqp.body.set_data(data)
    return Message(amqp)


def test_data_section_wire_bytes():
    message = _message_with_data(b"test")
    assert message.to_bytes() == bytes([0x00, 0x53, 0x75, 0xA0, 0x04]) + b"test"


def test_encoded_size_matches_encoding():
    message = _message_with_data(b"test:w")
    out = bytearray()
    message.encode(out)
    assert message.encoded_size() == len(out)
    assert bytes(out) == message.to_bytes()


def test_round_trip_body():
    message = _message_with_data(b"test:w")
    decoded = Message.decode(message.to_bytes())
    assert decoded == message
    assert decoded.data() == b"test:w"
    assert decoded.publishing_id() is None


def test_empty_message_has_no_sections():
    message = Message.decode(b"")
    assert message.data() is None
    assert message.value() is None
    assert message.header() is None
    assert message.properties() is None
    assert message.message_annotations() is None
    assert message.application_properties() is None
    assert message.delivery_annotations() is None


def test_value_section_round_trip():
    amqp = AmqpMessage()
    amqp.body.set_data(b"test:w").set_value(10)
    decoded = Message.decode(Message(amqp).to_bytes())
    assert decoded.value() == SimpleValue(AmqpType.INT, 10)
    assert decoded.data() == b"test:w"


def test_header_round_trip():
    amqp = AmqpMessage()
    header = amqp.ensure_header()
    header.ttl = 3000
    header.delivery_count = 32
    header.first_acquirer = True
    decoded = Message.decode(Message(amqp).to_bytes())
    assert decoded.header() == header


def test_delivery_annotations_round_trip():
    amqp = AmqpMessage()
    amqp.delivery_annotations = amqp.ensure_message_annotations().__class__()
    amqp.delivery_annotations.put("key", "value")
    decoded = Message.decode(Message(amqp).to_bytes())
    assert decoded.delivery_annotations().get("key") == SimpleValue.of("value")


def test_publishing_id_is_part_of_equality():
    amqp = AmqpMessage()
    amqp.body.set_data(b"x")
    with_id = Message(amqp, publishing_id=3)
    assert with_id.publishing_id() == 3
    assert with_id != Message(amqp)
    assert Message.decode(with_id.to_bytes()) == Message(amqp)


def test_publishing_id_out_of_range():
    with pytest.raises(ValueError):
        Message(publishing_id=-1)


def test_decode_truncated_input():
    data = _message_with_data(b"test").to_bytes()
    with pytest.raises(IncompleteError):
        Message.decode(data[:-1])


def test_decode_unknown_section():
    with pytest.raises(MessageParseError):
        Message.decode(bytes([0x00, 0x53, 0x7F, 0x40]))


def test_builder_creates_message():
    message = Message.builder().body(b"payload").build()
    assert message.data() == b"payload"