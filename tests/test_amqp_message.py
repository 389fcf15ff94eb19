from datetime import datetime, timezone

from hypothesis import given, settings
from hypothesis import strategies as st

from streamamqp.amqp_message import AmqpMessage
from streamamqp.annotations import AnnotationKey, Annotations, ApplicationProperties
from streamamqp.header import Header
from streamamqp.primitives import AmqpType, SimpleValue
from streamamqp.properties import MessageId, Properties
from streamamqp.symbol import Symbol
from streamamqp.values import AmqpList


def check_round_trip(message: AmqpMessage) -> AmqpMessage:
    encoded = message.to_bytes()
    assert len(encoded) == message.encoded_size()
    decoded = AmqpMessage.from_bytes(encoded)
    assert decoded == message
    return decoded


def test_message_with_body():
    message = AmqpMessage()
    message.body.set_data(b"test:w")
    decoded = check_round_trip(message)
    assert decoded.body.first_data() == b"test:w"


def test_message_with_header():
    message = AmqpMessage()
    message.body.set_data(b"test:w")
    header = message.ensure_header()
    header.ttl = 3000
    header.delivery_count = 32
    header.first_acquirer = True
    decoded = check_round_trip(message)
    assert decoded.header.ttl == 3000
    assert decoded.header.delivery_count == 32
    assert decoded.header.first_acquirer is True


def test_message_with_properties():
    message = AmqpMessage()
    message.body.set_data(b"test:w")
    message.properties = Properties(
        message_id=MessageId.of("id"),
        user_id=b"user",
        to="to",
        subject="subject",
        reply_to="reply",
        correlation_id=MessageId.of(42),
        content_type=Symbol("text/plain"),
        content_encoding=Symbol("utf-8"),
        absolute_expiry_time=datetime(2030, 1, 2, 3, 4, 5, 6000, tzinfo=timezone.utc),
        creation_time=datetime(2020, 6, 7, 8, 9, 10, tzinfo=timezone.utc),
        group_id="group",
        group_sequence=12,
        reply_to_group_id="reply-group",
    )
    check_round_trip(message)


def test_message_with_footer():
    message = AmqpMessage()
    message.body.set_data(b"test:w")
    footer = message.ensure_footer()
    items = AmqpList()
    items.push(1)
    items.push("test")
    footer.put("test", 1)
    footer.put("".join(str(idx) for idx in range(300)), 1)
    footer.put(1, "test")
    footer.put(1000, "test")
    footer.put("list", items)
    check_round_trip(message)


def test_message_with_body_value():
    message = AmqpMessage()
    message.body.set_data(b"test:w").set_value(10)
    decoded = check_round_trip(message)
    assert decoded.body.value == SimpleValue(AmqpType.INT, 10)


def test_message_empty_data_from_wire_bytes():
    message = AmqpMessage.from_bytes(b"\x00\x53\x75\xa0\x00")
    assert message.body.first_data() == b""


def test_message_header_and_value():
    message = AmqpMessage()
    message.header = Header(
        durable=True, priority=100, first_acquirer=True, delivery_count=300
    )
    message.body.set_data(b"payload").set_value("value")
    decoded = check_round_trip(message)
    assert decoded.header.durable is True
    assert decoded.header.first_acquirer is True
    assert decoded.header.priority == 100
    assert decoded.header.delivery_count == 300
    assert (decoded.header.ttl or 0) == 0
    assert decoded.body.first_data() is not None


def test_message_large_application_properties_and_properties():
    message = AmqpMessage()
    message.body.set_data(b"x" * 700)
    props = message.ensure_application_properties()
    props.insert("k" * 900, "v" * 900)
    message.properties = Properties(
        reply_to="r" * 900,
        content_encoding="e" * 900,
        content_type="t" * 900,
        group_id="g" * 900,
        absolute_expiry_time=datetime(2030, 1, 1, tzinfo=timezone.utc),
        creation_time=datetime(2020, 1, 1, tzinfo=timezone.utc),
    )
    decoded = check_round_trip(message)
    assert len(decoded.application_properties) > 0
    assert len(decoded.body.first_data()) > 255
    for key, value in decoded.application_properties.items():
        assert len(key) >= 900
        assert len(value.value) >= 900
    properties = decoded.properties
    assert len(properties.reply_to) > 0
    assert len(properties.content_encoding) > 0
    assert len(properties.content_type) > 0
    assert len(properties.group_id) > 0
    assert properties.absolute_expiry_time is not None
    assert properties.creation_time is not None


def test_message_static_compare():
    message = AmqpMessage()
    message.body.set_data(b"test")
    message.properties = Properties(
        message_id=MessageId.of("test"),
        user_id=b"test",
        subject="test",
        reply_to="test",
        content_encoding="test",
        content_type="test",
        group_id="test",
    )
    message.ensure_application_properties().insert("test", "test")
    annotations = message.ensure_message_annotations()
    annotations.put("test", "test")
    annotations.put(AnnotationKey.long(100_000), SimpleValue(AmqpType.LONG, 100_000))

    decoded = check_round_trip(message)
    assert decoded.body.first_data() == b"test"
    properties = decoded.properties
    assert properties.message_id.value == "test"
    assert properties.subject == "test"
    assert properties.reply_to == "test"
    assert str(properties.content_encoding) == "test"
    assert str(properties.content_type) == "test"
    assert properties.group_id == "test"
    assert properties.user_id == b"test"
    for key, value in decoded.application_properties.items():
        assert key == "test"
        assert value.value == "test"
    decoded_annotations = decoded.message_annotations
    assert decoded_annotations["test"] == SimpleValue.of("test")
    assert decoded_annotations[AnnotationKey.long(100_000)] == SimpleValue(
        AmqpType.LONG, 100_000
    )


def test_message_body_250_and_700():
    for size in (250, 700):
        message = AmqpMessage()
        message.body.set_data(bytes(size))
        decoded = check_round_trip(message)
        assert len(decoded.body.first_data()) == size


def test_empty_input_decodes_to_default_message():
    assert AmqpMessage.from_bytes(b"") == AmqpMessage()


def test_ensure_methods_keep_existing_sections():
    message = AmqpMessage()
    header = message.ensure_header()
    assert message.ensure_header() is header
    annotations = message.ensure_message_annotations()
    annotations.put("a", 1)
    assert message.ensure_message_annotations() is annotations
    assert isinstance(message.ensure_footer(), Annotations)
    assert isinstance(message.ensure_application_properties(), ApplicationProperties)
    assert message.ensure_properties() == Properties()


def test_multiple_data_and_sequence_sections():
    message = AmqpMessage()
    message.body.data = [b"one", b"two"]
    message.body.sequence = [AmqpList([1, 2]), AmqpList(["x"])]
    decoded = check_round_trip(message)
    assert decoded.body.data == [b"one", b"two"]
    assert len(decoded.body.sequence) == 2


@st.composite
def messages(draw):
    message = AmqpMessage()
    message.body.data = draw(st.lists(st.binary(max_size=300), max_size=3))
    if draw(st.booleans()):
        message.header = Header(
            durable=draw(st.booleans()),
            priority=draw(st.integers(0, 255)),
            ttl=draw(st.none() | st.integers(0, 2**32 - 1)),
            first_acquirer=draw(st.booleans()),
            delivery_count=draw(st.integers(0, 2**32 - 1)),
        )
    if draw(st.booleans()):
        props = message.ensure_application_properties()
        for key, value in draw(
            st.dictionaries(st.text(max_size=20), st.integers(-(2**31), 2**31 - 1), max_size=5)
        ).items():
            props.insert(key, value)
    if draw(st.booleans()):
        annotations = message.ensure_message_annotations()
        for key, value in draw(
            st.dictionaries(st.text(max_size=20), st.text(max_size=40), max_size=5)
        ).items():
            annotations.put(key, value)
    if draw(st.booleans()):
        message.properties = Properties(
            subject=draw(st.none() | st.text(max_size=30)),
            group_sequence=draw(st.none() | st.integers(0, 2**32 - 1)),
        )
    return message


@settings(max_examples=50)
@given(messages())
def test_message_encode_decode_fuzzy(message):
    check_round_trip(message)