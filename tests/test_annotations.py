import pytest

from streamamqp.annotations import AnnotationKey, Annotations, ApplicationProperties
from streamamqp.codec import Reader, TypeCode
from streamamqp.errors import InvalidTypeCodeForError
from streamamqp.primitives import AmqpType, SimpleValue
from streamamqp.symbol import Symbol
from streamamqp.values import AmqpList


def _encode(obj) -> bytes:
    out = bytearray()
    obj.encode(out)
    return bytes(out)


def test_symbol_key_wire_bytes():
    data = _encode(AnnotationKey.of("test"))
    assert data == b"\xa3\x04test"
    assert AnnotationKey.of("test").encoded_size() == len(data)


def test_of_maps_types():
    assert AnnotationKey.of("a").kind is AmqpType.SYMBOL
    assert AnnotationKey.of("a").value == Symbol("a")
    assert AnnotationKey.of(Symbol("a")) == AnnotationKey.of("a")
    assert AnnotationKey.of(5).kind is AmqpType.ULONG
    assert AnnotationKey.long(5).kind is AmqpType.LONG
    assert AnnotationKey.long(5) != AnnotationKey.of(5)


@pytest.mark.parametrize(
    "key",
    [
        AnnotationKey.of("test"),
        AnnotationKey.of("k" * 300),
        AnnotationKey.of(0),
        AnnotationKey.of(1),
        AnnotationKey.of(1000),
        AnnotationKey.of(2**64 - 1),
        AnnotationKey.long(-1),
        AnnotationKey.long(100_000),
    ],
)
def test_key_round_trip(key):
    data = _encode(key)
    reader = Reader(data)
    assert AnnotationKey.decode(reader) == key
    assert reader.at_end()
    assert key.encoded_size() == len(data)


def test_key_decode_rejects_string():
    data = _encode(SimpleValue.of("x"))
    with pytest.raises(InvalidTypeCodeForError):
        AnnotationKey.decode(Reader(data))


def test_key_of_rejects_bad_input():
    with pytest.raises(ValueError):
        AnnotationKey.of(-1)
    with pytest.raises(TypeError):
        AnnotationKey.of(1.5)


def test_put_returns_previous():
    annotations = Annotations()
    assert annotations.put("test", 1) is None
    assert annotations.put("test", 2) == SimpleValue.of(1)
    assert annotations["test"] == SimpleValue.of(2)
    assert len(annotations) == 1


def test_get_and_contains():
    annotations = Annotations()
    annotations.put(7, "seven")
    assert annotations.get(7) == SimpleValue.of("seven")
    assert annotations.get(AnnotationKey.of(7)) == SimpleValue.of("seven")
    assert annotations.get("missing", "fallback") == "fallback"
    assert "missing" not in annotations
    assert 1.5 not in annotations
    assert 7 in annotations


def test_long_key_is_distinct_from_ulong_key():
    annotations = Annotations()
    annotations.put(AnnotationKey.long(100_000), SimpleValue(AmqpType.LONG, 100_000))
    assert annotations[AnnotationKey.long(100_000)] == SimpleValue(AmqpType.LONG, 100_000)
    assert annotations.get(100_000) is None


def test_annotations_round_trip():
    annotations = Annotations()
    values = AmqpList()
    values.push(1)
    values.push("test")
    annotations.put("test", 1)
    annotations.put("".join(str(idx) for idx in range(300)), 1)
    annotations.put(1, "test")
    annotations.put(1000, "test")
    annotations.put("list", values)

    data = _encode(annotations)
    reader = Reader(data)
    decoded = Annotations.decode(reader)

    assert reader.at_end()
    assert decoded == annotations
    assert annotations.encoded_size() == len(data)
    assert decoded["list"] == values


def test_annotations_decode_rejects_list():
    data = _encode(AmqpList([1, 2]))
    with pytest.raises(InvalidTypeCodeForError):
        Annotations.decode(Reader(data))


def test_application_properties_insert():
    props = ApplicationProperties()
    assert props.insert("test", "test") is None
    assert props.insert("test", 5) == SimpleValue.of("test")
    assert props["test"] == SimpleValue.of(5)


def test_application_properties_rejects_non_str_key():
    props = ApplicationProperties()
    with pytest.raises(TypeError):
        props.insert(1, "x")


def test_application_properties_round_trip():
    props = ApplicationProperties({"a": "b", "n": 3, "flag": True, "none": None})
    data = _encode(props)
    reader = Reader(data)
    decoded = ApplicationProperties.decode(reader)
    assert reader.at_end()
    assert decoded == props
    assert props.encoded_size() == len(data)
    assert decoded["none"].is_null


def test_application_properties_large_uses_map32():
    props = ApplicationProperties({"k" * 900: "v" * 900})
    data = _encode(props)
    assert data[0] == TypeCode.MAP32
    decoded = ApplicationProperties.decode(Reader(data))
    assert decoded == props
    assert props.encoded_size() == len(data)


def test_application_properties_rejects_symbol_keys():
    annotations = Annotations()
    annotations.put("key", "value")
    with pytest.raises(InvalidTypeCodeForError):
        ApplicationProperties.decode(Reader(_encode(annotations)))