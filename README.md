# streamamqp

Encoding and decoding of AMQP 1.0 messages as carried by a stream protocol.
The package covers the AMQP type system (primitive values, lists, maps,
described values, symbols), the standard message sections (header,
delivery and message annotations, properties, application properties, body
and footer), and a small fluent builder for composing outbound messages.
It has no runtime dependencies.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Building a message

```python
from streamamqp.message import Message

message = (
    Message.builder()
    .body(b"hello")
    .properties()
        .message_id("order-42")
        .subject("orders")
        .content_type("text/plain")
        .message_builder()
    .application_properties()
        .insert("region", "eu")
        .message_builder()
    .message_annotations()
        .insert("x-priority", 5)
        .message_builder()
    .publishing_id(1)
    .build()
)

payload = message.to_bytes()
assert len(payload) == message.encoded_size()
```

`build()` takes a copy, so further changes through the builder do not alter
messages already built.

## Decoding a message

```python
from streamamqp.message import Message

decoded = Message.decode(payload)
assert decoded.data() == b"hello"
assert decoded.properties().subject == "orders"
assert decoded.application_properties()["region"].value == "eu"
```

`Message.decode` reads sections until the input is exhausted and returns
the message; a decoded message carries no publishing id. Malformed input
raises a subclass of `streamamqp.errors.AmqpDecodeError`:
`IncompleteError` when the input ends early, `InvalidTypeCodeError` for an
unknown format code, `InvalidTypeCodeForError` when a known code appears
where it is not allowed, and `MessageParseError` for other structural
problems such as an unknown section descriptor or invalid UTF-8.

## Lower-level pieces

- `streamamqp.codec` holds `TypeCode`, the AMQP format codes, and `Reader`,
  a cursor over a byte string with big-endian readers.
- `streamamqp.symbol.Symbol` is the AMQP symbol type.
- `streamamqp.primitives` has `AmqpType`, the primitive types with their
  encoders and decoders, and `SimpleValue`, a primitive value tagged with
  its type (`SimpleValue.of` picks the type for a plain Python value).
- `streamamqp.values` has `Descriptor`, `DescribedValue`, `AmqpList`,
  `AmqpMap`, and `to_value` / `encode_value` / `decode_value` for any AMQP
  value.
- `streamamqp.annotations` has `AnnotationKey`, `Annotations` (used for
  delivery annotations, message annotations and the footer) and
  `ApplicationProperties`.
- `streamamqp.header.Header`, `streamamqp.properties.Properties` (with
  `MessageId`) and `streamamqp.body.MessageBody` are the individual
  sections; `streamamqp.section.decode_section` reads any one of them.
- `streamamqp.amqp_message.AmqpMessage` is the full section-by-section
  message model, with `to_bytes` and `from_bytes`.
  `streamamqp.message.Message` wraps it together with an optional
  publishing id.
- `streamamqp.protocol` lists the stream protocol command keys (`Command`),
  server response codes (`ResponseCode`) and `PROTOCOL_VERSION`.

## What it does not do

This is a message codec only. It opens no connections, speaks no part of
the stream protocol on the wire and has no client, publisher or consumer.
`Command` and `ResponseCode` are plain enumerations; there is no encoding
of request or response frames. AMQP arrays are not supported: decoding one
raises `InvalidTypeCodeForError`.