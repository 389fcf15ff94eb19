"""Exceptions raised while encoding and decoding AMQP 1.0 data."""


class AmqpEncodeError(Exception):
    """Raised when a value cannot be written."""


class AmqpDecodeError(Exception):
    """Base class of every decoding failure."""


class IncompleteError(AmqpDecodeError):
    """The input ended before a complete value could be read."""

    def __init__(self, needed: int) -> None:
        super().__init__(f"incomplete input: {needed} more byte(s) needed")
        self.needed = needed


class InvalidTypeCodeError(AmqpDecodeError):
    """A byte was read that is not a known AMQP type code."""

    def __init__(self, code: int) -> None:
        super().__init__(f"invalid type code 0x{code:02x}")
        self.code = code


class InvalidTypeCodeForError(AmqpDecodeError):
    """A known type code was found where a different type was expected."""

    def __init__(self, target: str, code) -> None:
        name = getattr(code, "name", code)
        super().__init__(f"invalid type code {name} for {target}")
        self.target = target
        self.code = code


class MessageParseError(AmqpDecodeError):
    """The input is well formed bytes but not a valid message."""