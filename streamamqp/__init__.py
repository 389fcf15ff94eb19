"""AMQP 1.0 message codec and builder for stream protocol clients."""

__version__ = "0.1.0"