"""Exceptions raised by kubegate converters."""


class ConversionError(Exception):
    """Base class for every rejection raised by a converter."""


class InvalidArgumentError(ConversionError, ValueError):
    """The object handed to a converter has a shape it cannot represent."""


class ReservedKeyError(ConversionError):
    """A custom annotation collides with a key owned by the gateway."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Custom config key {key!r} is reserved by the gateway")
