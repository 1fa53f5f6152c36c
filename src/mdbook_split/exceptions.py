"""Custom exceptions for mdbook-split."""


class MdbookSplitError(Exception):
    """Base exception for all mdbook-split errors."""

    exit_code: int = 1
    default_hint: str | None = None

    def __init__(
        self,
        message: str,
        details: str | None = None,
        hint: str | None = None,
    ):
        self.message = message
        self.details = details
        self.hint = hint or self.default_hint
        super().__init__(message)


# Host protocol errors (10-19)
class ProtocolError(MdbookSplitError):
    """The preprocessor input does not match the mdBook schema."""

    exit_code = 10
    default_hint = "mdbook-split must be run by mdbook as a preprocessor"


class InvalidInputError(ProtocolError):
    """Input could not be decoded as JSON at all."""

    exit_code = 11
    default_hint = "Expected a JSON array of [context, book] on stdin"


# Rendering errors (20-29)
class SerializationError(MdbookSplitError):
    """An event sequence could not be written back to markdown."""

    exit_code = 20


# Configuration errors (30-39)
class ConfigError(MdbookSplitError):
    """Configuration error."""

    exit_code = 30


class UnknownExtensionError(ConfigError):
    """A markdown extension name is not recognised."""

    exit_code = 31
    default_hint = (
        "Valid extensions: footnotes, smart_punctuation, tables, strikethrough, tasklists"
    )
