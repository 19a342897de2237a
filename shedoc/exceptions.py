"""Package-specific exception types."""

from __future__ import annotations


class ShedocError(Exception):
    """Base class for all shedoc errors."""


class ParseFileError(ShedocError):
    """Raised when a shell script cannot be opened or read.

    Malformed documentation never raises; it is reported as a warning on the
    parsed document instead.
    """


class ValueNotationError(ShedocError, ValueError):
    """Raised when a value notation such as ``<name>`` or ``[name=default]`` is malformed.

    Args:
        notation: The offending notation text.
        reason: Optional explanation appended to the message.
    """

    def __init__(self, notation: str, reason: str | None = None):
        self.notation = notation
        self.reason = reason
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        message = f"invalid value notation: {self.notation!r}"
        if self.reason:
            message += f" ({self.reason})"
        return message


class TagError(ShedocError, ValueError):
    """Raised when a documentation tag line cannot be parsed."""


class RenderError(ShedocError):
    """Raised when a document lacks what a formatter needs to render it."""


class UnknownFormatError(ShedocError, KeyError):
    """Raised when no formatter is registered under a format name.

    Args:
        name: Requested format name.
        available: Names of the registered formats.
    """

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(name)

    def __str__(self) -> str:
        return f"unknown format: {self.name!r}\navailable formats: {', '.join(self.available)}"


class ConfigError(ShedocError, ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`max_file_size` must be a positive integer")
    """
