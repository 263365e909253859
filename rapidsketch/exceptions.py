"""Errors raised by the sketch engine."""


class SketchError(Exception):
    """Base class for all sketch engine errors."""


class InvalidReference(SketchError, IndexError):
    """A curve id or endpoint reference does not name an existing endpoint."""


class MalformedDocument(SketchError, ValueError):
    """Serialized sketch text could not be parsed."""

    def __init__(self, message: str, line_number: int = 0):
        if line_number:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
