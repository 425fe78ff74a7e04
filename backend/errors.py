"""
Failure taxonomy for the natural-language parsing pipeline.

Every error carries an ErrorKind so the HTTP layer can report which stage
failed while still showing the user a single fixed message.
"""
from enum import Enum


class ErrorKind(str, Enum):
    PROVIDER = "provider"
    MALFORMED_RESPONSE = "malformed_response"
    SHAPE = "shape"
    MISSING_FIELD = "missing_field"


class TaskParseError(Exception):
    kind: ErrorKind

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ProviderError(TaskParseError):
    """The LLM call failed, timed out, or came back empty/blocked."""
    kind = ErrorKind.PROVIDER


class MalformedResponseError(TaskParseError):
    """Provider text was not valid JSON after fence-stripping."""
    kind = ErrorKind.MALFORMED_RESPONSE


class ShapeError(TaskParseError):
    """Transcript response was not a JSON array."""
    kind = ErrorKind.SHAPE


class MissingFieldError(TaskParseError):
    """A transcript task lacks name, assignee or dueDate."""
    kind = ErrorKind.MISSING_FIELD
