"""
Exceptions raised while parsing and inspecting IGC logs.
"""

from typing import Any, Optional


class IGCError(Exception):
    """Base class for every error that makes a log unusable."""


class StructuralError(IGCError):
    """
    A line breaks the structure of the log: unknown record kind,
    misplaced or duplicated record, or a mandatory field that is missing.
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)


class UnsupportedRecordError(StructuralError):
    """The leading character of a line does not name a supported record kind."""

    def __init__(self, kind: str, line_number: int):
        self.kind = kind
        super().__init__(f"record kind '{kind}' is not supported", line_number)


class DuplicateRecordError(StructuralError):
    """A record that may appear only once was found a second time."""

    def __init__(self, kind: str, line_number: int, first_line_number: int):
        self.kind = kind
        self.first_line_number = first_line_number
        super().__init__(
            f"record '{kind}' already defined at line {first_line_number}",
            line_number
        )


class FieldValidationError(IGCError):
    """An extracted field value does not match its validation pattern."""

    def __init__(self, line_number: int, field_id: str, value: Any, reason: str = "invalid value"):
        self.line_number = line_number
        self.field_id = field_id
        self.value = value
        super().__init__(f"Line {line_number}: {reason} for field '{field_id}': {value!r}")


class EmptyInputError(IGCError):
    """The log holds no record at all."""


class MissingTrackError(IGCError):
    """The log holds no position fix to compare points against."""


class RecordRejected(Exception):
    """
    Raised by the fix admission hook when a fix is physically implausible.
    Always handled by the aggregate builder; never leaves a parse.
    """

    def __init__(self, reason: str, line_number: Optional[int] = None):
        self.reason = reason
        self.line_number = line_number
        super().__init__(reason)
