"""Error types raised by the preference engine."""

from typing import Optional


class StockMatchError(Exception):
    """Base class for all engine errors."""


class CandidateValidationError(StockMatchError, ValueError):
    """A candidate record violates one of its field invariants."""


class CandidateParseError(StockMatchError, ValueError):
    """A numeric field could not be parsed. Aborts the whole load."""

    def __init__(self, field: str, value: Optional[str], line_number: Optional[int] = None):
        self.field = field
        self.value = value
        self.line_number = line_number
        location = f" on line {line_number}" if line_number is not None else ""
        super().__init__(f"Invalid number for {field}{location}: {value!r}")


class RowShapeError(StockMatchError):
    """A row has a different column count than the header. The row is skipped."""

    def __init__(self, line_number: int, expected: int, actual: int):
        self.line_number = line_number
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Line {line_number}: expected {expected} columns, got {actual}"
        )


class FeatureDimensionError(StockMatchError, ValueError):
    """Feature vectors, weights or embeddings disagree on their length."""


class SessionStateError(StockMatchError, RuntimeError):
    """An operation was attempted in a session state that does not allow it."""


class CandidateFileError(StockMatchError):
    """The candidate file could not be decoded or tokenized. Aborts the whole load."""

    def __init__(self, reason: str, path: Optional[str] = None, line_number: Optional[int] = None):
        self.reason = reason
        self.path = path
        self.line_number = line_number
        location = ""
        if path is not None:
            location += f" {path}"
        if line_number is not None:
            location += f" line {line_number}"
        super().__init__(f"Unreadable candidate file{location}: {reason}")
