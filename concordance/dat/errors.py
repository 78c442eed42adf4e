"""
DAT error types.

Malformed input raises a DatFormatError subclass (also a ValueError).
Cancellation raises OperationCancelled, which is not a format error.
"""

from typing import Optional


class DatError(Exception):
    """Base class for all Concordance DAT errors."""


class DatFormatError(DatError, ValueError):
    """Input is not a valid Concordance DAT payload."""


class EncodingSignatureError(DatFormatError):
    """The stream does not start with the quote character under any supported encoding."""


class EmptyOrInvalidHeaderError(DatFormatError):
    """No header record could be read before the end of the stream."""

    def __init__(self, message: str = "Empty or invalid Concordance DAT. Header row not found."):
        super().__init__(message)


class FieldCountMismatchError(DatFormatError):
    """A data record has a different number of fields than the header."""

    def __init__(self, actual: int, expected: int, row: Optional[int] = None):
        self.actual = actual
        self.expected = expected
        self.row = row
        where = f" in row {row}" if row is not None else ""
        super().__init__(
            f"Invalid field count{where}: got {actual}, expected {expected}. "
            "Each record must match the header column count and end with a line break."
        )


class OperationCancelled(DatError):
    """A read or write was cancelled through its CancellationToken."""
