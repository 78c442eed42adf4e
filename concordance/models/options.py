"""
Reader option models.

Pure data classes describing how a DAT file is read.
No parsing logic - only option definitions and clamping.
"""

from dataclasses import dataclass, replace
from enum import Enum

from ..common.constants import (
    DEFAULT_BUFFER_CHARS,
    DEFAULT_FILE_BUFFER_BYTES,
    MAX_BUFFER_CHARS,
    MIN_BUFFER_CHARS,
)


class EmptyField(Enum):
    """How zero-length field values appear in a record."""
    NULL = "null"   # key present, value None
    KEEP = "keep"   # key present, value ""
    OMIT = "omit"   # key left out of the record


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


@dataclass(frozen=True)
class DatFileOptions:
    """
    Options for reading Concordance DAT files.

    Attributes:
        reader_buffer_chars: Size of the decode buffer, in characters
        parse_chunk_chars: Maximum characters handed to the tokenizer at once
        empty_field: Empty-field policy applied to every field of every record
        file_buffer_bytes: OS buffer size used when a path is opened
    """
    reader_buffer_chars: int = DEFAULT_BUFFER_CHARS
    parse_chunk_chars: int = DEFAULT_BUFFER_CHARS
    empty_field: EmptyField = EmptyField.NULL
    file_buffer_bytes: int = DEFAULT_FILE_BUFFER_BYTES

    def clamped(self) -> "DatFileOptions":
        """Return a copy with both buffer sizes clamped to [4 KiB, 1 MiB]."""
        return replace(
            self,
            reader_buffer_chars=_clamp(self.reader_buffer_chars, MIN_BUFFER_CHARS, MAX_BUFFER_CHARS),
            parse_chunk_chars=_clamp(self.parse_chunk_chars, MIN_BUFFER_CHARS, MAX_BUFFER_CHARS),
        )


DEFAULT_OPTIONS = DatFileOptions()
