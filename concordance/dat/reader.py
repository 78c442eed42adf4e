"""
DAT Reader

Streams Concordance DAT files as records.

Three ways to consume a file, all built on the same RecordTokenizer:
- read()        - one DatRecord per data row (header row is not yielded)
- get_header()  - header field names only, stops after the first record
- get_count()   - header and number of data rows, without keeping field text

Every function accepts a path (opened and closed here) or a readable,
seekable binary stream (left open for the caller).
"""

from __future__ import annotations

import logging
import os
from contextlib import closing, contextmanager
from typing import BinaryIO, Callable, Iterator, List, Optional, Sequence, Tuple, Union

from ..common.constants import HEADER_BUFFER_CHARS
from ..models import DEFAULT_OPTIONS, DatFileOptions, DatRecord, EmptyField
from .buffers import iter_chunks
from .cancellation import CancellationToken
from .encoding import detect_encoding
from .errors import EmptyOrInvalidHeaderError, FieldCountMismatchError
from .tokenizer import Header, RecordTokenizer

logger = logging.getLogger(__name__)

Source = Union[str, os.PathLike, BinaryIO]

# progress(header, rows_so_far) -> rows until the next call (None means 1)
ProgressCallback = Callable[[Header, int], Optional[int]]


@contextmanager
def open_source(source: Source, file_buffer_bytes: int = DEFAULT_OPTIONS.file_buffer_bytes) -> Iterator[BinaryIO]:
    """
    Yield a binary stream for source.

    Paths are opened for reading and closed on exit. Streams are checked
    for readability and left open.
    """
    if isinstance(source, (str, os.PathLike)):
        if not os.fspath(source):
            raise ValueError("Path must not be empty.")
        with open(source, 'rb', buffering=file_buffer_bytes) as f:
            yield f
        return

    if source is None:
        raise TypeError("source must be a path or a binary stream, not None")
    if not source.readable():
        raise ValueError("Stream must be readable.")
    yield source


def project_record(
    header: Sequence[str],
    fields: List[Optional[str]],
    empty_field: EmptyField = EmptyField.NULL,
    row: Optional[int] = None,
) -> DatRecord:
    """
    Build a DatRecord from header names and field values.

    Args:
        header: Header field names
        fields: Field values, same length as header
        empty_field: Policy for zero-length values
        row: 1-based data row number, used in error messages

    Returns:
        DatRecord in header order; a later duplicate header name
        overwrites an earlier one

    Raises:
        FieldCountMismatchError: If the field count differs from the header
    """
    if len(fields) != len(header):
        raise FieldCountMismatchError(len(fields), len(header), row)

    record = DatRecord()
    for key, value in zip(header, fields):
        if value:
            record[key] = value
        elif empty_field is EmptyField.KEEP:
            record[key] = ''
        elif empty_field is EmptyField.NULL:
            record[key] = None
    return record


def read(
    source: Source,
    options: Optional[DatFileOptions] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> Iterator[DatRecord]:
    """
    Stream data records from a Concordance DAT file.

    The file is read lazily: nothing is opened until iteration starts,
    and errors are raised from the iteration step that detects them.

    Args:
        source: Path or readable, seekable binary stream
        options: Reader options (clamped before use)
        cancel_token: Optional CancellationToken

    Yields:
        DatRecord per data row, keys from the header (case-insensitive)

    Raises:
        EncodingSignatureError: If the file does not start with U+00FE
        FieldCountMismatchError: If a row has a different field count than the header
        OperationCancelled: If cancel_token is cancelled
    """
    opts = (options or DEFAULT_OPTIONS).clamped()

    with open_source(source, opts.file_buffer_bytes) as stream:
        encoding = detect_encoding(stream)
        chunks = iter_chunks(
            stream, encoding, opts.reader_buffer_chars, opts.parse_chunk_chars, cancel_token
        )
        with closing(chunks):
            tokenizer = RecordTokenizer(chunks, cancel_token=cancel_token)
            records = tokenizer.iter_records(
                on_header=lambda header: logger.debug("Header has %d fields", len(header))
            )
            for row, fields in enumerate(records, start=1):
                yield project_record(tokenizer.header, fields, opts.empty_field, row)


def get_header(source: Source, cancel_token: Optional[CancellationToken] = None) -> Header:
    """
    Read only the header row.

    Uses small fixed buffers; parsing stops at the end of the first record.

    Returns:
        Tuple of header field names

    Raises:
        EncodingSignatureError: If the file does not start with U+00FE
        EmptyOrInvalidHeaderError: If the stream has no header record
    """
    with open_source(source, DEFAULT_OPTIONS.file_buffer_bytes) as stream:
        encoding = detect_encoding(stream)
        chunks = iter_chunks(stream, encoding, HEADER_BUFFER_CHARS, HEADER_BUFFER_CHARS, cancel_token)
        with closing(chunks):
            header = RecordTokenizer(chunks, cancel_token=cancel_token).read_header()

    if header is None:
        raise EmptyOrInvalidHeaderError()
    return header


class _ProgressReporter:
    """Calls the progress callback at the intervals it asks for."""

    def __init__(self, callback: Optional[ProgressCallback]):
        self.callback = callback
        self.next_update = 1
        self.last_reported = 0

    def report(self, header: Header, rows: int) -> None:
        if self.callback is None:
            return
        interval = self.callback(header, rows)
        self.last_reported = rows
        self.next_update = rows + max(1, int(interval) if interval is not None else 1)

    def row_counted(self, header: Header, rows: int) -> None:
        if rows >= self.next_update:
            self.report(header, rows)

    def finish(self, header: Header, rows: int) -> None:
        if rows > self.last_reported:
            self.report(header, rows)


def get_count(
    source: Source,
    progress: Optional[ProgressCallback] = None,
    options: Optional[DatFileOptions] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> Tuple[Header, int]:
    """
    Count data rows without materializing them.

    Field text after the header is discarded; only field counts and
    record boundaries are tracked.

    Args:
        source: Path or readable, seekable binary stream
        progress: Optional callback progress(header, rows). Called with 0
                  as soon as the header is read, then each time the
                  requested number of rows has been counted, and once more
                  at the end if rows were counted since the last call.
                  Returns the number of rows until the next call (min 1).
        options: Reader options (empty_field is ignored)
        cancel_token: Optional CancellationToken

    Returns:
        (header, row_count)

    Raises:
        EmptyOrInvalidHeaderError: If the stream has no header record
        FieldCountMismatchError: If a row has a different field count than the header
    """
    opts = (options or DEFAULT_OPTIONS).clamped()
    reporter = _ProgressReporter(progress)
    rows = 0

    with open_source(source, opts.file_buffer_bytes) as stream:
        encoding = detect_encoding(stream)
        chunks = iter_chunks(
            stream, encoding, opts.reader_buffer_chars, opts.parse_chunk_chars, cancel_token
        )
        with closing(chunks):
            tokenizer = RecordTokenizer(chunks, keep_text=False, cancel_token=cancel_token)
            for fields in tokenizer.iter_records(on_header=lambda header: reporter.report(header, 0)):
                rows += 1
                header = tokenizer.header
                if len(fields) != len(header):
                    raise FieldCountMismatchError(len(fields), len(header), rows)
                reporter.row_counted(header, rows)

    header = tokenizer.header
    if header is None:
        raise EmptyOrInvalidHeaderError()

    reporter.finish(header, rows)
    logger.debug("Counted %d rows with %d fields", rows, len(header))
    return header, rows
