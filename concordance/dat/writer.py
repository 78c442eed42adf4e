"""
DAT Writer

Writes records in Concordance DAT format.

Every field is wrapped in the quote character, literal quotes are
doubled, fields are separated by DC4 and each record (header included)
ends with CRLF. Output is UTF-8 with a byte-order mark by default.
"""

import codecs
import logging
import os
from typing import Any, BinaryIO, Iterable, List, Mapping, Optional

from ..common.constants import CRLF, DEFAULT_WRITE_ENCODING, ESCAPED_QUOTE, QUOTE, SEPARATOR
from .cancellation import CancellationToken, check

logger = logging.getLogger(__name__)

_FIELD_JOIN = QUOTE + SEPARATOR + QUOTE


def escape_field(value: Any) -> str:
    """
    Convert a value to field text with literal quotes doubled.

    None becomes an empty field; other non-string values use str().
    """
    if value is None:
        return ''
    text = value if isinstance(value, str) else str(value)
    if QUOTE in text:
        text = text.replace(QUOTE, ESCAPED_QUOTE)
    return text


def format_record(values: Iterable[Any]) -> str:
    """Format one record as a quoted, DC4-separated, CRLF-terminated line."""
    return QUOTE + _FIELD_JOIN.join(escape_field(v) for v in values) + QUOTE + CRLF


def _lookup(record: Mapping[str, Any], key: str) -> Any:
    return record.get(key, '')


def write(
    stream: BinaryIO,
    records: Iterable[Mapping[str, Any]],
    encoding: str = DEFAULT_WRITE_ENCODING,
    cancel_token: Optional[CancellationToken] = None,
) -> int:
    """
    Write records to a binary stream.

    The key order of the first record defines the columns. A key missing
    from a later record is written as an empty field; keys not in the
    header are ignored. Nothing is written for an empty iterable.

    Args:
        stream: Writable binary stream
        records: Mappings of header name to value
        encoding: Output codec (default: utf-8-sig, UTF-8 with BOM)
        cancel_token: Optional CancellationToken, checked before each record

    Returns:
        Number of data rows written (header excluded)
    """
    encoder = codecs.getincrementalencoder(encoding)()
    header: Optional[List[str]] = None
    rows = 0

    for record in records:
        check(cancel_token)
        if header is None:
            header = list(record.keys())
            stream.write(encoder.encode(format_record(header)))
        stream.write(encoder.encode(format_record(_lookup(record, key) for key in header)))
        rows += 1

    logger.debug("Wrote %d rows", rows)
    return rows


def write_file(
    path: str | os.PathLike,
    records: Iterable[Mapping[str, Any]],
    encoding: str = DEFAULT_WRITE_ENCODING,
    cancel_token: Optional[CancellationToken] = None,
) -> int:
    """
    Write records to a DAT file, creating parent directories.

    Returns:
        Number of data rows written
    """
    os.makedirs(os.path.dirname(os.fspath(path)) or '.', exist_ok=True)

    with open(path, 'wb') as f:
        return write(f, records, encoding=encoding, cancel_token=cancel_token)
