"""
Concordance DAT reading and writing.

Modules:
    encoding   - detect_encoding for UTF-8 / UTF-16 LE / UTF-16 BE streams
    buffers    - BufferPool and chunked incremental decoding
    tokenizer  - RecordTokenizer state machine
    reader     - read, get_header, get_count
    writer     - write, write_file
    splitter   - split_dat into numbered part files
    errors     - Error types
"""

from .cancellation import CancellationToken
from .encoding import detect_encoding
from .errors import (
    DatError,
    DatFormatError,
    EmptyOrInvalidHeaderError,
    EncodingSignatureError,
    FieldCountMismatchError,
    OperationCancelled,
)
from .reader import get_count, get_header, read
from .splitter import split_dat
from .tokenizer import ParseState, RecordTokenizer, tokenize
from .writer import write, write_file

__all__ = [
    # Reading
    'read',
    'get_header',
    'get_count',
    'detect_encoding',
    # Writing
    'write',
    'write_file',
    'split_dat',
    # Tokenizer
    'RecordTokenizer',
    'ParseState',
    'tokenize',
    # Cancellation
    'CancellationToken',
    # Errors
    'DatError',
    'DatFormatError',
    'EncodingSignatureError',
    'FieldCountMismatchError',
    'EmptyOrInvalidHeaderError',
    'OperationCancelled',
]
