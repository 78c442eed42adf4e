"""
Encoding Detection

Identifies the text encoding of a DAT stream from its first bytes.

A Concordance DAT file always starts with the quote character U+00FE,
optionally preceded by a byte-order mark. Supported encodings:
- UTF-8      BOM EF BB BF, quote C3 BE
- UTF-16 LE  BOM FF FE,    quote FE 00
- UTF-16 BE  BOM FE FF,    quote 00 FE
"""

import logging
from typing import BinaryIO

from .errors import EncodingSignatureError

logger = logging.getLogger(__name__)

UTF8 = 'utf-8'
UTF16_LE = 'utf-16-le'
UTF16_BE = 'utf-16-be'

# (codec, byte-order mark, encoded quote character)
_SIGNATURES = [
    (UTF16_LE, b'\xff\xfe', b'\xfe\x00'),
    (UTF16_BE, b'\xfe\xff', b'\x00\xfe'),
    (UTF8, b'\xef\xbb\xbf', b'\xc3\xbe'),
]

_PROBE_BYTES = 6

# Bytes per code unit, used to size raw reads
CODE_UNIT_BYTES = {UTF8: 1, UTF16_LE: 2, UTF16_BE: 2}

_LABELS = {UTF8: 'UTF-8', UTF16_LE: 'UTF-16 LE', UTF16_BE: 'UTF-16 BE'}


def detect_encoding(stream: BinaryIO) -> str:
    """
    Detect the encoding of a DAT stream and skip its byte-order mark.

    Reads at most 6 bytes from the current position. On return the stream
    is positioned after the BOM, or back at the original position when
    there is no BOM.

    Args:
        stream: Readable, seekable binary stream

    Returns:
        Python codec name: 'utf-8', 'utf-16-le' or 'utf-16-be'

    Raises:
        ValueError: If the stream is not seekable
        EncodingSignatureError: If the stream does not begin with U+00FE
            (after an optional BOM) in a supported encoding
    """
    if not stream.seekable():
        raise ValueError("Stream must be seekable for encoding detection.")

    start = stream.tell()
    head = stream.read(_PROBE_BYTES) or b''

    for codec, bom, quote in _SIGNATURES:
        if not head.startswith(bom):
            continue
        # Only verify the quote when enough bytes were read to hold it
        after = head[len(bom):len(bom) + len(quote)]
        if len(after) == len(quote) and after != quote:
            raise EncodingSignatureError(
                f"Invalid Concordance DAT: expected U+00FE after {_LABELS[codec]} BOM."
            )
        stream.seek(start + len(bom))
        logger.debug("Detected %s with byte-order mark", codec)
        return codec

    stream.seek(start)

    for codec, _bom, quote in _SIGNATURES:
        if head.startswith(quote):
            logger.debug("Detected %s without byte-order mark", codec)
            return codec

    raise EncodingSignatureError(
        "Invalid Concordance DAT. After an optional BOM, the file must begin with the "
        "quote character U+00FE. The detected byte pattern does not match UTF-8 or "
        "UTF-16 (LE/BE) with U+00FE at the start."
    )
