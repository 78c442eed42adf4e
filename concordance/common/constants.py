"""
Concordance DAT format constants.

Single source of truth for the delimiter characters used by the reader
and the writer.
"""

# Field separator (DC4 control character)
SEPARATOR = "\x14"

# Field qualifier, U+00FE LATIN SMALL LETTER THORN
QUOTE = "\xfe"

# A literal quote inside a field is written twice
ESCAPED_QUOTE = QUOTE + QUOTE

CR = "\r"
LF = "\n"
CRLF = CR + LF

# Bounds applied to the reader and parse chunk sizes (characters)
MIN_BUFFER_CHARS = 4 * 1024
MAX_BUFFER_CHARS = 1024 * 1024

DEFAULT_BUFFER_CHARS = 128 * 1024
DEFAULT_FILE_BUFFER_BYTES = 1 << 20

# Header peek only needs one record
HEADER_BUFFER_CHARS = 8 * 1024

DEFAULT_WRITE_ENCODING = "utf-8-sig"
