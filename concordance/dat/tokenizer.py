"""
Record tokenizer for Concordance DAT text.

Concordance DAT dialect:
- Separator: DC4 (0x14)
- Quote character: thorn (U+00FE), wraps every field
- Escape: doubled quote
- Record terminator: LF, CRLF, or a lone CR at the end of the stream
- CR and LF inside quotes are field content

The tokenizer is a streaming state machine fed with text chunks of any
size. State that depends on the next character (a CR that may start a
CRLF, a quote inside quotes that may start an escaped quote) is carried
across chunk boundaries, so the way the text is chunked never changes
the records produced.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from ..common.constants import CR, LF, QUOTE, SEPARATOR
from .cancellation import CancellationToken, check

# Characters that need a decision outside quotes; everything else is content
_SPECIAL = re.compile(f"[{QUOTE}{SEPARATOR}{CR}{LF}]")

Header = Tuple[str, ...]


class ParseState:
    """
    Mutable state of one parse.

    Holds the quote/CR flags, the fragments of the field being read, the
    fields of the record being read and the captured header. When
    keep_text is False, field text after the header is not stored; only
    field counts and whether a field had content are tracked.
    """

    def __init__(self, keep_text: bool = True) -> None:
        self.keep_text = keep_text
        self.in_quotes = False
        self.pending_cr = False
        self.pending_quote = False
        self.header: Optional[Header] = None
        self.fields: List[Optional[str]] = []
        self._parts: List[str] = []
        self._dirty = False

    @property
    def has_buffered(self) -> bool:
        """True when field content or finished fields are waiting for a terminator."""
        return self._dirty or bool(self.fields)

    def append(self, text: str) -> None:
        self._dirty = True
        if self.keep_text or self.header is None:
            self._parts.append(text)

    def end_field(self) -> None:
        if self.keep_text or self.header is None:
            self.fields.append(''.join(self._parts))
        else:
            self.fields.append(None)
        self._parts.clear()
        self._dirty = False

    def end_record(self) -> List[Optional[str]]:
        """Hand off the finished record and start a new one."""
        record = self.fields
        self.fields = []
        return record


class RecordTokenizer:
    """
    Turns text chunks into raw records.

    The first record becomes the header and is never yielded as data.

    Usage:
        tokenizer = RecordTokenizer(chunks)
        for fields in tokenizer.iter_records():
            ...
        tokenizer.header  # ('BEGDOC', 'ENDDOC', ...)
    """

    def __init__(
        self,
        chunks: Iterable[str],
        keep_text: bool = True,
        cancel_token: Optional[CancellationToken] = None,
    ) -> None:
        self.chunks = chunks
        self.cancel_token = cancel_token
        self.state = ParseState(keep_text=keep_text)

    @property
    def header(self) -> Optional[Header]:
        return self.state.header

    def read_header(self) -> Optional[Header]:
        """
        Parse only the first record and capture it as the header.

        Returns:
            The header, or None if the stream holds no record at all
        """
        if self.state.header is None:
            for fields in self._finalized():
                self.state.header = tuple(fields)
                break
        return self.state.header

    def iter_records(
        self,
        on_header: Optional[Callable[[Header], None]] = None,
    ) -> Iterator[List[Optional[str]]]:
        """
        Yield data records (lists of field values) in stream order.

        Args:
            on_header: Called once, as soon as the header is captured

        Yields:
            Field lists; values are None after the header when keep_text is False
        """
        for fields in self._finalized():
            if self.state.header is None:
                self.state.header = tuple(fields)
                if on_header is not None:
                    on_header(self.state.header)
                continue
            yield fields
            check(self.cancel_token)

    def _finalized(self) -> Iterator[List[Optional[str]]]:
        state = self.state
        for chunk in self.chunks:
            check(self.cancel_token)
            yield from self._scan(chunk)

        # End of stream
        if state.pending_quote:
            state.pending_quote = False
            state.in_quotes = False

        if state.pending_cr and not state.in_quotes:
            state.pending_cr = False
            state.end_field()
            yield state.end_record()

        if state.has_buffered:
            state.end_field()
            yield state.end_record()

    def _scan(self, chunk: str) -> Iterator[List[Optional[str]]]:
        state = self.state
        i = 0
        n = len(chunk)

        while i < n:
            if state.pending_cr:
                state.pending_cr = False
                if chunk[i] == LF and not state.in_quotes:
                    # CRLF terminator, the LF is consumed
                    i += 1
                    state.end_field()
                    yield state.end_record()
                    continue
                state.append(CR)

            if state.pending_quote:
                state.pending_quote = False
                if chunk[i] == QUOTE:
                    state.append(QUOTE)
                    i += 1
                    continue
                state.in_quotes = False

            if state.in_quotes:
                j = chunk.find(QUOTE, i)
                if j < 0:
                    state.append(chunk[i:])
                    break
                if j > i:
                    state.append(chunk[i:j])
                if j + 1 == n:
                    # Escaped quote or closing quote: decided by the next chunk
                    state.pending_quote = True
                    i = n
                elif chunk[j + 1] == QUOTE:
                    state.append(QUOTE)
                    i = j + 2
                else:
                    state.in_quotes = False
                    i = j + 1
                continue

            match = _SPECIAL.search(chunk, i)
            if match is None:
                state.append(chunk[i:])
                break
            j = match.start()
            if j > i:
                state.append(chunk[i:j])
            ch = chunk[j]
            i = j + 1

            if ch == QUOTE:
                state.in_quotes = True
            elif ch == SEPARATOR:
                state.end_field()
            elif ch == LF:
                state.end_field()
                yield state.end_record()
            else:
                # CR: terminator only if followed by LF or end of stream
                state.pending_cr = True


def tokenize(text: str, chunk_size: Optional[int] = None) -> List[List[str]]:
    """
    Tokenize decoded DAT text into raw records, header first.

    Mostly useful for tests and small payloads.

    Args:
        text: Decoded DAT text
        chunk_size: Split text into chunks of this size (default: one chunk)

    Returns:
        All records including the header row
    """
    if chunk_size:
        chunks = [text[i:i + chunk_size] for i in range(0, len(text), chunk_size)]
    else:
        chunks = [text]
    tokenizer = RecordTokenizer(chunks)
    records = list(tokenizer.iter_records())
    if tokenizer.header is None:
        return records
    return [list(tokenizer.header)] + records
