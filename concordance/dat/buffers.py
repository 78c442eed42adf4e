"""
Buffer pool and chunked decoding.

Raw bytes are read into a bytearray rented from a shared pool, decoded
incrementally and handed to the tokenizer in chunks of bounded size.
The rented buffer goes back to the pool when the chunk generator finishes,
fails, or is closed early.
"""

import codecs
import threading
from contextlib import contextmanager
from typing import BinaryIO, Dict, Iterator, List, Optional

from .cancellation import CancellationToken, check
from .encoding import CODE_UNIT_BYTES


class BufferPool:
    """
    Thread-safe pool of reusable bytearrays.

    A rented buffer is owned by exactly one parse until it is returned.
    Buffers are bucketed by exact size; at most max_per_size idle
    buffers are kept for each size.
    """

    def __init__(self, max_per_size: int = 4):
        self.max_per_size = max_per_size
        self._free: Dict[int, List[bytearray]] = {}
        self._lock = threading.Lock()

    def rent(self, size: int) -> bytearray:
        with self._lock:
            bucket = self._free.get(size)
            if bucket:
                return bucket.pop()
        return bytearray(size)

    def give_back(self, buffer: bytearray) -> None:
        with self._lock:
            bucket = self._free.setdefault(len(buffer), [])
            if len(bucket) < self.max_per_size:
                bucket.append(buffer)

    def idle_count(self, size: Optional[int] = None) -> int:
        """Number of idle buffers (of one size, or in total)."""
        with self._lock:
            if size is not None:
                return len(self._free.get(size, []))
            return sum(len(b) for b in self._free.values())

    @contextmanager
    def rented(self, size: int) -> Iterator[bytearray]:
        buffer = self.rent(size)
        try:
            yield buffer
        finally:
            self.give_back(buffer)


SHARED_POOL = BufferPool()


def iter_chunks(
    stream: BinaryIO,
    encoding: str,
    reader_buffer_chars: int,
    parse_chunk_chars: int,
    cancel_token: Optional[CancellationToken] = None,
    pool: Optional[BufferPool] = None,
) -> Iterator[str]:
    """
    Decode a binary stream into text chunks.

    Args:
        stream: Binary stream positioned at the first content byte
        encoding: Codec returned by detect_encoding
        reader_buffer_chars: Decode buffer size in characters
        parse_chunk_chars: Maximum length of each yielded chunk
        cancel_token: Optional CancellationToken, checked before every read
        pool: Pool the raw read buffer is rented from (default: SHARED_POOL)

    Yields:
        Non-empty strings of at most parse_chunk_chars characters

    Raises:
        UnicodeDecodeError: On byte sequences invalid for the encoding
    """
    if pool is None:
        pool = SHARED_POOL
    decoder = codecs.getincrementaldecoder(encoding)(errors='strict')
    size = reader_buffer_chars * CODE_UNIT_BYTES.get(encoding, 1)

    with pool.rented(size) as buffer:
        while True:
            check(cancel_token)
            read = stream.readinto(buffer)
            if not read:
                break
            text = decoder.decode(buffer[:read])
            for start in range(0, len(text), parse_chunk_chars):
                yield text[start:start + parse_chunk_chars]

        tail = decoder.decode(b'', final=True)
        if tail:
            yield tail
