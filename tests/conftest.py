"""Shared test fixtures."""

import io

import pytest

from concordance.dat.buffers import BufferPool

QUOTE = "\xfe"
SEP = "\x14"

# Header plus three rows: multi-line text, an escaped quote, an empty field
SAMPLE_TEXT = (
    "þBEGDOCþ\x14þENDDOCþ\x14þTEXTþ\r\n"
    "þABC0001þ\x14þABC0002þ\x14þline1\r\nline2þ\r\n"
    "þABC0003þ\x14þABC0003þ\x14þsays þþhiþþþ\r\n"
    "þABC0004þ\x14þþ\x14þlastþ\r\n"
)


def _line(*fields, terminator="\r\n"):
    escaped = [f.replace(QUOTE, QUOTE * 2) for f in fields]
    return QUOTE + (QUOTE + SEP + QUOTE).join(escaped) + QUOTE + terminator


def _stream(text, encoding="utf-8", bom=False):
    data = text.encode(encoding)
    if bom:
        data = {
            "utf-8": b"\xef\xbb\xbf",
            "utf-16-le": b"\xff\xfe",
            "utf-16-be": b"\xfe\xff",
        }[encoding] + data
    return io.BytesIO(data)


@pytest.fixture
def dat_line():
    """Build one DAT record line from field values (quotes escaped)."""
    return _line


@pytest.fixture
def dat_stream():
    """Build a BytesIO from DAT text in the given encoding, optionally with BOM."""
    return _stream


@pytest.fixture
def sample_text():
    return SAMPLE_TEXT


@pytest.fixture
def sample_dat_file(tmp_path):
    """SAMPLE_TEXT written as UTF-8 with BOM."""
    path = tmp_path / "export.dat"
    path.write_bytes(SAMPLE_TEXT.encode("utf-8-sig"))
    return path


@pytest.fixture
def make_dat_file(tmp_path):
    """Write a DAT file with a header and n numbered rows."""
    def _make(rows, name="export.dat", columns=("ID", "NAME")):
        lines = [_line(*columns)]
        for i in range(1, rows + 1):
            lines.append(_line(str(i), f"name {i}"))
        path = tmp_path / name
        path.write_bytes("".join(lines).encode("utf-8-sig"))
        return path
    return _make


@pytest.fixture
def shared_pool(monkeypatch):
    """Fresh BufferPool installed as the pool readers rent from."""
    pool = BufferPool()
    monkeypatch.setattr("concordance.dat.buffers.SHARED_POOL", pool)
    return pool
