"""Tests for concordance/dat/encoding.py"""

import io

import pytest

from concordance.dat.encoding import UTF16_BE, UTF16_LE, UTF8, detect_encoding
from concordance.dat.errors import DatFormatError, EncodingSignatureError


class _Unseekable(io.RawIOBase):
    def readable(self):
        return True

    def seekable(self):
        return False


class TestWithByteOrderMark:
    def test_utf16_le_bom(self):
        stream = io.BytesIO(b"\xff\xfe\xfe\x00A\x00")
        assert detect_encoding(stream) == UTF16_LE
        assert stream.tell() == 2

    def test_utf16_be_bom(self):
        stream = io.BytesIO(b"\xfe\xff\x00\xfe\x00A")
        assert detect_encoding(stream) == UTF16_BE
        assert stream.tell() == 2

    def test_utf8_bom(self):
        stream = io.BytesIO(b"\xef\xbb\xbf\xc3\xbeA")
        assert detect_encoding(stream) == UTF8
        assert stream.tell() == 3

    def test_utf8_bom_without_quote_fails(self):
        with pytest.raises(EncodingSignatureError, match="UTF-8 BOM"):
            detect_encoding(io.BytesIO(b"\xef\xbb\xbfID,NAME"))

    def test_utf16_le_bom_without_quote_fails(self):
        with pytest.raises(EncodingSignatureError, match="UTF-16 LE BOM"):
            detect_encoding(io.BytesIO(b"\xff\xfeI\x00D\x00"))

    def test_utf16_be_bom_without_quote_fails(self):
        with pytest.raises(EncodingSignatureError):
            detect_encoding(io.BytesIO(b"\xfe\xff\x00I\x00D"))

    def test_bom_only_is_accepted(self):
        stream = io.BytesIO(b"\xef\xbb\xbf")
        assert detect_encoding(stream) == UTF8
        assert stream.tell() == 3


class TestWithoutByteOrderMark:
    @pytest.mark.parametrize("data, codec", [
        (b"\xc3\xbeID\xc3\xbe", UTF8),
        (b"\xfe\x00I\x00D\x00", UTF16_LE),
        (b"\x00\xfe\x00I\x00D", UTF16_BE),
    ])
    def test_detects_and_keeps_position(self, data, codec):
        stream = io.BytesIO(data)
        assert detect_encoding(stream) == codec
        assert stream.tell() == 0

    def test_starts_from_current_position(self):
        stream = io.BytesIO(b"junk\xc3\xbeID")
        stream.seek(4)
        assert detect_encoding(stream) == UTF8
        assert stream.tell() == 4

    def test_plain_csv_fails(self):
        with pytest.raises(EncodingSignatureError):
            detect_encoding(io.BytesIO(b"ID,NAME\r\n1,a\r\n"))

    def test_empty_stream_fails(self):
        with pytest.raises(EncodingSignatureError):
            detect_encoding(io.BytesIO(b""))

    def test_latin1_thorn_is_not_supported(self):
        with pytest.raises(EncodingSignatureError):
            detect_encoding(io.BytesIO("þIDþ".encode("latin-1")))

    def test_signature_error_is_format_error(self):
        assert issubclass(EncodingSignatureError, DatFormatError)
        assert issubclass(EncodingSignatureError, ValueError)


def test_unseekable_stream_rejected():
    with pytest.raises(ValueError, match="seekable"):
        detect_encoding(_Unseekable())
