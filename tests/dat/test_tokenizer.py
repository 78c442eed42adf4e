"""Tests for concordance/dat/tokenizer.py"""

import pytest

from concordance.dat.tokenizer import ParseState, RecordTokenizer, tokenize


def chunked(text, size):
    return [text[i:i + size] for i in range(0, len(text), size)]


class TestParseState:
    def test_end_field_joins_fragments(self):
        state = ParseState()
        state.append("ab")
        state.append("cd")
        state.end_field()
        assert state.fields == ["abcd"]
        assert state.has_buffered

    def test_end_record_hands_off_fields(self):
        state = ParseState()
        state.append("x")
        state.end_field()
        record = state.end_record()
        assert record == ["x"]
        assert state.fields == []
        assert not state.has_buffered

    def test_discards_text_after_header_when_not_keeping(self):
        state = ParseState(keep_text=False)
        state.header = ("A",)
        state.append("value")
        assert state.has_buffered
        state.end_field()
        assert state.fields == [None]

    def test_keeps_header_text_when_not_keeping(self):
        state = ParseState(keep_text=False)
        state.append("A")
        state.end_field()
        assert state.fields == ["A"]


class TestTerminators:
    def test_lf(self):
        assert tokenize("þAþ\x14þBþ\nþ1þ\x14þ2þ\n") == [["A", "B"], ["1", "2"]]

    def test_crlf(self):
        assert tokenize("þAþ\x14þBþ\r\nþ1þ\x14þ2þ\r\n") == [["A", "B"], ["1", "2"]]

    def test_missing_final_terminator(self):
        assert tokenize("þAþ\x14þBþ\r\nþ1þ\x14þ2þ") == [["A", "B"], ["1", "2"]]

    def test_trailing_lone_cr(self):
        assert tokenize("þAþ\x14þBþ\r\nþ1þ\x14þ2þ\r") == [["A", "B"], ["1", "2"]]

    def test_cr_not_followed_by_lf_is_content(self):
        assert tokenize("þAþ\nx\ry\n") == [["A"], ["x\ry"]]

    def test_cr_then_quote_is_content(self):
        assert tokenize("þAþ\n\rþbþ\n") == [["A"], ["\rb"]]

    def test_empty_input(self):
        assert tokenize("") == []


class TestQuoting:
    def test_embedded_newlines_inside_quotes(self):
        text = "þIDþ\x14þTEXTþ\r\nþ1þ\x14þline1\nline2\r\nline3þ\r\n"
        assert tokenize(text) == [["ID", "TEXT"], ["1", "line1\nline2\r\nline3"]]

    def test_embedded_separator_inside_quotes(self):
        assert tokenize("þAþ\nþa\x14bþ\n") == [["A"], ["a\x14b"]]

    def test_escaped_quote(self):
        assert tokenize("þAþ\nþsays þþhiþþþ\n") == [["A"], ["says þhiþ"]]

    def test_empty_quoted_field(self):
        assert tokenize("þAþ\x14þBþ\nþxþ\x14þþ\n") == [["A", "B"], ["x", ""]]

    def test_only_escaped_quotes(self):
        assert tokenize("þAþ\nþþþþþþ\n") == [["A"], ["þþ"]]

    def test_unquoted_text_is_kept(self):
        assert tokenize("A\x14B\n1\x142\n") == [["A", "B"], ["1", "2"]]

    def test_unterminated_quote_is_flushed(self):
        assert tokenize("þAþ\nþopen\nstill") == [["A"], ["open\nstill"]]


class TestChunkBoundaries:
    TEXT = (
        "þIDþ\x14þTEXTþ\r\n"
        "þ1þ\x14þa þþquotedþþ value\r\nwith lines\rþ\r\n"
        "þ2þ\x14þþ\r\n"
        "þ3þ\x14þþþþþþ\r"
    )

    @pytest.mark.parametrize("size", [1, 2, 3, 5, 7, 13, 64])
    def test_chunk_size_does_not_change_records(self, size):
        assert tokenize(self.TEXT, chunk_size=size) == tokenize(self.TEXT)

    def test_crlf_split_across_chunks(self):
        chunks = ["þAþ\r", "\nþ1þ\r", "\n"]
        tokenizer = RecordTokenizer(chunks)
        assert list(tokenizer.iter_records()) == [["1"]]
        assert tokenizer.header == ("A",)

    def test_escaped_quote_split_across_chunks(self):
        chunks = ["þAþ\nþxþ", "þyþ\n"]
        tokenizer = RecordTokenizer(chunks)
        assert list(tokenizer.iter_records()) == [["xþy"]]

    def test_closing_quote_at_end_of_chunk(self):
        chunks = ["þAþ\x14þBþ\nþxþ", "\x14þyþ\n"]
        tokenizer = RecordTokenizer(chunks)
        assert list(tokenizer.iter_records()) == [["x", "y"]]

    def test_closing_quote_at_end_of_stream(self):
        tokenizer = RecordTokenizer(["þAþ\nþxþ"])
        assert list(tokenizer.iter_records()) == [["x"]]


class TestRecordTokenizer:
    def test_header_is_not_yielded(self):
        tokenizer = RecordTokenizer(["þAþ\x14þBþ\n"])
        assert list(tokenizer.iter_records()) == []
        assert tokenizer.header == ("A", "B")

    def test_on_header_called_once(self):
        seen = []
        tokenizer = RecordTokenizer(chunked("þAþ\nþ1þ\nþ2þ\n", 3))
        rows = list(tokenizer.iter_records(on_header=seen.append))
        assert seen == [("A",)]
        assert rows == [["1"], ["2"]]

    def test_read_header_stops_after_first_record(self):
        consumed = []

        def chunks():
            for chunk in ["þAþ\x14þBþ\n", "þ1þ\x14þ2þ\n", "þ3þ\x14þ4þ\n"]:
                consumed.append(chunk)
                yield chunk

        tokenizer = RecordTokenizer(chunks())
        assert tokenizer.read_header() == ("A", "B")
        assert len(consumed) == 1

    def test_read_header_empty_stream(self):
        assert RecordTokenizer([]).read_header() is None

    def test_count_mode_yields_field_counts_only(self):
        tokenizer = RecordTokenizer(["þAþ\x14þBþ\nþ1þ\x14þ2þ\n"], keep_text=False)
        assert list(tokenizer.iter_records()) == [[None, None]]
        assert tokenizer.header == ("A", "B")

    def test_count_mode_flushes_unterminated_single_field(self):
        tokenizer = RecordTokenizer(["þAþ\nþlastþ"], keep_text=False)
        assert list(tokenizer.iter_records()) == [[None]]
