"""
Tests for text/gemini parser and formatter.
"""
import io
from typing import List, Tuple

import pytest
from hypothesis import given, strategies as st

from gemline.exceptions import InvalidUtf8Error
from gemline.text import (
    Line,
    LineKind,
    Lines,
    Slice,
    classify_line,
    format_gemini_text,
    parse_gemini_text,
)


def _fields(line: Line) -> Tuple:
    return line.kind, line.link, line.text, line.level


def _classify(raw: bytes) -> Line:
    line, _ = classify_line(raw, False)
    return line


@given(text=st.binary())
def test_parsing_only_raises_invalid_utf8(text: bytes):
    """Parsing any bytes either succeeds or fails on the encoding."""
    with Lines(io.BytesIO(text)) as lines:
        while True:
            try:
                next(lines)
            except StopIteration:
                break
            except InvalidUtf8Error:
                continue


def test_empty_contents():
    """
    Parsing and formatting empty text returns empty text.
    """
    assert parse_gemini_text(b"") == []
    assert b"" == format_gemini_text(parse_gemini_text(b""))


line_contents = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",), blacklist_characters="\r\n")
)


@given(text_lines=st.lists(line_contents))
def test_format_then_parse(text_lines: List[str]):
    """Formatting parsed lines gives text that parses to the same lines."""
    blob = "\n".join(text_lines).encode("utf-8")
    parsed = parse_gemini_text(blob)

    reparsed = parse_gemini_text(format_gemini_text(parsed))

    assert list(map(_fields, reparsed)) == list(map(_fields, parsed))


class TestClassifyLine:
    """Classification of single lines."""

    def test_text(self):
        line = _classify(b"  normal text line here  \r\n")
        assert line.kind == LineKind.TEXT
        assert line.text == "  normal text line here  "

    @pytest.mark.parametrize("terminator", [b"\n", b"\r\n", b""])
    def test_terminators_are_stripped(self, terminator: bytes):
        """Only the line terminator is stripped."""
        line = _classify(b"text \t" + terminator)
        assert line.text == "text \t"
        assert line.raw == b"text \t" + terminator

    def test_carriage_return_without_line_feed_is_text(self):
        assert _classify(b"foo\rbar\n").text == "foo\rbar"

    @pytest.mark.parametrize("level", [1, 2, 3, 6, 7, 20])
    def test_heading_level_is_not_clamped(self, level: int):
        line = _classify(b"#" * level + b" \tHeading\r\n")
        assert line.kind == LineKind.HEADING
        assert line.level == level
        assert line.text == "Heading"

    def test_heading_without_whitespace(self):
        assert _fields(_classify(b"##Heading\n")) == (LineKind.HEADING, None, "Heading", 2)

    def test_link_without_name(self):
        assert _fields(_classify(b"=> gemini://example.org/\r\n")) == (
            LineKind.LINK,
            "gemini://example.org/",
            None,
            None,
        )

    def test_link_with_name(self):
        assert _fields(
            _classify(b"=> gemini://example.org/foo\tAnother example link\r\n")
        ) == (LineKind.LINK, "gemini://example.org/foo", "Another example link", None)

    def test_link_with_leading_tab(self):
        line = _classify(b"=> \tgopher://example.org:70/1 A gopher link\r\n")
        assert line.link == "gopher://example.org:70/1"
        assert line.text == "A gopher link"

    def test_link_without_terminator(self):
        line = _classify(b"=>foo/bar/baz.txt")
        assert line.link == "foo/bar/baz.txt"
        assert line.text is None

    def test_link_carriage_return_without_line_feed_starts_name(self):
        """A carriage return only ends the link when a line feed follows it."""
        line = _classify(b"=>url\rname\n")
        assert line.link == "url"
        assert line.text == "\rname"

    def test_link_name_keeps_trailing_whitespace(self):
        assert _classify(b"=> docs/  Docs  \n").text == "Docs  "

    def test_empty_link(self):
        line = _classify(b"=>  \t\r\n")
        assert line.kind == LineKind.LINK
        assert line.link == ""
        assert line.text is None

    def test_list_item(self):
        assert _fields(_classify(b"* item\r\n")) == (
            LineKind.UNORDERED_LIST_ITEM,
            None,
            "item",
            None,
        )

    def test_star_without_space_is_text(self):
        assert _classify(b"*bold*\n").kind == LineKind.TEXT

    def test_quote_keeps_leading_whitespace(self):
        assert _fields(_classify(b"> quoted text\r\n")) == (
            LineKind.QUOTE,
            None,
            " quoted text",
            None,
        )

    def test_fence_toggles_preformatting(self):
        line, preformatting = classify_line(b"```alt text\r\n", False)
        assert line.kind == LineKind.PREFORMATTING_TOGGLE
        assert line.text is None
        assert preformatting

        _, preformatting = classify_line(b"```\r\n", preformatting)
        assert not preformatting

    @pytest.mark.parametrize(
        "raw", [b"# Heading\n", b"=> gemini://foo.dev/ Foo\n", b"* item\n", b">quote\n"]
    )
    def test_preformatted_text_is_not_parsed(self, raw: bytes):
        line, preformatting = classify_line(raw, True)
        assert line.kind == LineKind.PREFORMATTED_TEXT
        assert line.text == raw[:-1].decode()
        assert preformatting

    def test_invalid_utf8(self):
        with pytest.raises(InvalidUtf8Error, match="text line is not valid UTF-8"):
            _classify(b"caf\xe9\n")

    def test_bytes_are_views_of_the_raw_line(self):
        line = _classify(b"=> docs/ Docs\r\n")
        assert line.link_slice == Slice(3, 8)
        assert line.link_bytes == b"docs/"
        assert line.text_bytes == b"Docs"


class TestLines:
    """Lazily classified lines of a stream."""

    document = (
        b"  normal text line here  \r\n"
        b"### Heading 3\r\n"
        b"```\r\n"
        b"### Heading 3\r\n"
        b"```\r\n"
        b"=> gemini://example.org/\r\n"
        b"=> gemini://example.org/ An example link\r\n"
        b"=> foo/bar/baz.txt\tA relative link\r\n"
        b"  another normal line here\r\n"
    )

    def test_document(self):
        lines = [_fields(line) for line in Lines(io.BytesIO(self.document))]

        assert lines == [
            (LineKind.TEXT, None, "  normal text line here  ", None),
            (LineKind.HEADING, None, "Heading 3", 3),
            (LineKind.PREFORMATTING_TOGGLE, None, None, None),
            (LineKind.PREFORMATTED_TEXT, None, "### Heading 3", None),
            (LineKind.PREFORMATTING_TOGGLE, None, None, None),
            (LineKind.LINK, "gemini://example.org/", None, None),
            (LineKind.LINK, "gemini://example.org/", "An example link", None),
            (LineKind.LINK, "foo/bar/baz.txt", "A relative link", None),
            (LineKind.TEXT, None, "  another normal line here", None),
        ]

    def test_empty_stream(self):
        lines = Lines(io.BytesIO(b""))
        with pytest.raises(StopIteration):
            next(lines)

    def test_final_line_without_terminator_is_returned(self):
        lines = list(Lines(io.BytesIO(b"first\nlast")))
        assert [line.text for line in lines] == ["first", "last"]

    def test_empty_lines_are_returned(self):
        lines = list(Lines(io.BytesIO(b"\n\r\n")))
        assert [_fields(line) for line in lines] == [(LineKind.TEXT, None, "", None)] * 2

    def test_invalid_line_does_not_stop_the_sequence(self):
        lines = Lines(io.BytesIO(b"ok\n\xff\xfe\n# next\n"))
        assert next(lines).text == "ok"
        with pytest.raises(InvalidUtf8Error):
            next(lines)
        assert next(lines).level == 1

    def test_unclosed_block(self):
        lines = list(Lines(io.BytesIO(b"```\n=> foo\n")))
        assert lines[-1].kind == LineKind.PREFORMATTED_TEXT

    def test_close_closes_source(self):
        source = io.BytesIO(b"text\n")
        with Lines(source):
            pass
        assert source.closed


class TestLineElement:
    """Validation of lines."""

    def test_slice_outside_of_line(self):
        with pytest.raises(ValueError, match="outside of line"):
            Line(LineKind.TEXT, b"foo\n", text_slice=Slice(0, 10))

    @given(invalid_level=st.integers(max_value=0))
    def test_heading_with_invalid_level(self, invalid_level: int):
        with pytest.raises(ValueError, match="heading level must be greater than 0"):
            Line(LineKind.HEADING, b"# foo\n", text_slice=Slice(2, 5), level=invalid_level)

    def test_lines_are_immutable(self):
        line = _classify(b"foo\n")
        with pytest.raises(AttributeError):
            line.kind = LineKind.QUOTE
