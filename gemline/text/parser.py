"""
Parser for text/gemini documents.

Lines are classified one at a time so a response body can be parsed while it is being read.

>>> parse_gemini_text(b"# Welcome to Geminispace!\\n\\n=> users/ Users directory\\n")
[<Line HEADING link=None text='Welcome to Geminispace!' level=1>,
    <Line TEXT link=None text='' level=None>,
    <Line LINK link='users/' text='Users directory' level=None>]
"""
import io
import logging
from typing import BinaryIO, Iterator, List, Tuple

from . import constants, cursor
from .elements import Line, LineKind

logger = logging.getLogger(constants.LOGGER_NAME)


def _parse_link(raw: bytes) -> Line:
    """
    Parse a line starting with the link marker.

    >>> _parse_link(b"=> gemini://example.org/\\r\\n")
    <Line LINK link='gemini://example.org/' text=None level=None>

    >>> _parse_link(b"=>\\tfoo/bar/baz.txt \\t A relative link\\n")
    <Line LINK link='foo/bar/baz.txt' text='A relative link' level=None>

    An empty link is not rejected.

    >>> _parse_link(b"=>   \\n")
    <Line LINK link='' text=None level=None>
    """
    pos = cursor.skip_inline_whitespace(raw, len(constants.LINK_MARKER))
    link, pos = cursor.slice_to_whitespace(raw, pos)

    # A carriage return that does not end the line is part of the friendly name.
    if pos >= len(raw) or raw[pos : pos + 1] == b"\n" or raw[pos : pos + 2] == b"\r\n":
        return Line(LineKind.LINK, raw, link_slice=link)

    pos = cursor.skip_inline_whitespace(raw, pos)
    text, _ = cursor.slice_to_line_end(raw, pos)
    return Line(LineKind.LINK, raw, text_slice=text, link_slice=link)


def classify_line(raw: bytes, preformatting: bool) -> Tuple[Line, bool]:
    """
    Classify one raw line of text/gemini.

    >>> classify_line(b"### Heading 3\\r\\n", False)
    (<Line HEADING link=None text='Heading 3' level=3>, False)

    >>> classify_line(b"### Heading 3\\r\\n", True)
    (<Line PREFORMATTED_TEXT link=None text='### Heading 3' level=None>, True)

    >>> classify_line(b"```python\\n", True)
    (<Line PREFORMATTING_TOGGLE link=None text=None level=None>, False)

    :param raw: the line including its terminator. The final line of a document may not have a
        terminator.
    :param preformatting: whether the line is inside a preformatted block.
    :return: a tuple of the classified line and whether the next line is inside a preformatted
        block.
    :raises InvalidUtf8Error: the text of the line is not valid UTF-8.
    """

    # The fence is checked first so that it also closes a block.
    if raw.startswith(constants.PREFORMATTING_FENCE):
        return Line(LineKind.PREFORMATTING_TOGGLE, raw), not preformatting

    # Preformatting prevents parsing.
    if preformatting:
        text, _ = cursor.slice_to_line_end(raw, 0)
        return Line(LineKind.PREFORMATTED_TEXT, raw, text_slice=text), preformatting

    if raw.startswith(constants.LINK_MARKER):
        return _parse_link(raw), preformatting

    level, pos = cursor.count_marker_run(raw, 0, constants.HEADING_MARKER)
    if level:
        pos = cursor.skip_inline_whitespace(raw, pos)
        text, _ = cursor.slice_to_line_end(raw, pos)
        return Line(LineKind.HEADING, raw, text_slice=text, level=level), preformatting

    if raw.startswith(constants.LIST_ITEM_MARKER):
        text, _ = cursor.slice_to_line_end(raw, len(constants.LIST_ITEM_MARKER))
        return Line(LineKind.UNORDERED_LIST_ITEM, raw, text_slice=text), preformatting

    # Quotes keep any whitespace after the marker.
    if raw[:1] == bytes([constants.QUOTE_MARKER]):
        text, _ = cursor.slice_to_line_end(raw, 1)
        return Line(LineKind.QUOTE, raw, text_slice=text), preformatting

    # No other matches; regular text line.
    text, _ = cursor.slice_to_line_end(raw, 0)
    return Line(LineKind.TEXT, raw, text_slice=text), preformatting


class Lines(Iterator[Line]):
    """
    Lazily classified lines of a text/gemini stream.

    Lines are read from the source on demand and classified in the order they were received.
    The sequence ends when the source returns no more bytes. A final line without a line
    terminator is still classified and returned.

    The sequence owns the source: closing the sequence closes the source. It can only be
    iterated once.

    >>> lines = Lines(io.BytesIO(b"```\\n# Not a heading\\n```\\n* item"))
    >>> [line.kind.name for line in lines]
    ['PREFORMATTING_TOGGLE', 'PREFORMATTED_TEXT', 'PREFORMATTING_TOGGLE', 'UNORDERED_LIST_ITEM']
    """

    def __init__(self, source: BinaryIO) -> None:
        """
        :param source: a buffered binary stream, e.g. the body of a response.
        """
        super().__init__()
        self._source = source
        self.preformatting = False

    def __iter__(self) -> "Lines":
        return self

    def __next__(self) -> Line:
        raw = self._source.readline()
        if not raw:
            raise StopIteration

        if not raw.endswith(b"\n"):
            logger.debug("final line of %d bytes has no line terminator", len(raw))

        line, self.preformatting = classify_line(raw, self.preformatting)
        return line

    def __enter__(self) -> "Lines":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying source."""
        self._source.close()


def parse_gemini_text(blob: bytes) -> List[Line]:
    """
    Parse Gemini text as a list of lines.

    >>> parse_gemini_text(b"# Welcome to Geminispace!\\n"
    ...   b"\\n=> users/ Users directory\\n"
    ...   b"* List item 1\\n"
    ...   b">  Quoted\\n")
    [<Line HEADING link=None text='Welcome to Geminispace!' level=1>,
        <Line TEXT link=None text='' level=None>,
        <Line LINK link='users/' text='Users directory' level=None>,
        <Line UNORDERED_LIST_ITEM link=None text='List item 1' level=None>,
        <Line QUOTE link=None text='  Quoted' level=None>]

    :param blob: the gemini text as bytes.
    :return: a list of lines.
    :raises InvalidUtf8Error: a line is not valid UTF-8.
    """
    with Lines(io.BytesIO(blob)) as lines:
        return list(lines)
