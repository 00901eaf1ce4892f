"""
Format text/gemini lines as encoded bytes.
"""

from typing import Callable, Dict, Iterable

from . import constants
from .elements import Line, LineKind


def format_gemini_text(lines: Iterable[Line]) -> bytes:
    """
    Format text/gemini lines.

    The output is normalised: lines end in a line feed, headings and links use a single space
    as separator and the alt text of preformatting fences is dropped.

    >>> from gemline.text.parser import parse_gemini_text
    >>> format_gemini_text(parse_gemini_text(b"##Header\\r\\n=>\\tdocs/   Docs\\r\\n"))
    b'## Header\\n=> docs/ Docs\\n'

    :param lines: text/gemini lines.
    :return: lines formatted as bytes.
    """
    return b"".join(_format_line(line) + b"\n" for line in lines)


def _format_line(line: Line) -> bytes:
    """
    Format the line as bytes, without a line terminator.

    >>> from gemline.text.parser import classify_line
    >>> _format_line(classify_line(b"     Is    this    acceptable?        \\n", False)[0])
    b'     Is    this    acceptable?        '

    :param line: a text/gemini line.
    :return: line formatted as bytes.
    """
    return _FORMATTERS[line.kind](line)


def _format_link(line: Line) -> bytes:
    output = constants.LINK_MARKER + b" " + line.link_bytes
    if line.text_slice is not None:
        output += b" " + line.text_bytes
    return output


_FORMATTERS: Dict[LineKind, Callable[[Line], bytes]] = {
    LineKind.TEXT: lambda line: line.text_bytes,
    LineKind.LINK: _format_link,
    LineKind.HEADING: lambda line: bytes([constants.HEADING_MARKER]) * line.level
    + b" "
    + line.text_bytes,
    LineKind.UNORDERED_LIST_ITEM: lambda line: constants.LIST_ITEM_MARKER
    + line.text_bytes,
    LineKind.QUOTE: lambda line: bytes([constants.QUOTE_MARKER]) + line.text_bytes,
    LineKind.PREFORMATTING_TOGGLE: lambda line: constants.PREFORMATTING_FENCE,
    LineKind.PREFORMATTED_TEXT: lambda line: line.text_bytes,
}
