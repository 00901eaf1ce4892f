"""
Byte cursor primitives used to scan a single raw line.

Every function takes the buffer and the current position and returns the
position after scanning. None of them raise when they run off the end of the
buffer: the length of the buffer is returned instead and the caller decides
whether that means the input was truncated.
"""

from typing import Tuple

from .elements import Slice

INLINE_WHITESPACE = b" \t"
WHITESPACE = b" \t\r\n"


def advance_to_line_end(buf: bytes, pos: int) -> Tuple[int, int]:
    """
    Scan forward to the end of the line.

    >>> advance_to_line_end(b"foo\\r\\nbar", 0)
    (3, 5)
    >>> advance_to_line_end(b"foo\\n", 1)
    (3, 4)
    >>> advance_to_line_end(b"no terminator", 3)
    (13, 13)

    A carriage return that is not followed by a line feed is part of the line.

    >>> advance_to_line_end(b"a\\rb\\n", 0)
    (3, 4)

    :param buf: raw bytes.
    :param pos: position to start scanning from.
    :return: a tuple of the offset where the line contents end (excluding the
        terminator) and the position after the terminator.
    """
    end = buf.find(b"\n", pos)
    if end == -1:
        return len(buf), len(buf)

    next_pos = end + 1
    if end > pos and buf[end - 1] == ord("\r"):
        end -= 1
    return end, next_pos


def advance_to_whitespace(buf: bytes, pos: int) -> int:
    """
    Scan forward until a space, tab, CR or LF is found. The whitespace byte is not consumed.

    >>> advance_to_whitespace(b"gemini://foo.dev/ Foo", 0)
    17
    >>> advance_to_whitespace(b"foo", 0)
    3
    """
    length = len(buf)
    while pos < length and buf[pos] not in WHITESPACE:
        pos += 1
    return pos


def skip_inline_whitespace(buf: bytes, pos: int) -> int:
    """
    Consume spaces and tabs. Line terminators are never consumed.

    >>> skip_inline_whitespace(b"=> \\t foo", 2)
    5
    >>> skip_inline_whitespace(b"=>  \\r\\n", 2)
    4
    """
    length = len(buf)
    while pos < length and buf[pos] in INLINE_WHITESPACE:
        pos += 1
    return pos


def count_marker_run(buf: bytes, pos: int, marker: int) -> Tuple[int, int]:
    """
    Consume a run of the same marker byte.

    >>> count_marker_run(b"### Heading", 0, ord("#"))
    (3, 3)
    >>> count_marker_run(b"Heading", 0, ord("#"))
    (0, 0)

    :return: a tuple of the number of markers and the position after the run.
    """
    start = pos
    length = len(buf)
    while pos < length and buf[pos] == marker:
        pos += 1
    return pos - start, pos


def slice_to_line_end(buf: bytes, pos: int) -> Tuple[Slice, int]:
    """Slice the rest of the line, excluding the terminator, and move past the terminator."""
    end, next_pos = advance_to_line_end(buf, pos)
    return Slice(pos, end), next_pos


def slice_to_whitespace(buf: bytes, pos: int) -> Tuple[Slice, int]:
    """Slice up to the next whitespace byte, leaving the cursor on that byte."""
    end = advance_to_whitespace(buf, pos)
    return Slice(pos, end), end
