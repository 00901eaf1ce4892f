"""
Elements of the text/gemini format.
"""

import enum
from dataclasses import dataclass
from typing import NamedTuple, Optional

from ..exceptions import InvalidUtf8Error


class Slice(NamedTuple):
    """Byte offsets into the raw line that owns the slice."""

    start: int
    end: int

    def of(self, buf: bytes) -> bytes:
        """
        The bytes the slice refers to.

        >>> Slice(3, 6).of(b"=> foo bar")
        b'foo'
        """
        return buf[self.start : self.end]


class LineKind(enum.Enum):
    TEXT = enum.auto()
    LINK = enum.auto()
    HEADING = enum.auto()
    UNORDERED_LIST_ITEM = enum.auto()
    QUOTE = enum.auto()
    PREFORMATTING_TOGGLE = enum.auto()
    PREFORMATTED_TEXT = enum.auto()


@dataclass(frozen=True)
class Line:
    """
    A classified line of a text/gemini document.

    The line keeps the raw bytes it was read from, including the line terminator. The text,
    link and level are only set for the kinds that carry them:

        * TEXT, UNORDERED_LIST_ITEM, QUOTE and PREFORMATTED_TEXT have text.
        * HEADING has text and a level: the number of pound signs.
        * LINK has a link and, when a friendly name was given, text.
        * PREFORMATTING_TOGGLE has nothing but the raw fence line.

    Slices are checked against the raw line and decoded when the line is created so a line
    with invalid UTF-8 never makes it out of the parser.
    """

    kind: LineKind
    raw: bytes
    text_slice: Optional[Slice] = None
    link_slice: Optional[Slice] = None
    level: Optional[int] = None

    def __post_init__(self):
        """Validate slices against the raw line."""
        for slice_ in (self.text_slice, self.link_slice):
            if slice_ is None:
                continue
            if not 0 <= slice_.start <= slice_.end <= len(self.raw):
                raise ValueError(
                    f"slice {slice_.start}:{slice_.end} is outside of line of length {len(self.raw)}"
                )
            self._decode(slice_)
        if self.level is not None and self.level <= 0:
            raise ValueError("heading level must be greater than 0")

    def __repr__(self):
        return f"<Line {self.kind.name} link={self.link!r} text={self.text!r} level={self.level}>"

    def _decode(self, slice_: Slice) -> str:
        try:
            return slice_.of(self.raw).decode("utf-8")
        except UnicodeDecodeError as err:
            raise InvalidUtf8Error(
                f"{self.kind.name.lower()} line is not valid UTF-8: {err.reason}"
            ) from err

    @property
    def text(self) -> Optional[str]:
        """Text of the line, without its line terminator."""
        if self.text_slice is None:
            return None
        return self._decode(self.text_slice)

    @property
    def link(self) -> Optional[str]:
        """Target URL of a link line. The URL can be relative or absolute."""
        if self.link_slice is None:
            return None
        return self._decode(self.link_slice)

    @property
    def text_bytes(self) -> Optional[bytes]:
        if self.text_slice is None:
            return None
        return self.text_slice.of(self.raw)

    @property
    def link_bytes(self) -> Optional[bytes]:
        if self.link_slice is None:
            return None
        return self.link_slice.of(self.raw)
