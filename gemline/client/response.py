"""
Decoding of Gemini responses: the header line followed by the body.
"""

import logging
from typing import BinaryIO, Dict, Optional, Tuple

from . import constants
from ..exceptions import BadHeaderError, InvalidUtf8Error, UnexpectedEOFError
from ..text import cursor
from ..text.parser import Lines

logger = logging.getLogger(constants.LOGGER_NAME)


class Body:
    """
    Body of a response: the stream of bytes following the header line.

    The body is read from the same buffered stream the header was read from and must be
    closed to release the connection.
    """

    def __init__(self, inner: BinaryIO) -> None:
        super().__init__()
        self._inner = inner

    def read(self, size: int = -1) -> bytes:
        """Read up to size bytes, or the rest of the body if size is negative."""
        return self._inner.read(size)

    def readline(self) -> bytes:
        """Read up to and including the next line feed, or the rest of the body."""
        return self._inner.readline()

    def lines(self) -> Lines:
        """
        Classify the rest of the body as text/gemini lines.

        The returned lines own the stream of the body.
        """
        return Lines(self._inner)

    def close(self) -> None:
        self._inner.close()


class Response:
    """
    The Gemini response: the status and meta of the header line, and the body.
    """

    status: constants.Status
    meta: str
    body: Body

    def __init__(self, status: constants.Status, meta: str, body: Body) -> None:
        super().__init__()
        self.status = status
        self.meta = meta
        self.body = body

    def __repr__(self):
        return f"<Response {self.status}:{self.meta}>"

    def __str__(self) -> str:
        return f"{self.status_code} {self.meta}"

    def __enter__(self) -> "Response":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def status_code(self) -> int:
        """The status code as an int."""
        return self.status.value

    @property
    def category(self) -> constants.Category:
        return self.status.category

    @property
    def mime_type(self) -> Optional[str]:
        """MIME type of the body. Only successful responses have a MIME type."""
        if self.category != constants.Category.SUCCESS:
            return None
        return parse_mime_type(self.meta)[0]

    @property
    def charset(self) -> Optional[str]:
        if self.category != constants.Category.SUCCESS:
            return None
        return parse_mime_type(self.meta)[1].get("charset", "utf-8")

    def close(self) -> None:
        """Close the body, releasing the connection."""
        self.body.close()


def parse_mime_type(meta: str) -> Tuple[str, Dict[str, str]]:
    """
    Parse the meta of a successful response as a MIME type and its parameters.

    >>> parse_mime_type("text/gemini; charset=UTF-8; lang=en")
    ('text/gemini', {'charset': 'utf-8', 'lang': 'en'})

    >>> parse_mime_type("")
    ('text/gemini', {'charset': 'utf-8'})

    :param meta: meta of the header line.
    :return: a tuple of the lowercased MIME type and its parameters.
    """
    if not meta.strip():
        meta = constants.DEFAULT_MIME_TYPE

    mime_type, *params = meta.split(";")
    parsed_params = {}
    for param in params:
        key, sep, value = param.partition("=")
        if not sep:
            continue
        key = key.strip().lower()
        value = value.strip().strip('"')
        if key == "charset":
            value = value.lower()
        parsed_params[key] = value

    return mime_type.strip().lower(), parsed_params


def _next_byte(buf: bytes, pos: int) -> Tuple[int, int]:
    """
    Get the byte at the position.

    :return: a tuple of the byte and the position after it.
    :raises UnexpectedEOFError: the buffer ends before the position.
    """
    if pos >= len(buf):
        raise UnexpectedEOFError(f"header ended after {len(buf)} bytes")
    return buf[pos], pos + 1


def _parse_status(buf: bytes, pos: int) -> Tuple[constants.Status, int]:
    tens, pos = _next_byte(buf, pos)
    if not ord("0") <= tens <= ord("9"):
        raise BadHeaderError(f"status category '{chr(tens)}' is not an integer")

    ones, pos = _next_byte(buf, pos)
    if not ord("0") <= ones <= ord("9"):
        raise BadHeaderError(f"status detail '{chr(ones)}' is not an integer")

    status_code = (tens - ord("0")) * 10 + (ones - ord("0"))
    try:
        return constants.Status(status_code), pos
    except ValueError:
        raise BadHeaderError(f"unknown status code {status_code}") from None


def parse_header(line: bytes) -> Tuple[constants.Status, str]:
    """
    Parse the header line of a response.

    >>> parse_header(b"20 text/gemini\\r\\n")
    (<Status.SUCCESS: 20>, 'text/gemini')

    >>> parse_header(b"51 Not found\\n")
    (<Status.NOT_FOUND: 51>, 'Not found')

    >>> parse_header(b"21 Success?\\r\\n")
    Traceback (most recent call last):
        ...
    gemline.exceptions.BadHeaderError: unknown status code 21

    :param line: the header line, including its terminator.
    :return: a tuple of the status and the meta.
    :raises BadHeaderError: the line is not a valid header or the meta is too long.
    :raises UnexpectedEOFError: the line ended before the space after the status code.
    :raises InvalidUtf8Error: the meta is not valid UTF-8.
    """
    status, pos = _parse_status(line, 0)

    separator, pos = _next_byte(line, pos)
    if separator != ord(" "):
        raise BadHeaderError(f"status code is followed by {chr(separator)!r} instead of a space")

    meta, _ = cursor.slice_to_line_end(line, pos)
    if meta.end - meta.start > constants.MAX_META_LENGTH:
        raise BadHeaderError(f"meta is longer than {constants.MAX_META_LENGTH} bytes")

    try:
        return status, meta.of(line).decode("utf-8")
    except UnicodeDecodeError as err:
        raise InvalidUtf8Error(f"meta is not valid UTF-8: {err.reason}") from err


def parse_response(reader: BinaryIO) -> Response:
    """
    Read the header line of a response and wrap the rest of the stream as the body.

    Exactly one line is read from the stream. If the header is invalid the stream is left
    partially read and should be discarded.

    :param reader: a buffered binary stream positioned at the start of a response.
    :return: the parsed response.
    """
    line = reader.readline(constants.MAX_HEADER_LENGTH)
    if len(line) == constants.MAX_HEADER_LENGTH and not line.endswith(b"\n"):
        raise BadHeaderError(
            f"header is longer than {constants.MAX_HEADER_LENGTH} bytes"
        )

    status, meta = parse_header(line)
    logger.debug("received header %d %s", status.value, meta)

    return Response(status, meta, Body(reader))
