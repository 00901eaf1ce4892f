"""
Exceptions thrown by the Gemini client library.
"""


class ClientError(Exception):
    """Base Gemini client error."""


class InvalidURLError(ClientError):
    """Raised when an invalid URL is requested."""


class UnknownProtocolError(ClientError):
    """Raised when a URL is requested with an unsupported protocol."""


class ParseError(ClientError):
    """Base error for any parsing errors."""


class BadHeaderError(ParseError):
    """
    Raised when the header line could not be parsed.

    This error could indicate:
        * The status code is not a digit pair or not a known status.
        * The status code is not followed by a single space.
        * The header line is longer than allowed.

    The connection cannot be recovered and must be discarded.
    """


class UnexpectedEOFError(ParseError):
    """Raised when the response ended before the header line was complete."""


class InvalidUtf8Error(ParseError):
    """Raised when the meta of a header or the text of a line is not valid UTF-8."""


class CertError(ClientError):
    """Base error for certificate issues."""
