import enum

from ..text.constants import LOGGER_NAME

GEMINI_DEFAULT_PORT = 1965

# 2 digit status, a space, up to 1024 bytes of meta and CRLF.
MAX_HEADER_LENGTH = 1029

MAX_META_LENGTH = 1024

SSL_SELF_SIGNED_CERT_ERROR_CODE = 18

DEFAULT_MIME_TYPE = "text/gemini; charset=utf-8"


class Category(enum.Enum):
    INPUT = 1
    SUCCESS = 2
    REDIRECT = 3
    TEMPORARY_FAILURE = 4
    PERMANENT_FAILURE = 5
    CERTIFICATE_REQUIRED = 6


class Status(enum.Enum):
    """
    Status of a response.

    Only these status codes are valid: any other code in a header is a parse error.

    >>> Status(51).category
    <Category.PERMANENT_FAILURE: 5>
    """

    # Input statuses.
    INPUT = 10
    SENSITIVE_INPUT = 11

    # Success statuses.
    SUCCESS = 20

    # Redirect statuses.
    REDIRECT_TEMPORARY = 30
    REDIRECT_PERMANENT = 31

    # Temporary failure statuses.
    TEMPORARY_FAILURE = 40
    SERVER_UNAVAILABLE = 41
    CGI_ERROR = 42
    PROXY_ERROR = 43
    SLOW_DOWN = 44

    # Permanent failure statuses.
    PERMANENT_FAILURE = 50
    NOT_FOUND = 51
    GONE = 52
    PROXY_REQUEST_REFUSED = 53
    BAD_REQUEST = 59

    # Certificate required statuses.
    CLIENT_CERTIFICATE_REQUIRED = 60
    CERTIFICATE_NOT_AUTHORISED = 61
    CERTIFICATE_NOT_VALID = 62

    @property
    def category(self) -> Category:
        return Category(self.value // 10)
