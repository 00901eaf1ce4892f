from .client import sync_request, tls_context
from .constants import Category, Status
from .response import Body, Response, parse_header, parse_mime_type, parse_response
from .tofu import SelfSignedCertFileStore, SelfSignedCertMemoryStore, SelfSignedCertStore

__all__ = [
    "sync_request",
    "tls_context",
    "parse_response",
    "parse_header",
    "parse_mime_type",
    "Response",
    "Body",
    "Category",
    "Status",
    "SelfSignedCertStore",
    "SelfSignedCertFileStore",
    "SelfSignedCertMemoryStore",
]
