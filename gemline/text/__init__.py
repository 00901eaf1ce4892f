"""
text/gemini parsing and formatting
"""

from .constants import GEMINI_MIME_TYPE
from .elements import Line, LineKind, Slice
from .format import format_gemini_text
from .parser import Lines, classify_line, parse_gemini_text

__all__ = [
    "parse_gemini_text",
    "classify_line",
    "format_gemini_text",
    "Lines",
    "Line",
    "LineKind",
    "Slice",
    "GEMINI_MIME_TYPE",
]
