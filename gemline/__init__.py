"""
Gemini client library: status line decoding and streaming text/gemini parsing.
"""
