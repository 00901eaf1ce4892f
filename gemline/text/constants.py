LOGGER_NAME = "gemline"

GEMINI_MIME_TYPE = "text/gemini"

# Line markers of the text/gemini format.
PREFORMATTING_FENCE = b"```"
LINK_MARKER = b"=>"
HEADING_MARKER = ord("#")
LIST_ITEM_MARKER = b"* "
QUOTE_MARKER = ord(">")
