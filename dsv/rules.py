"""
Delimiter policy and format constants.

This file exists to keep the two dialects' conventions in one place.
"""

ESCAPE_CHAR = "\\"
QUOTE_CHAR = '"'

# Unix dialect (/etc/passwd style)
UNIX_DELIMITER = ":"
UNIX_LINE_BREAK = "\n"
UNIX_COMMENT_PREFIX = "#"

# RFC 4180 dialect (CSV)
RFC4180_DELIMITER = ","
RFC4180_LINE_BREAK = "\r\n"

KNOWN_DELIMITERS = (",", ":", ";", "|", "\t", " ")
