"""
dsv: read and write delimiter-separated values.

Two dialects are supported: "unix" (":"-separated, backslash escapes,
backslash-newline continuation, "#" comments) and "rfc4180" (CSV).
"""

from .builder import build, build_to_string
from .convert import convert_bytes
from .dialects import Dialect
from .errors import (
    DSVError,
    DSVParserError,
    IllegalEmbeddedLinebreakError,
    PrematureEOFError,
    UnescapedQuoteError,
)
from .guess import guess_delimiter
from .parser import iter_parse, parse, parse_bytes, parse_string

__version__ = "0.1.0"

__all__ = [
    "Dialect",
    "parse",
    "parse_string",
    "parse_bytes",
    "iter_parse",
    "build",
    "build_to_string",
    "guess_delimiter",
    "convert_bytes",
    "DSVError",
    "DSVParserError",
    "PrematureEOFError",
    "UnescapedQuoteError",
    "IllegalEmbeddedLinebreakError",
]
