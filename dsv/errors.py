from __future__ import annotations

from typing import Optional


class DSVError(Exception):
    """Base class for every error raised by dsv."""


class DSVParserError(DSVError):
    """
    A structural error found while parsing.

    Carries the name of the parser state that detected the problem and the
    offending field or line text, so callers can report where parsing stopped.
    """

    kind = "parser-error"

    def __init__(self, message: str, state: Optional[str] = None, text: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.state = state
        self.text = text

    def __str__(self) -> str:
        parts = [self.message]
        if self.state is not None:
            parts.append(f"state={self.state}")
        if self.text is not None:
            parts.append(f"text={self.text!r}")
        return " ".join(parts)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "state": self.state,
            "message": self.message,
            "text": self.text,
        }


class PrematureEOFError(DSVParserError):
    kind = "premature-eof"


class UnescapedQuoteError(DSVParserError):
    kind = "unescaped-quote"


class IllegalEmbeddedLinebreakError(DSVParserError):
    kind = "illegal-embedded-linebreak"
