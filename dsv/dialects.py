"""
The two supported dialects behind one interface.

Call sites hold a Dialect member and ask it for its conventions; they
never branch on which dialect they were given.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

from . import rfc4180, rules, unix
from .escaping import escape, quote
from .reader import Line


class DialectConventions:
    name: str
    default_delimiter: str
    default_line_break: str
    supports_comments: bool
    known_delimiters: Tuple[str, ...] = rules.KNOWN_DELIMITERS

    def split_records(
        self,
        lines: Iterable[Line],
        delimiter: str,
        comment_prefix: Optional[str] = None,
    ) -> Iterator[List[str]]:
        raise NotImplementedError

    def finalize_field(self, raw: str, delimiter: str, comment_prefix: Optional[str] = None) -> str:
        raise NotImplementedError

    def escape_field(self, field: str, delimiter: str, line_break: str) -> str:
        raise NotImplementedError

    def render_record(
        self,
        record: Iterable[str],
        delimiter: str,
        line_break: str,
        comment_prefix: Optional[str] = None,
    ) -> str:
        escaped = (self.escape_field(field, delimiter, line_break) for field in record)
        return delimiter.join(escaped) + line_break

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class UnixConventions(DialectConventions):
    name = "unix"
    default_delimiter = rules.UNIX_DELIMITER
    default_line_break = rules.UNIX_LINE_BREAK
    supports_comments = True

    def split_records(self, lines, delimiter, comment_prefix=None):
        return unix.iter_records(lines, delimiter, comment_prefix)

    def finalize_field(self, raw, delimiter, comment_prefix=None):
        return unix.finalize_field(raw, delimiter, comment_prefix)

    def escape_field(self, field, delimiter, line_break):
        return escape(field, delimiter)

    def render_record(self, record, delimiter, line_break, comment_prefix=None):
        return unix.render_record(record, delimiter, line_break, comment_prefix)


class RFC4180Conventions(DialectConventions):
    name = "rfc4180"
    default_delimiter = rules.RFC4180_DELIMITER
    default_line_break = rules.RFC4180_LINE_BREAK
    supports_comments = False

    def split_records(self, lines, delimiter, comment_prefix=None):
        return rfc4180.iter_records(lines, delimiter)

    def finalize_field(self, raw, delimiter, comment_prefix=None):
        return rfc4180.finalize_field(raw, delimiter)

    def escape_field(self, field, delimiter, line_break):
        """
        Double the quotes, then enclose the field when it holds the
        delimiter, a quote, a CR/LF or the line break.
        """
        needs_quotes = (
            delimiter in field
            or rules.QUOTE_CHAR in field
            or "\n" in field
            or "\r" in field
            or (line_break and line_break in field)
        )
        if needs_quotes:
            return quote(field)
        return field


class Dialect(str, Enum):
    UNIX = "unix"
    RFC4180 = "rfc4180"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None

    @property
    def conventions(self) -> DialectConventions:
        return CONVENTIONS[self]


CONVENTIONS = {
    Dialect.UNIX: UnixConventions(),
    Dialect.RFC4180: RFC4180Conventions(),
}
