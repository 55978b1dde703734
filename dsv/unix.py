"""
Unix dialect: /etc/passwd style records.

- Fields are split on a single delimiter character (":" by default).
- A backslash escapes the delimiter and itself.
- A line whose last field ends with an unpaired backslash continues on the
  next physical line; the delimiter is put back at the join point.
- Lines starting with the comment prefix (after stripping) are ignored.
- When building, a record that would read back as a comment gets its first
  comment character escaped.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional

from .escaping import escape, has_trailing_escape, split_escaped, unescape
from .reader import Line
from .rules import ESCAPE_CHAR

logger = logging.getLogger("dsv.unix")


def is_comment(text: str, comment_prefix: Optional[str]) -> bool:
    return bool(comment_prefix) and text.strip().startswith(comment_prefix)


def finalize_field(raw: str, delimiter: str, comment_prefix: Optional[str] = None) -> str:
    special = delimiter + comment_prefix[0] if comment_prefix else delimiter
    return unescape(raw, special)


def render_record(
    record: Iterable[str],
    delimiter: str,
    line_break: str,
    comment_prefix: Optional[str] = None,
) -> str:
    """
    Escape and join one record.

    A line that would read back as a comment gets its first comment
    character escaped, so the record is not skipped when parsed.
    """
    line = delimiter.join(escape(field, delimiter) for field in record)
    if is_comment(line, comment_prefix):
        indent = len(line) - len(line.lstrip())
        line = line[:indent] + ESCAPE_CHAR + line[indent:]
    return line + line_break


def splice(pending: List[str], fields: List[str], delimiter: str) -> None:
    """
    Append a continuation line's fields onto the pending record.

    The first field of the new line is glued onto the last pending field with
    the delimiter between them; the remaining fields are appended as they are.
    """
    if not pending:
        pending.extend(fields)
        return
    pending[-1] = pending[-1] + delimiter + fields[0]
    pending.extend(fields[1:])


def iter_records(
    lines: Iterable[Line],
    delimiter: str,
    comment_prefix: Optional[str] = None,
) -> Iterator[List[str]]:
    pending: List[str] = []
    continued = 0

    for number, line in enumerate(lines, start=1):
        if is_comment(line.text, comment_prefix):
            logger.debug("line %d: comment skipped", number)
            continue

        fields = split_escaped(line.text, delimiter)
        continues = has_trailing_escape(fields[-1])
        if continues:
            # Drop the escape that only marks the continuation.
            fields[-1] = fields[-1][:-1]

        splice(pending, fields, delimiter)

        if continues:
            continued += 1
            continue

        yield [finalize_field(raw, delimiter, comment_prefix) for raw in pending]
        pending = []

    if pending:
        # Lenient end of stream: a dangling continuation is still a record.
        logger.debug("end of stream inside a continued record")
        yield [finalize_field(raw, delimiter, comment_prefix) for raw in pending]

    if continued:
        logger.debug("%d continuation line(s) spliced", continued)
