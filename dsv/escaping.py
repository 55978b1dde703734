"""
Character-level escaping helpers shared by both dialects.

Unix fields use a backslash in front of the delimiter (and in front of a
literal backslash). RFC 4180 fields are enclosed in double quotes, with a
literal quote written twice.
"""

from __future__ import annotations

from typing import Iterable, List

from .rules import ESCAPE_CHAR, QUOTE_CHAR


def escape(text: str, chars: Iterable[str], escape_char: str = ESCAPE_CHAR) -> str:
    special = set(chars)
    special.add(escape_char)
    return "".join(escape_char + ch if ch in special else ch for ch in text)


def unescape(text: str, chars: Iterable[str], escape_char: str = ESCAPE_CHAR) -> str:
    """
    Remove the escape character in front of an escaped special character.

    Only sequences built by escape() are undone: an escape character followed
    by anything else is kept as it is, so plain text passes through unchanged.
    """
    if escape_char not in text:
        return text

    special = set(chars)
    special.add(escape_char)

    out: List[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == escape_char and i + 1 < n and text[i + 1] in special:
            out.append(text[i + 1])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def split_escaped(line: str, delimiter: str, escape_char: str = ESCAPE_CHAR) -> List[str]:
    """
    Split a line on every delimiter that is not preceded by an active escape.

    The pieces keep their escape characters; unescaping happens later, when a
    field is finalized.
    """
    fields: List[str] = []
    current: List[str] = []
    escaped = False

    for ch in line:
        if escaped:
            current.append(ch)
            escaped = False
        elif ch == escape_char:
            current.append(ch)
            escaped = True
        elif ch == delimiter:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)

    fields.append("".join(current))
    return fields


def has_trailing_escape(text: str, escape_char: str = ESCAPE_CHAR) -> bool:
    # An even run of trailing escapes is a run of escaped escapes.
    run = len(text) - len(text.rstrip(escape_char))
    return run % 2 == 1


def count_quotes(text: str) -> int:
    return text.count(QUOTE_CHAR)


def is_quoted(text: str) -> bool:
    """True when the whole text is one quoted field with balanced quotes."""
    if len(text) < 2 or not (text.startswith(QUOTE_CHAR) and text.endswith(QUOTE_CHAR)):
        return False
    # Inside the enclosure every quote must be doubled.
    return QUOTE_CHAR not in text[1:-1].replace(QUOTE_CHAR * 2, "")


def quote(text: str) -> str:
    doubled = text.replace(QUOTE_CHAR, QUOTE_CHAR * 2)
    return QUOTE_CHAR + doubled + QUOTE_CHAR


def unquote(text: str) -> str:
    if not is_quoted(text):
        return text
    return text[1:-1].replace(QUOTE_CHAR * 2, QUOTE_CHAR)
