from __future__ import annotations

from typing import IO, Iterator, NamedTuple


class Line(NamedTuple):
    """One physical line, split from its terminator ("\\r\\n", "\\n" or "")."""

    text: str
    terminator: str


def split_terminator(raw: str) -> Line:
    if raw.endswith("\r\n"):
        return Line(raw[:-2], "\r\n")
    if raw.endswith("\n"):
        return Line(raw[:-1], "\n")
    return Line(raw, "")


def iter_lines(stream: IO[str]) -> Iterator[Line]:
    """
    Read physical lines from a text stream until it is exhausted.

    Lines end at LF only; a CR is part of the terminator when it sits right
    before the LF. Open text files with newline="" to keep CRLF intact.
    """
    while True:
        raw = stream.readline()
        if not raw:
            return
        yield split_terminator(raw)
