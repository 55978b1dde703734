"""
Text -> table.

The entry points here fix a ParserConfig and hand the stream's physical
lines to the dialect's record assembler. Errors raised by the assembler
abort the whole parse: no partial table is ever returned.
"""

from __future__ import annotations

import io
import logging
from typing import IO, Iterable, Iterator, List, Optional

from .dialects import Dialect
from .encoding import decode_bytes
from .models import DEFAULT, ParserConfig
from .reader import iter_lines

logger = logging.getLogger("dsv.parser")


def make_config(
    stream: IO[str],
    dialect: Dialect | str = Dialect.UNIX,
    delimiter: Optional[str] = None,
    known_delimiters: Optional[Iterable[str]] = None,
    comment_prefix: Optional[str] = DEFAULT,  # type: ignore[assignment]
) -> ParserConfig:
    return ParserConfig(
        stream=stream,
        dialect=dialect,
        delimiter=delimiter,
        known_delimiters=tuple(known_delimiters) if known_delimiters is not None else None,
        comment_prefix=comment_prefix,
    )


def read_records(config: ParserConfig) -> Iterator[List[str]]:
    conventions = config.dialect.conventions
    return conventions.split_records(iter_lines(config.stream), config.delimiter, config.comment_prefix)


def iter_parse(
    stream: IO[str],
    dialect: Dialect | str = Dialect.UNIX,
    delimiter: Optional[str] = None,
    known_delimiters: Optional[Iterable[str]] = None,
    comment_prefix: Optional[str] = DEFAULT,  # type: ignore[assignment]
) -> Iterator[List[str]]:
    """Yield records one by one; a malformed record raises when it is reached."""
    config = make_config(stream, dialect, delimiter, known_delimiters, comment_prefix)
    return read_records(config)


def parse(
    stream: IO[str],
    dialect: Dialect | str = Dialect.UNIX,
    delimiter: Optional[str] = None,
    known_delimiters: Optional[Iterable[str]] = None,
    comment_prefix: Optional[str] = DEFAULT,  # type: ignore[assignment]
) -> List[List[str]]:
    config = make_config(stream, dialect, delimiter, known_delimiters, comment_prefix)
    table = list(read_records(config))
    logger.debug("parsed %d record(s) as %s with %r", len(table), config.dialect.value, config.delimiter)
    return table


def parse_string(
    text: str,
    dialect: Dialect | str = Dialect.UNIX,
    delimiter: Optional[str] = None,
    known_delimiters: Optional[Iterable[str]] = None,
    comment_prefix: Optional[str] = DEFAULT,  # type: ignore[assignment]
) -> List[List[str]]:
    with io.StringIO(text) as stream:
        return parse(stream, dialect, delimiter, known_delimiters, comment_prefix)


def parse_bytes(
    raw: bytes,
    dialect: Dialect | str = Dialect.UNIX,
    delimiter: Optional[str] = None,
    known_delimiters: Optional[Iterable[str]] = None,
    comment_prefix: Optional[str] = DEFAULT,  # type: ignore[assignment]
) -> List[List[str]]:
    """Decode raw bytes (encoding detected by charset-normalizer) and parse them."""
    text, _ = decode_bytes(raw)
    return parse_string(text, dialect, delimiter, known_delimiters, comment_prefix)
