"""
Table -> text.

Every field is escaped the dialect's way, fields are joined with the
delimiter and each record is written followed by the line break. The input
table is only read; nothing beyond escaping is checked.

With the Unix dialect a record that would start a line with the comment
prefix has that character escaped, so it is not read back as a comment.
"""

from __future__ import annotations

import io
import logging
from typing import IO, Iterable, Optional, Sequence

from .dialects import Dialect
from .models import DEFAULT, BuilderConfig

logger = logging.getLogger("dsv.builder")


def render_record(record: Iterable[str], config: BuilderConfig) -> str:
    conventions = config.dialect.conventions
    return conventions.render_record(record, config.delimiter, config.line_break, config.comment_prefix)


def write(config: BuilderConfig) -> None:
    stream = config.stream
    for record in config.table:
        stream.write(render_record(record, config))
    logger.debug("built %d record(s) as %s", len(config.table), config.dialect.value)


def build(
    table: Sequence[Sequence[str]],
    stream: IO[str],
    dialect: Dialect | str = Dialect.UNIX,
    delimiter: Optional[str] = None,
    line_break: Optional[str] = None,
    comment_prefix: Optional[str] = DEFAULT,  # type: ignore[assignment]
) -> None:
    config = BuilderConfig(
        table=table,
        stream=stream,
        dialect=dialect,
        delimiter=delimiter,
        line_break=line_break,
        comment_prefix=comment_prefix,
    )
    write(config)


def build_to_string(
    table: Sequence[Sequence[str]],
    dialect: Dialect | str = Dialect.UNIX,
    delimiter: Optional[str] = None,
    line_break: Optional[str] = None,
    comment_prefix: Optional[str] = DEFAULT,  # type: ignore[assignment]
) -> str:
    with io.StringIO() as out:
        build(table, out, dialect, delimiter, line_break, comment_prefix)
        return out.getvalue()
