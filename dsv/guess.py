from __future__ import annotations

import io
import logging
from typing import Dict, Iterable, Optional

from pydantic import ValidationError

from .dialects import Dialect
from .errors import DSVParserError
from .models import ParserConfig
from .parser import read_records

logger = logging.getLogger("dsv.guess")


def count_fields(text: str, dialect: Dialect, delimiter: str) -> int:
    """
    Number of fields in the first record of text when split on delimiter.

    A delimiter the dialect cannot use, or cannot parse the sample with,
    counts as zero.
    """
    with io.StringIO(text) as stream:
        try:
            config = ParserConfig(stream=stream, dialect=dialect, delimiter=delimiter)
        except ValidationError:
            logger.debug("%r: not usable as a %s delimiter", delimiter, dialect.value)
            return 0
        try:
            first = next(read_records(config), None)
        except DSVParserError as exc:
            logger.debug("%r: sample does not parse (%s)", delimiter, exc.kind)
            return 0
    return len(first) if first is not None else 0


def guess_delimiter(
    text: str,
    dialect: Dialect | str = Dialect.UNIX,
    known_delimiters: Optional[Iterable[str]] = None,
) -> Optional[str]:
    """
    Pick the candidate delimiter that splits the first record into the most
    fields.

    Returns None when two or more candidates share the highest count (or
    there is nothing to compare): an ambiguous sample is reported, never
    resolved by picking one.
    """
    dialect = Dialect(dialect)
    candidates = tuple(known_delimiters) if known_delimiters is not None else dialect.conventions.known_delimiters

    counts: Dict[str, int] = {}
    for delimiter in dict.fromkeys(candidates):
        counts[delimiter] = count_fields(text, dialect, delimiter)

    best = max(counts.values(), default=0)
    if best == 0:
        return None

    winners = [delimiter for delimiter, count in counts.items() if count == best]
    logger.debug("delimiter counts: %s", counts)
    if len(winners) != 1:
        return None
    return winners[0]
