"""
Re-serialize delimiter-separated bytes into another dialect or delimiter.

Steps:
- decode the bytes (charset-normalizer, BOM-aware)
- guess the source delimiter when none is given, falling back to the
  source dialect's default when the guess is indeterminate
- parse in the source dialect
- build in the target dialect, delimiter and line break
- encode as UTF-8 and report what was done
"""

from __future__ import annotations

import base64
import hashlib
import logging
from typing import Any, Dict, Optional

from .builder import build_to_string
from .dialects import Dialect
from .encoding import decode_bytes
from .guess import guess_delimiter
from .parser import parse_string

logger = logging.getLogger("dsv.convert")

# Only the head of the input is used for guessing.
GUESS_SAMPLE_SIZE = 4096


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def convert_bytes(
    raw: bytes,
    source_dialect: Dialect | str = Dialect.UNIX,
    target_dialect: Dialect | str = Dialect.RFC4180,
    source_delimiter: Optional[str] = None,
    target_delimiter: Optional[str] = None,
    line_break: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Returns a dict matching the API's ConvertResponse envelope.
    Parse errors propagate unchanged.
    """
    source = Dialect(source_dialect)
    target = Dialect(target_dialect)

    text, encoding_report = decode_bytes(raw)

    guessed = False
    if source_delimiter is None:
        source_delimiter = guess_delimiter(text[:GUESS_SAMPLE_SIZE], source)
        guessed = source_delimiter is not None
        if source_delimiter is None:
            source_delimiter = source.conventions.default_delimiter
            logger.info("delimiter guess indeterminate; using %r", source_delimiter)

    table = parse_string(text, source, source_delimiter)

    target_delimiter = target_delimiter or target.conventions.default_delimiter
    line_break = line_break or target.conventions.default_line_break
    out = build_to_string(table, target, target_delimiter, line_break).encode("utf-8")

    return {
        "converted": {
            "sha256": _sha256_hex(out),
            "encoding": "utf-8",
            "content_b64": base64.b64encode(out).decode("ascii"),
        },
        "report": {
            "records": len(table),
            "max_fields": max((len(record) for record in table), default=0),
            "source": {
                "dialect": source.value,
                "delimiter": source_delimiter,
                "guessed": guessed,
            },
            "target": {
                "dialect": target.value,
                "delimiter": target_delimiter,
                "line_break": line_break,
            },
            "encoding": encoding_report,
        },
    }
