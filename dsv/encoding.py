"""
Byte input decoding.

Rules:
- Detect the encoding best-effort via charset-normalizer.
- A UTF-8 BOM is consumed, never passed on as part of the first field.
- If the detected encoding fails, try UTF-8, then decode with replacement
  characters and report it.
- Line breaks are left exactly as they are: they matter to the parser.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from charset_normalizer import from_bytes

logger = logging.getLogger("dsv.encoding")

UTF8_BOM = b"\xef\xbb\xbf"


def decode_bytes(raw: bytes) -> Tuple[str, Dict[str, Any]]:
    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    if raw.startswith(UTF8_BOM) and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    decode_fallback = False
    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        try:
            text = raw.decode("utf-8-sig")
            decode_used = "utf-8-sig"
        except UnicodeDecodeError:
            logger.warning("input is not valid %s; decoding with replacement characters", decode_used)
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8"
        decode_fallback = True

    info = {
        "detected": detected,
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
        "bom": raw.startswith(UTF8_BOM),
    }
    return text, info
