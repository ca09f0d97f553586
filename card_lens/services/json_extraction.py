"""
Helpers for recovering JSON objects from loosely formatted text.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict, Literal, Tuple


ParseMode = Literal["raw", "braced", "base64", "failed"]


def parse_strict_object(text: str) -> Dict[str, Any] | None:
    """Parse text as JSON, returning it only if the root is an object."""
    if not text:
        return None
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


def extract_outer_braces(text: str) -> str | None:
    """
    Return the substring from the first "{" to the last "}".

    None when either brace is missing or they are out of order.
    """
    if not text:
        return None
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    return text[start : end + 1]


def extract_json_object(text: str | None) -> Tuple[Dict[str, Any] | None, ParseMode]:
    """
    Extract and parse a JSON object from text, returning (parsed, parse_mode).

    parse_mode:
        - "raw" if the full text parses directly
        - "braced" if parsed from the first "{" ... last "}" substring
        - "failed" if parsing fails

    "base64" is never returned here; callers report it when the text was
    base64-decoded before extraction.
    """
    if text is None:
        return None, "failed"

    parsed = parse_strict_object(text)
    if parsed is not None:
        return parsed, "raw"

    braced = extract_outer_braces(text)
    if braced is not None:
        parsed = parse_strict_object(braced)
        if parsed is not None:
            return parsed, "braced"

    return None, "failed"


def decode_base64_text(text: str) -> str | None:
    """
    Decode base64 text to a UTF-8 string.

    Whitespace is ignored and missing "=" padding restored. Returns None when
    the text is not base64 or does not decode to UTF-8.
    """
    compact = "".join(text.split())
    if not compact:
        return None
    padding = "=" * (-len(compact) % 4)
    try:
        raw = base64.b64decode(compact + padding, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError):
        return None
