"""
General utility functions.

Provides value validation, id coercion and small text helpers shared by the
config loader and the responder engine.
"""
from __future__ import annotations

import math
import random
import re
import string
from typing import Any, Optional, Tuple

URL_RE = re.compile(r"(?:https?://|www\.)\S+", re.IGNORECASE)
WHITESPACE_RE = re.compile(r"\s+")

_ID_ALPHABET = string.ascii_lowercase + string.digits


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value: Any) -> bool:
    """True for finite ints and floats; bools are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False


def is_nonneg_number(value: Any) -> bool:
    return is_number(value) and value >= 0


def coerce_str(value: Any) -> Optional[str]:
    """Coerce scalar config values (ids, triggers) to strings."""
    if isinstance(value, str):
        return value
    if is_int(value):
        return str(value)
    if is_number(value):
        return str(int(value)) if float(value).is_integer() else str(value)
    return None


def str_tuple(value: Any) -> Tuple[str, ...]:
    """Turn a raw list into a tuple of non-empty strings, dropping the rest."""
    if not isinstance(value, list):
        return ()
    items = []
    for item in value:
        text = coerce_str(item)
        if text:
            items.append(text)
    return tuple(items)


def random_id(rng: Optional[random.Random] = None, length: int = 8) -> str:
    chooser = rng or random
    return "r_" + "".join(chooser.choice(_ID_ALPHABET) for _ in range(length))


def word_count(text: Optional[str]) -> int:
    stripped = (text or "").strip()
    if not stripped:
        return 0
    return len(WHITESPACE_RE.split(stripped))


def clamp_text(text: Any, max_len: int) -> str:
    if not isinstance(text, str):
        return ""
    if len(text) <= max_len:
        return text
    return text[:max_len]


def contains_url(text: str) -> bool:
    return bool(URL_RE.search(text or ""))
