"""
Raw recipe record -> CanonicalRecipe.

Dump records are loosely typed: ratings arrive as numbers or strings, durations
as free text ("1 hr 30 mins", "45 minutes", "90"), and missing text fields are
sometimes the literal string "None". Nothing here raises for bad input; a
record that cannot be used comes back as ``None`` and is counted as skipped.
"""

import json
import logging
import math
import re
from typing import Any, Mapping, Optional

from .models import CanonicalRecipe
from .values import get_object, get_string, is_number

logger = logging.getLogger(__name__)

NONE_SENTINEL = "None"

_NUM = r"([0-9]+(?:\.[0-9]+)?)"
HOURS_RE = re.compile(_NUM + r"\s*(?:hours?|hrs?|h)")
# the lookahead keeps "m" from matching the start of "months", "mixing", ...
MINUTES_RE = re.compile(_NUM + r"\s*(?:minutes?|mins?|m)(?!\w)")
DIGITS_RE = re.compile(r"^[0-9]+$")
# leading numeric prefix, e.g. "4.2" in "4.2 stars"
FLOAT_PREFIX_RE = re.compile(r"^[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _positive_minutes(total: float) -> Optional[int]:
    # 0 minutes is stored as "no duration"
    minutes = _round_half_up(total)
    return minutes if minutes > 0 else None


def parse_duration(value: Any) -> Optional[int]:
    """Parse a duration in minutes from a number or free text."""
    if value is None:
        return None
    if is_number(value):
        return _positive_minutes(value)
    if not isinstance(value, str):
        return None

    text = value.lower().strip()
    if not text or text == "null":
        return None

    total = 0.0
    hours = HOURS_RE.search(text)
    if hours:
        total += float(hours.group(1)) * 60
    minutes = MINUTES_RE.search(text)
    if minutes:
        total += float(minutes.group(1))

    if total == 0 and DIGITS_RE.match(text):
        total = int(text)
    return _positive_minutes(total)


def parse_rating(value: Any) -> Optional[float]:
    """Coerce a rating; falsy input (including 0) is treated as missing."""
    if not value:
        return None
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        m = FLOAT_PREFIX_RE.match(value.strip())
        if not m:
            return None
        rating = float(m.group(0))
        return None if math.isinf(rating) else rating
    return None


def clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = value.strip()
    if not text or text == NONE_SENTINEL:
        return None
    return text


def format_serves(value: Any) -> Optional[str]:
    if not value:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list, bool)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def normalize_recipe(raw: Mapping[str, Any]) -> Optional[CanonicalRecipe]:
    """Map one raw dump record to a CanonicalRecipe, or None to skip it."""
    title = get_string(raw, "title")
    if title is None or not title.strip():
        return None

    try:
        return CanonicalRecipe(
            title=title.strip(),
            description=clean_text(get_string(raw, "description")),
            cuisine=clean_text(get_string(raw, "cuisine")),
            rating=parse_rating(raw.get("rating")),
            prep_time=parse_duration(raw.get("prep_time")),
            cook_time=parse_duration(raw.get("cook_time")),
            total_time=parse_duration(raw.get("total_time")),
            serves=format_serves(raw.get("serves")),
            nutrients=get_object(raw, "nutrients"),
        )
    except Exception:
        logger.exception("Error mapping recipe data for %r", title)
        return None
