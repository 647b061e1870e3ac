"""
Safe accessors over untyped JSON values.

Every accessor answers ``None`` for "absent" instead of raising, so callers can
treat missing keys, JSON ``null`` and wrongly typed values the same way.
"""

import math
from typing import Any, Mapping, Optional


def is_object(value: Any) -> bool:
    return isinstance(value, dict)


def is_number(value: Any) -> bool:
    """True for finite ints and floats; JSON booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and (math.isnan(value) or math.isinf(value)))


def get_string(record: Mapping[str, Any], key: str) -> Optional[str]:
    value = record.get(key)
    return value if isinstance(value, str) else None


def get_number(record: Mapping[str, Any], key: str) -> Optional[float]:
    value = record.get(key)
    return value if is_number(value) else None


def get_object(record: Mapping[str, Any], key: str) -> Optional[dict]:
    value = record.get(key)
    return value if is_object(value) else None
