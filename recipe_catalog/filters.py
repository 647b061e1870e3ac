# recipe_catalog/filters.py
import re
from typing import Any, Optional

from .models import FilterExpr

# filters like "<=400", ">=4.5" or a bare "30" (meaning "=30")
_FILTER_RE = re.compile(r"^(>=|<=|>|<|=)?([0-9]+(?:\.[0-9]+)?)$")

OPERATORS = (">=", "<=", ">", "<", "=")


def parse_filter(token: Any) -> Optional[FilterExpr]:
    """Parse a comparison token; None means "do not filter on this field"."""
    if not isinstance(token, str):
        return None
    m = _FILTER_RE.match(token.strip())
    if not m:
        return None
    number = m.group(2)
    value = float(number) if "." in number else int(number)
    return FilterExpr(operator=m.group(1) or "=", value=value)
