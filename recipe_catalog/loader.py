"""
JSON dump loader.

Recipe dumps show up in several outer shapes: a plain array, an object keyed
by stringified indexes (``{"0": {...}, "1": {...}}``), a ``{"data": [...]}``
envelope, or a generic object of objects. ``ShapeClassifier`` tries a list of
shape strategies in order and the first one that applies decides how the root
is flattened into an ordered list of raw records.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from .errors import InvalidJsonError, UnrecognizedFormatError
from .values import is_object

logger = logging.getLogger(__name__)

_INT_KEY_RE = re.compile(r"^-?[0-9]+$")

NUMERIC_KEY_THRESHOLD = 0.8


class ContainerShape:
    """One way of turning a parsed JSON root into a list of entries."""

    name = "shape"

    def extract(self, root: Any) -> Optional[list]:
        """Return the entries, or None when this shape does not apply."""
        raise NotImplementedError


class ArrayShape(ContainerShape):
    name = "array"

    def extract(self, root):
        return list(root) if isinstance(root, list) else None


class NumericKeyedShape(ContainerShape):
    """An array that was round-tripped through an object keyed by index."""

    name = "numeric-keyed"

    def __init__(self, threshold: float = NUMERIC_KEY_THRESHOLD):
        self.threshold = threshold

    def extract(self, root):
        if not isinstance(root, dict) or not root:
            return None
        numeric = [k for k in root if _INT_KEY_RE.match(k)]
        if len(numeric) / len(root) <= self.threshold:
            return None
        return [root[k] for k in sorted(numeric, key=int)]


class EnvelopeShape(ContainerShape):
    name = "envelope"

    def __init__(self, key: str = "data"):
        self.key = key

    def extract(self, root):
        if isinstance(root, dict) and isinstance(root.get(self.key), list):
            return list(root[self.key])
        return None


class ObjectOfObjectsShape(ContainerShape):
    name = "object-of-objects"

    def extract(self, root):
        if not isinstance(root, dict):
            return None
        return [v for v in root.values() if is_object(v)]


def default_shapes(threshold: float = NUMERIC_KEY_THRESHOLD) -> List[ContainerShape]:
    return [ArrayShape(), NumericKeyedShape(threshold), EnvelopeShape(), ObjectOfObjectsShape()]


class ShapeClassifier:
    def __init__(self, shapes: Optional[Sequence[ContainerShape]] = None):
        self.shapes = list(shapes) if shapes is not None else default_shapes()

    def classify(self, root: Any) -> Tuple[str, list]:
        for shape in self.shapes:
            entries = shape.extract(root)
            if entries is not None:
                return shape.name, entries
        raise UnrecognizedFormatError(
            f"JSON data is not in a recognized format (root is {type(root).__name__})"
        )


def parse_json_text(text: str) -> Any:
    try:
        return json.loads(text)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, over-long integer literals, too-deep nesting
        raise InvalidJsonError(f"Invalid JSON format: {e}") from e


def extract_records(root: Any, classifier: Optional[ShapeClassifier] = None) -> List[dict]:
    """Flatten a parsed JSON root into raw recipe records, dropping non-objects."""
    shape, entries = (classifier or ShapeClassifier()).classify(root)
    logger.info("JSON is %s format with %d entries", shape, len(entries))

    records = [e for e in entries if is_object(e)]
    dropped = len(entries) - len(records)
    if dropped:
        logger.warning("Skipped %d non-object entries", dropped)
    return records


def load_records(path: Path, classifier: Optional[ShapeClassifier] = None) -> List[dict]:
    """Read a JSON dump from ``path`` and return its raw recipe records."""
    path = Path(path)
    logger.info("Reading JSON file: %s", path)
    raw = path.read_bytes()
    logger.info("File size: %.2f MB", len(raw) / 1024 / 1024)

    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise InvalidJsonError(f"Invalid JSON format: file is not UTF-8 ({e})") from e

    records = extract_records(parse_json_text(text), classifier)
    if records:
        logger.info("Recipe keys: %s", list(records[0].keys())[:10])
    else:
        logger.info("No recipes found in JSON data")
    return records
