# recipe_catalog/paths.py
import os
from pathlib import Path
from typing import Union

from .errors import NotAFileError, NotReadableError, PathError, PathNotFoundError

PathLike = Union[str, os.PathLike]


def validate_json_path(json_path: PathLike) -> Path:
    """Return the absolute path of an existing, regular, readable file."""
    resolved = Path(os.path.abspath(os.path.expanduser(os.fspath(json_path))))

    if not resolved.exists():
        raise PathNotFoundError(f"File not found: {resolved}")
    if not resolved.is_file():
        raise NotAFileError(f"Path is not a file: {resolved}")
    if not os.access(resolved, os.R_OK):
        raise NotReadableError(f"File is not readable: {resolved}")
    return resolved


def resolve_json_path(json_path: PathLike, base_dir: PathLike) -> Path:
    """
    Validate ``json_path`` as given, then relative to ``base_dir``.

    Raises a single PathError naming every failed candidate when none works.
    """
    try:
        return validate_json_path(json_path)
    except PathError as first:
        candidate = Path(base_dir) / os.fspath(json_path)
        try:
            return validate_json_path(candidate)
        except PathError as second:
            raise PathError(f"Invalid JSON file path: {os.fspath(json_path)}. {first}; {second}") from second
