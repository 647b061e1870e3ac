"""
Tests for import file path validation.
"""

import os

import pytest

from recipe_catalog.errors import NotAFileError, NotReadableError, PathError, PathNotFoundError
from recipe_catalog.paths import resolve_json_path, validate_json_path


def test_valid_file_resolves_to_absolute_path(write_dump, monkeypatch, tmp_path):
    write_dump([], name="dump.json")
    monkeypatch.chdir(tmp_path)

    resolved = validate_json_path("dump.json")
    assert resolved.is_absolute()
    assert resolved == tmp_path / "dump.json"


def test_missing_file(tmp_path):
    with pytest.raises(PathNotFoundError, match="File not found"):
        validate_json_path(tmp_path / "nope.json")


def test_directory_is_not_a_file(tmp_path):
    with pytest.raises(NotAFileError):
        validate_json_path(tmp_path)


@pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root can read anything")
def test_unreadable_file(write_dump):
    path = write_dump([])
    path.chmod(0o000)
    try:
        with pytest.raises(NotReadableError):
            validate_json_path(path)
    finally:
        path.chmod(0o644)


def test_resolve_falls_back_to_base_dir(write_dump, tmp_path, monkeypatch):
    write_dump([], name="dump.json")
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)

    assert resolve_json_path("dump.json", tmp_path) == tmp_path / "dump.json"


def test_resolve_reports_all_candidates(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(PathError) as exc:
        resolve_json_path("missing.json", tmp_path / "data")
    message = str(exc.value)
    assert "Invalid JSON file path: missing.json" in message
    assert str(tmp_path / "data" / "missing.json") in message
