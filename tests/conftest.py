import json

import pytest

from recipe_catalog.store import RecipeStore


@pytest.fixture
def store(tmp_path):
    s = RecipeStore(str(tmp_path / "recipes.db"))
    s.initialize()
    yield s
    s.close()


@pytest.fixture
def write_dump(tmp_path):
    """Write a JSON payload (or raw text) to a dump file and return its path."""

    def _write(payload, name="recipes.json"):
        path = tmp_path / name
        text = payload if isinstance(payload, str) else json.dumps(payload)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
