"""
API tests against the FastAPI app object, no running server required.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from recipe_catalog.models import CanonicalRecipe
from recipe_catalog.store import RecipeStore


@pytest.fixture
def client(tmp_path, monkeypatch):
    db_path = tmp_path / "api.db"
    with RecipeStore(str(db_path)) as store:
        store.initialize()
        for i in range(25):
            store.insert(CanonicalRecipe(
                title=f"Recipe {i:02d}",
                cuisine="Italian" if i % 2 else "Mexican",
                rating=i / 5 if i else None,
                total_time=10 + i,
                nutrients={"calories": f"{100 * i} kcal"},
            ))

    monkeypatch.setenv("DATABASE_PATH", str(db_path))
    monkeypatch.setenv("ENVIRONMENT", "production")

    # Clear cached settings to pick up env changes
    from recipe_catalog.config import get_settings

    get_settings.cache_clear()

    from main import app

    with TestClient(app) as c:
        yield c
    get_settings.cache_clear()


def test_root_and_index(client: TestClient):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["success"] is True

    r = client.get("/api")
    assert "GET /api/recipes/search" in r.json()["endpoints"]


def test_list_defaults(client: TestClient):
    data = client.get("/api/recipes").json()
    assert data["success"] is True
    assert (data["page"], data["limit"], data["total"], data["totalPages"]) == (1, 10, 25, 3)
    assert data["hasNext"] is True and data["hasPrev"] is False
    assert data["data"][0]["title"] == "Recipe 24"
    assert data["data"][0]["nutrients"] == {"calories": "2400 kcal"}


def test_list_clamps_page_and_limit(client: TestClient):
    data = client.get("/api/recipes", params={"page": 0, "limit": 500}).json()
    assert data["page"] == 1
    assert data["limit"] == 100
    assert len(data["data"]) == 25

    data = client.get("/api/recipes", params={"limit": 0}).json()
    assert data["limit"] == 1


def test_list_last_page_has_nulls_last(client: TestClient):
    data = client.get("/api/recipes", params={"page": 3, "limit": 10}).json()
    assert data["hasNext"] is False and data["hasPrev"] is True
    assert [r["title"] for r in data["data"]][-1] == "Recipe 00"


def test_list_sorting_with_invalid_column(client: TestClient):
    data = client.get("/api/recipes", params={"sortBy": "nope", "sortOrder": "ASC", "limit": 1}).json()
    assert data["data"][0]["title"] == "Recipe 01"

    data = client.get("/api/recipes", params={"sortBy": "title", "sortOrder": "ASC", "limit": 1}).json()
    assert data["data"][0]["title"] == "Recipe 00"


def test_search_filters(client: TestClient):
    r = client.get("/api/recipes/search", params={"cuisine": "ital", "rating": ">=4", "calories": "<2200"})
    data = r.json()
    assert r.status_code == 200
    assert data["filters"] == {"cuisine": "ital", "rating": ">=4", "calories": "<2200"}
    assert [row["title"] for row in data["data"]] == ["Recipe 21"]
    assert data["count"] == 1


def test_search_ignores_bad_filter_syntax(client: TestClient):
    data = client.get("/api/recipes/search", params={"total_time": "quick", "title": "recipe 1"}).json()
    assert data["count"] == 10


def test_search_full_text(client: TestClient):
    data = client.get("/api/recipes/search", params={"q": "recipe 07"}).json()
    assert [row["title"] for row in data["data"]] == ["Recipe 07"]


def test_get_by_id(client: TestClient):
    r = client.get("/api/recipes/1")
    assert r.status_code == 200
    assert r.json()["data"]["title"] == "Recipe 00"

    r = client.get("/api/recipes/999")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Recipe not found"}

    r = client.get("/api/recipes/abc")
    assert r.status_code == 400


def test_stats_and_health(client: TestClient):
    stats = client.get("/api/stats").json()
    assert stats["data"]["totalRecipes"] == 25

    health = client.get("/api/health").json()
    assert health["status"] == "healthy"
    assert health["data"]["recipesInDatabase"] == 25


def test_unknown_endpoint(client: TestClient):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    data = r.json()
    assert data["success"] is False
    assert data["message"] == "Endpoint not found"
    assert "/api/recipes" in data["availableEndpoints"]
