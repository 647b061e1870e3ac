"""
Tests for the bulk importer's per-record outcome handling.
"""

from recipe_catalog.errors import RecordPersistError
from recipe_catalog.importer import import_all


class FlakyStore:
    """Records insert attempts and fails for selected titles."""

    def __init__(self, fail_titles=()):
        self.fail_titles = set(fail_titles)
        self.attempted = []

    def insert(self, recipe):
        self.attempted.append(recipe.title)
        if recipe.title in self.fail_titles:
            raise RecordPersistError("UNIQUE constraint failed: recipes.title")
        return len(self.attempted)


def test_one_failure_does_not_block_the_batch():
    records = [{"title": f"Recipe {i}"} for i in range(100)]
    store = FlakyStore(fail_titles={"Recipe 37"})

    report = import_all(store, records)

    assert report.inserted == 99
    assert report.skipped == 0
    assert len(report.errors) == 1
    err = report.errors[0]
    assert err.index == 37
    assert err.recipe == "Recipe 37"
    assert "UNIQUE constraint failed" in err.error
    # everything after the failure was still attempted, in order
    assert store.attempted[38:] == [f"Recipe {i}" for i in range(38, 100)]
    assert len(store.attempted) == 100


def test_untitled_records_are_skipped_without_insert():
    records = [{"title": "Pie"}, {"title": "   "}, {"rating": 5}, {"title": None}]
    store = FlakyStore()

    report = import_all(store, records)

    assert report.inserted == 1
    assert report.skipped == 3
    assert report.errors == []
    assert store.attempted == ["Pie"]


def test_progress_is_logged(caplog):
    records = [{"title": f"R{i}"} for i in range(5)] + [{"title": ""}] * 2
    with caplog.at_level("INFO", logger="recipe_catalog.importer"):
        report = import_all(FlakyStore(), records, progress_every=2)

    assert report.inserted == 5
    messages = [r.getMessage() for r in caplog.records]
    assert "Imported 2 recipes..." in messages
    assert "Imported 4 recipes..." in messages
    assert "Skipped 2 recipes with missing titles..." in messages


def test_empty_batch():
    report = import_all(FlakyStore(), [])
    assert (report.inserted, report.skipped, report.errors) == (0, 0, [])
    assert report.processed == 0


def test_oversized_durations_do_not_stop_the_batch(store):
    records = [
        {"title": "A"},
        {"title": "Huge", "total_time": 1e300},
        {"title": "Longer", "cook_time": "9" * 25 + " minutes"},
        {"title": "C"},
    ]

    report = import_all(store, records)

    assert report.inserted == 2
    assert [(e.index, e.recipe) for e in report.errors] == [(1, "Huge"), (2, "Longer")]
    assert [r["title"] for r in store.search()] == ["A", "C"]
