# load_data.py
"""
Import a recipe JSON dump into the SQLite catalog (full replace).

Usage:
    python load_data.py [path/to/US_recipes.json] [--db recipes.db] [--keep-existing]

The dump path is taken from JSON_DATA_PATH, then the command-line argument,
then the configured default.
"""
import argparse
import logging
import sys
import time
from pathlib import Path

from recipe_catalog.config import LOG_FORMAT, get_settings
from recipe_catalog.errors import CatalogError
from recipe_catalog.importer import import_all
from recipe_catalog.loader import load_records
from recipe_catalog.models import ImportReport
from recipe_catalog.paths import resolve_json_path
from recipe_catalog.store import RecipeStore

logger = logging.getLogger("load_data")

SCRIPT_DIR = Path(__file__).resolve().parent


def pick_json_path(cli_path, settings) -> str:
    return settings.json_data_path or cli_path or settings.default_json_path


def print_report(report: ImportReport, elapsed: float, final_count: int, preview: int = 5) -> None:
    print(f"\nInserted: {report.inserted}")
    print(f"Skipped (missing title): {report.skipped}")
    print(f"Errors: {len(report.errors)}")
    if report.errors:
        print("\nImport Errors:")
        for err in report.errors[:preview]:
            print(f'   - Recipe "{err.recipe}" (index {err.index}): {err.error}')
        if len(report.errors) > preview:
            print(f"   - ... and {len(report.errors) - preview} more errors")
    print(f"\nElapsed: {elapsed:.2f}s")
    print(f"Final database count: {final_count} recipes")


def run(json_path: str, db_path: str, keep_existing: bool = False) -> int:
    settings = get_settings()

    try:
        with RecipeStore(db_path) as store:
            store.initialize()
            store.ping()

            path = resolve_json_path(json_path, SCRIPT_DIR)
            logger.info("JSON file path: %s", path)
            records = load_records(path)
            if not records:
                print("No valid recipes found in JSON file")
                return 0

            existing = store.count()
            if existing and not keep_existing:
                logger.info("Found %d existing recipes, clearing them", existing)
                store.delete_all()

            print(f"Importing {len(records)} recipes...")
            started = time.monotonic()
            report = import_all(store, records, progress_every=settings.import_progress_every)
            elapsed = time.monotonic() - started

            print_report(report, elapsed, store.count(), settings.import_error_preview)
    except (CatalogError, OSError) as e:
        logger.error("Import failed: %s", e)
        return 1
    return 0


def main(argv=None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Import recipes from a JSON dump into SQLite")
    parser.add_argument("json_path", nargs="?", help="recipe dump (JSON_DATA_PATH takes priority)")
    parser.add_argument("--db", default=settings.database_path, help="SQLite database file")
    parser.add_argument("--keep-existing", action="store_true", help="do not delete existing recipes first")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO, format=LOG_FORMAT)
    return run(pick_json_path(args.json_path, settings), args.db, args.keep_existing)


if __name__ == "__main__":
    sys.exit(main())
