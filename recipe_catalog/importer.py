"""
Bulk importer.

Records are processed one at a time; every insert is committed before the
next record starts. A record that fails to persist is reported and the run
moves on, so one bad row never blocks the rest of the batch.
"""

import logging
from typing import Any, Mapping, Sequence

from .errors import RecordPersistError
from .models import ImportReport, RecordError
from .normalizer import normalize_recipe

logger = logging.getLogger(__name__)

SKIPPED = "skipped"
INSERTED = "inserted"

# how many persistence errors are logged in full
LOGGED_ERRORS = 5


def _record_label(raw: Mapping[str, Any]) -> str:
    title = raw.get("title")
    return str(title) if title else "Unknown"


def import_one(store, index: int, raw: Mapping[str, Any]):
    """Import a single raw record; returns SKIPPED, INSERTED or a RecordError."""
    recipe = normalize_recipe(raw)
    if recipe is None:
        return SKIPPED
    try:
        store.insert(recipe)
    except RecordPersistError as e:
        return RecordError(index=index, recipe=_record_label(raw), error=str(e))
    return INSERTED


def import_all(
    store,
    records: Sequence[Mapping[str, Any]],
    progress_every: int = 100,
) -> ImportReport:
    """Normalize and insert every record, folding the outcomes into a report."""
    report = ImportReport()

    for index, raw in enumerate(records):
        outcome = import_one(store, index, raw)

        if outcome == SKIPPED:
            report.skipped += 1
            if progress_every and report.skipped % progress_every == 0:
                logger.info("Skipped %d recipes with missing titles...", report.skipped)
        elif outcome == INSERTED:
            report.inserted += 1
            if progress_every and report.inserted % progress_every == 0:
                logger.info("Imported %d recipes...", report.inserted)
        else:
            report.errors.append(outcome)
            if len(report.errors) <= LOGGED_ERRORS:
                logger.error("Recipe %r (index %d): %s", outcome.recipe, outcome.index, outcome.error)

    logger.info(
        "Import finished: %d inserted, %d skipped, %d errors",
        report.inserted, report.skipped, len(report.errors),
    )
    return report
