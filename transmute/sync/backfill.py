from __future__ import annotations

import collections
import logging

from transmute.model import BaseModel, CourseID, ItemCreatedEvent, ScoreChangedEvent

from .gradebook import GradebookReader
from .handler import on_item_created, on_score_changed
from .policy import ShadowSyncPolicy, SyncOutcome, SyncStatus

logger = logging.getLogger(__name__)


class BackfillReport(BaseModel):
    items: int = 0
    ensured: int = 0
    written: int = 0
    skipped: int = 0
    failed: int = 0
    statuses: dict[SyncStatus, int] = {}


def backfill(policy: ShadowSyncPolicy, reader: GradebookReader, *, course_id: CourseID | None = None) -> BackfillReport:
    """Create missing shadow items and resynchronize every existing grade.

    Items are processed one at a time; a failure on one item or grade is
    counted and does not stop the rest of the run.
    """
    with reader.atomic():
        items = tuple(reader.find_items(course_id=course_id))

    counts: collections.Counter[SyncStatus] = collections.Counter()

    def tally(outcome: SyncOutcome) -> SyncOutcome:
        counts[outcome.status] += 1
        return outcome

    for item in items:
        outcome = tally(on_item_created(ItemCreatedEvent.from_item(item), policy))
        if outcome.status is not SyncStatus.Ensured:
            continue

        with reader.atomic():
            grades = tuple(reader.find_grades(item.item_id))
        for grade in grades:
            tally(on_score_changed(ScoreChangedEvent.from_grade(item, grade), policy))

    report = BackfillReport(
        items=len(items),
        ensured=counts[SyncStatus.Ensured],
        written=counts[SyncStatus.Written],
        skipped=sum(n for status, n in counts.items() if status.skipped),
        failed=counts[SyncStatus.Failed],
        statuses=dict(counts),
    )
    logger.info("backfill finished", extra={"course_id": course_id, "report": report.model_dump(mode="json")})
    return report
