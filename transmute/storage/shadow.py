from __future__ import annotations

import logging

import sqlalchemy as sqla
import sqlalchemy.exc

from transmute.core import di
from transmute.model import CourseID, GradeItemID, GradeType, SHADOW_SOURCE, ShadowItem

from . import Session
from .table import grade_items

logger = logging.getLogger(__name__)


def find_item(
    course_id: CourseID,
    original_item_id: GradeItemID,
    *,
    lock: bool = False,
    session: Session = di.Provide["storage.persistent.session"],
) -> ShadowItem | None:
    stmt = sqla.select(grade_items.__table__).where(
        grade_items.course_id == course_id,
        grade_items.source == SHADOW_SOURCE,
        grade_items.source_item_id == original_item_id,
    )
    if lock:
        stmt = stmt.with_for_update()
    row = session.execute(stmt).mappings().one_or_none()
    return ShadowItem(**row) if row else None


def create_item(
    course_id: CourseID,
    original_item_id: GradeItemID,
    name: str,
    *,
    max_score: float = 100.0,
    min_score: float = 0.0,
    pass_score: float | None = 75.0,
    hidden: bool = False,
    session: Session = di.Provide["storage.persistent.session"],
) -> ShadowItem:
    """Create the shadow item for an original item, or return the existing one.

    Two writers racing to create the same shadow both end up with the single
    row admitted by the (course_id, source, source_item_id) constraint.
    """
    stmt = sqla.insert(grade_items).values(
        course_id=course_id,
        name=name,
        grade_type=GradeType.Value.value,
        max_score=max_score,
        min_score=min_score,
        pass_score=pass_score,
        source=SHADOW_SOURCE,
        source_item_id=original_item_id,
        hidden=hidden,
    )
    try:
        with session.begin_nested():
            session.execute(stmt)
    except sqlalchemy.exc.IntegrityError:
        logger.debug(
            "shadow item already exists",
            extra={
                "course_id": course_id,
                "original_item_id": original_item_id,
            },
        )
    session.flush()

    shadow = find_item(course_id, original_item_id, lock=True, session=session)
    assert shadow is not None
    return shadow
