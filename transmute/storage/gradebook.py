from __future__ import annotations

import contextlib
import typing as t

from transmute.model import CourseID, Grade, GradeItem, GradeItemID, GradeType, ShadowItem, UserID

from . import grade as grade_storage
from . import grade_item as grade_item_storage
from . import Session
from . import shadow as shadow_storage


class SQLGradebook(object):
    """Gradebook backed by the grade_items and grade_grades tables.

    ``atomic()`` opens a transaction on the session, or a savepoint when one
    is already open. Shadow lookups lock the matching row so that concurrent
    units for the same item serialize.
    """

    def __init__(self, session: Session):
        self.session = session

    @contextlib.contextmanager
    def atomic(self) -> t.Generator[Session]:
        if self.session.in_transaction():
            with self.session.begin_nested():
                yield self.session
        else:
            with self.session.begin():
                yield self.session

    def find_shadow_item(self, course_id: CourseID, original_item_id: GradeItemID) -> ShadowItem | None:
        return shadow_storage.find_item(course_id, original_item_id, lock=True, session=self.session)

    def create_shadow_item(
        self,
        course_id: CourseID,
        original_item_id: GradeItemID,
        name: str,
        *,
        max_score: float = 100.0,
        min_score: float = 0.0,
        pass_score: float | None = 75.0,
        hidden: bool = False,
    ) -> ShadowItem:
        return shadow_storage.create_item(
            course_id,
            original_item_id,
            name,
            max_score=max_score,
            min_score=min_score,
            pass_score=pass_score,
            hidden=hidden,
            session=self.session,
        )

    def upsert_shadow_grade(
        self, shadow_item_id: GradeItemID, user_id: UserID, raw_score: float, final_score: float
    ) -> None:
        grade_storage.upsert(
            shadow_item_id, user_id, raw_score=raw_score, final_score=final_score, session=self.session
        )

    def find_items(self, course_id: CourseID | None = None) -> tuple[GradeItem, ...]:
        return grade_item_storage.find(
            course_id=course_id, grade_type=GradeType.Value, include_shadows=False, session=self.session
        )

    def find_grades(self, item_id: GradeItemID) -> tuple[Grade, ...]:
        return grade_storage.find(item_id=item_id, session=self.session)
