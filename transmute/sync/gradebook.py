"""Collaborator contracts the synchronization core depends on."""

from __future__ import annotations

import contextlib
import typing as t

from transmute.model import CourseID, Grade, GradeItem, GradeItemID, ShadowItem, UserID


class Gradebook(t.Protocol):
    """Persistence for shadow items and their grades.

    ``atomic()`` delimits one serializable unit: everything written inside it
    is committed together or not at all, and concurrent units for the same
    (item, user) pair must not interleave.
    """

    def atomic(self) -> contextlib.AbstractContextManager[t.Any]: ...

    def find_shadow_item(self, course_id: CourseID, original_item_id: GradeItemID) -> ShadowItem | None: ...

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
    ) -> ShadowItem: ...

    def upsert_shadow_grade(
        self, shadow_item_id: GradeItemID, user_id: UserID, raw_score: float, final_score: float
    ) -> None: ...


class GradebookReader(t.Protocol):
    """Read access to the host's original items, used when backfilling."""

    def atomic(self) -> contextlib.AbstractContextManager[t.Any]: ...

    def find_items(self, course_id: CourseID | None = None) -> t.Sequence[GradeItem]: ...

    def find_grades(self, item_id: GradeItemID) -> t.Sequence[Grade]: ...


class ConfigProvider(t.Protocol):
    def get_config(self, name: str) -> t.Any | None: ...
