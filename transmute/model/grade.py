from __future__ import annotations

import typing as t

import pydantic as p

from .base import BaseModel
from .enum import GradeType
from .id import CourseID, GradeItemID, UserID

SHADOW_SOURCE: t.Final = "local_customtransmute"
SHADOW_SUFFIX: t.Final = " (Transmuted)"

SHADOW_MAX_SCORE: t.Final = 100.0
SHADOW_MIN_SCORE: t.Final = 0.0
SHADOW_PASS_SCORE: t.Final = 75.0


class GradeItem(BaseModel):
    item_id: GradeItemID
    course_id: CourseID
    name: str = ""
    grade_type: GradeType = GradeType.Value

    max_score: float
    min_score: float = 0.0
    pass_score: float | None = None

    source: str | None = None
    source_item_id: GradeItemID | None = None
    hidden: bool = False

    @property
    def is_shadow(self) -> bool:
        return self.source == SHADOW_SOURCE

    @property
    def is_numeric(self) -> bool:
        return self.grade_type is GradeType.Value

    @property
    def is_eligible(self) -> bool:
        """Numeric items with a positive maximum can be transmuted"""
        return self.is_numeric and self.max_score > 0

    @property
    def shadow_name(self) -> str:
        return f"{self.name}{SHADOW_SUFFIX}"


class ShadowItem(GradeItem):
    """A grade item holding the transmuted scores of exactly one original item"""

    source: t.Literal["local_customtransmute"] = SHADOW_SOURCE
    source_item_id: GradeItemID

    max_score: float = SHADOW_MAX_SCORE
    min_score: float = SHADOW_MIN_SCORE
    pass_score: float | None = SHADOW_PASS_SCORE


class Grade(BaseModel):
    item_id: GradeItemID
    user_id: UserID

    raw_score: float | None = None
    final_score: float | None = None


class ItemCreatedEvent(BaseModel):
    model_config = p.ConfigDict(frozen=True)

    item_id: GradeItemID
    course_id: CourseID
    max_score: float
    item_name: str = ""
    item_source: str | None = None
    grade_type: GradeType = GradeType.Value
    hidden: bool = False

    @classmethod
    def from_item(cls, item: GradeItem) -> ItemCreatedEvent:
        return ItemCreatedEvent(
            item_id=item.item_id,
            course_id=item.course_id,
            max_score=item.max_score,
            item_name=item.name,
            item_source=item.source,
            grade_type=item.grade_type,
            hidden=item.hidden,
        )

    @property
    def item(self) -> GradeItem:
        return GradeItem(
            item_id=self.item_id,
            course_id=self.course_id,
            name=self.item_name,
            grade_type=self.grade_type,
            max_score=self.max_score,
            source=self.item_source,
            hidden=self.hidden,
        )


class ScoreChangedEvent(ItemCreatedEvent):
    user_id: UserID
    final_score: float | None = None

    @classmethod
    def from_grade(cls, item: GradeItem, grade: Grade) -> ScoreChangedEvent:
        return cls(
            item_id=item.item_id,
            course_id=item.course_id,
            max_score=item.max_score,
            item_name=item.name,
            item_source=item.source,
            grade_type=item.grade_type,
            hidden=item.hidden,
            user_id=grade.user_id,
            final_score=grade.final_score,
        )
