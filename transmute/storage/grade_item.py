from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from transmute.core import di
from transmute.model import CourseID, GradeItem, GradeItemID, GradeType, SHADOW_SOURCE, ShadowItem

from . import Session
from .table import grade_items


def get(key: GradeItemID, session: Session = di.Provide["storage.persistent.session"]) -> GradeItem | None:
    stmt = sqla.select(grade_items.__table__).where(grade_items.item_id == key)
    row = session.execute(stmt).mappings().one_or_none()
    return to_model(row) if row else None


def find(
    *,
    course_id: CourseID | None = None,
    grade_type: GradeType | None = None,
    include_shadows: bool = True,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[GradeItem, ...]:
    stmt = sqla.select(grade_items.__table__).order_by(grade_items.course_id, grade_items.item_id)
    if course_id is not None:
        stmt = stmt.where(grade_items.course_id == course_id)
    if grade_type is not None:
        stmt = stmt.where(grade_items.grade_type == grade_type.value)
    if not include_shadows:
        stmt = stmt.where(sqla.or_(grade_items.source.is_(None), grade_items.source != SHADOW_SOURCE))
    rows = session.execute(stmt).mappings().all()
    return tuple(to_model(row) for row in rows)


def create(params: GradeItemCreateParams, session: Session = di.Provide["storage.persistent.session"]) -> GradeItem:
    grade_type = params.get("grade_type", GradeType.Value)
    stmt = sqla.insert(grade_items).values(
        course_id=params["course_id"],
        name=params["name"],
        max_score=params["max_score"],
        grade_type=grade_type.value,
        min_score=params.get("min_score", 0.0),
        pass_score=params.get("pass_score"),
        source=params.get("source"),
        source_item_id=params.get("source_item_id"),
        hidden=params.get("hidden", False),
    )
    rs = session.execute(stmt)
    session.flush()
    (item_id,) = rs.inserted_primary_key  # pyright: ignore [reportGeneralTypeIssues]
    item = get(GradeItemID(item_id), session=session)
    assert item is not None
    return item


def to_model(row: t.Mapping[str, t.Any]) -> GradeItem:
    if row["source"] == SHADOW_SOURCE:
        return ShadowItem(**row)
    return GradeItem(**row)


class GradeItemCreateParams(t.TypedDict, total=False):
    course_id: t.Required[CourseID]
    name: t.Required[str]
    max_score: t.Required[float]
    grade_type: GradeType
    min_score: float
    pass_score: float | None
    source: str | None
    source_item_id: GradeItemID | None
    hidden: bool
