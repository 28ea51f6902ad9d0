from __future__ import annotations

import sqlalchemy as sqla
import sqlalchemy.exc

from transmute.core import di
from transmute.model import Grade, GradeItemID, UserID

from . import Session
from .table import grade_grades


def get(
    item_id: GradeItemID,
    user_id: UserID,
    *,
    lock: bool = False,
    session: Session = di.Provide["storage.persistent.session"],
) -> Grade | None:
    stmt = sqla.select(grade_grades.__table__).where(
        grade_grades.item_id == item_id,
        grade_grades.user_id == user_id,
    )
    if lock:
        stmt = stmt.with_for_update()
    row = session.execute(stmt).mappings().one_or_none()
    return Grade(**row) if row else None


def find(
    *,
    item_id: GradeItemID | None = None,
    user_id: UserID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Grade, ...]:
    stmt = sqla.select(grade_grades.__table__).order_by(grade_grades.item_id, grade_grades.user_id)
    if item_id is not None:
        stmt = stmt.where(grade_grades.item_id == item_id)
    if user_id is not None:
        stmt = stmt.where(grade_grades.user_id == user_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(Grade(**row) for row in rows)


def upsert(
    item_id: GradeItemID,
    user_id: UserID,
    *,
    raw_score: float | None,
    final_score: float | None,
    session: Session = di.Provide["storage.persistent.session"],
) -> Grade:
    """Insert the grade, or overwrite its scores if it already exists.

    The existing row is locked for the rest of the transaction. A concurrent
    insert of the same row turns the insert into an update.
    """
    values = {"raw_score": raw_score, "final_score": final_score}
    update = (
        sqla
        .update(grade_grades)
        .where(grade_grades.item_id == item_id, grade_grades.user_id == user_id)
        .values(**values)
    )

    if get(item_id, user_id, lock=True, session=session) is not None:
        session.execute(update)
    else:
        try:
            with session.begin_nested():
                session.execute(sqla.insert(grade_grades).values(item_id=item_id, user_id=user_id, **values))
        except sqlalchemy.exc.IntegrityError:
            session.execute(update)
    session.flush()

    grade = get(item_id, user_id, session=session)
    assert grade is not None
    return grade
