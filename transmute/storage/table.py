import datetime

from sqlalchemy import ForeignKey, func, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, MappedAsDataclass


class base(MappedAsDataclass, DeclarativeBase): ...


class grade_items(base):
    """Gradebook columns; shadow items are rows whose source is the transmute tag."""

    __tablename__ = "grade_items"
    __table_args__ = (UniqueConstraint("course_id", "source", "source_item_id", name="uq_grade_items_source_item"),)

    item_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True, init=False)
    course_id: Mapped[int] = mapped_column(index=True)
    name: Mapped[str]
    max_score: Mapped[float]

    grade_type: Mapped[str] = mapped_column(default="value")
    min_score: Mapped[float] = mapped_column(default=0.0)
    pass_score: Mapped[float | None] = mapped_column(default=None)

    source: Mapped[str | None] = mapped_column(default=None)
    source_item_id: Mapped[int | None] = mapped_column(ForeignKey("grade_items.item_id"), default=None)
    hidden: Mapped[bool] = mapped_column(default=False)

    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())


class grade_grades(base):
    __tablename__ = "grade_grades"

    item_id: Mapped[int] = mapped_column(ForeignKey("grade_items.item_id"), primary_key=True)
    user_id: Mapped[int] = mapped_column(primary_key=True)

    raw_score: Mapped[float | None] = mapped_column(default=None)
    final_score: Mapped[float | None] = mapped_column(default=None)

    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())
