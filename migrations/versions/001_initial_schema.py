"""Gradebook items and grades, with shadow item linkage

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""

import typing as t

from alembic import op
from sqlalchemy import func as f
from sqlalchemy.schema import Column, ForeignKey, UniqueConstraint
from sqlalchemy.types import Boolean, DateTime, Float, Integer, String

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | t.Sequence[str] | None = None
depends_on: str | t.Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "grade_items",
        Column("item_id", Integer, primary_key=True, autoincrement=True),
        Column("course_id", Integer, nullable=False, index=True),
        Column("name", String, nullable=False),
        Column("max_score", Float, nullable=False),
        Column("grade_type", String, nullable=False),
        Column("min_score", Float, nullable=False),
        Column("pass_score", Float, nullable=True),
        Column("source", String, nullable=True),
        Column("source_item_id", Integer, ForeignKey("grade_items.item_id"), nullable=True),
        Column("hidden", Boolean, nullable=False),
        Column("create_time", DateTime, server_default=f.now(), nullable=False),
        Column("update_time", DateTime, server_default=f.now(), onupdate=f.now(), nullable=False),
        UniqueConstraint("course_id", "source", "source_item_id", name="uq_grade_items_source_item"),
    )

    op.create_table(
        "grade_grades",
        Column("item_id", Integer, ForeignKey("grade_items.item_id"), primary_key=True),
        Column("user_id", Integer, primary_key=True),
        Column("raw_score", Float, nullable=True),
        Column("final_score", Float, nullable=True),
        Column("update_time", DateTime, server_default=f.now(), onupdate=f.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("grade_grades")
    op.drop_table("grade_items")
