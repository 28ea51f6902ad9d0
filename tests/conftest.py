"""Pytest fixtures for transmute tests.

Storage tests run against the in-memory sqlite database configured for the
test environment. Each test runs within a transaction that is rolled back
afterwards, so tests do not see each other's rows.

Policy tests use ``MemoryGradebook``, which keeps items and grades in dicts
and can be told to fail on a given operation.

Usage:
    def test_sync(gradebook: SQLGradebook, item_factory):
        item = item_factory(name="Quiz 1", max_score=20)
"""

from __future__ import annotations

import contextlib
import itertools
import os
import typing as t
from pathlib import Path

import pydantic as p
import pytest
from sqlalchemy.orm import Session

import transmute
from transmute.core import TransmuteContainer
from transmute.model import CourseID, DeploymentEnvironment, Grade, GradeItem, GradeItemID, GradeType, \
    ScoreChangedEvent, ShadowItem, UserID
from transmute.storage import grade as grade_storage
from transmute.storage import grade_item as grade_item_storage
from transmute.storage.gradebook import SQLGradebook
from transmute.storage.table import base
from transmute.sync import ShadowSyncPolicy

ROOT = Path(os.path.dirname(transmute.__file__)).parent


@pytest.fixture(scope="session")
def container() -> t.Generator[TransmuteContainer]:
    """Boot the DI container once, in the test environment, and create the schema."""
    ct = TransmuteContainer()

    TransmuteContainer.boot(
        ct,
        debug=True,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{ROOT}/config"),
        override=(),
    )
    base.metadata.create_all(ct.storage().persistent().engine())

    yield ct

    ct.shutdown_resources()


@pytest.fixture
def db_session(container: TransmuteContainer) -> t.Generator[Session]:
    """Provide a database session wrapped in a transaction.

    join_transaction_mode="create_savepoint" makes session.begin() open a
    savepoint inside the outer transaction, which is rolled back at the end.
    """
    engine = container.storage().persistent().engine()

    connection = engine.connect()
    transaction = connection.begin()

    session = Session(
        bind=connection,
        autobegin=False,
        join_transaction_mode="create_savepoint",
    )

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def gradebook(db_session: Session) -> SQLGradebook:
    return SQLGradebook(db_session)


@pytest.fixture
def item_factory(db_session: Session) -> t.Callable[..., GradeItem]:
    """Factory fixture for creating original grade items.

    Usage:
        def test_something(item_factory):
            item = item_factory(name="Quiz 1", max_score=20)
    """

    def create_item(
        course_id: int = 1,
        name: str = "Quiz 1",
        max_score: float = 100.0,
        grade_type: GradeType = GradeType.Value,
        hidden: bool = False,
    ) -> GradeItem:
        with db_session.begin():
            return grade_item_storage.create(
                {
                    "course_id": CourseID(course_id),
                    "name": name,
                    "max_score": max_score,
                    "grade_type": grade_type,
                    "hidden": hidden,
                },
                session=db_session,
            )

    return create_item


@pytest.fixture
def grade_factory(db_session: Session) -> t.Callable[..., Grade]:
    """Factory fixture for storing a user's score on an item."""

    def create_grade(item: GradeItem, user_id: int = 7, final_score: float | None = 45.0) -> Grade:
        with db_session.begin():
            return grade_storage.upsert(
                item.item_id, UserID(user_id), raw_score=final_score, final_score=final_score, session=db_session
            )

    return create_grade


@pytest.fixture
def test_item(item_factory: t.Callable[..., GradeItem]) -> GradeItem:
    return item_factory(name="Midterm Exam", max_score=100.0)


class StaticConfig(object):
    def __init__(self, **values: t.Any):
        self.values = values

    def get_config(self, name: str) -> t.Any | None:
        return self.values.get(name)


class MemoryGradebook(object):
    """Dict-backed gradebook; ``atomic()`` restores both dicts on error."""

    def __init__(self, items: t.Iterable[GradeItem] = (), grades: t.Iterable[Grade] = ()):
        self.items: dict[GradeItemID, GradeItem] = {i.item_id: i for i in items}
        self.grades: dict[tuple[GradeItemID, UserID], Grade] = {(g.item_id, g.user_id): g for g in grades}
        self.fail_on: set[str] = set()
        self._ids = itertools.count(max(self.items, default=0) + 1000)

    @contextlib.contextmanager
    def atomic(self) -> t.Generator[MemoryGradebook]:
        items, grades = dict(self.items), dict(self.grades)
        try:
            yield self
        except Exception:
            self.items, self.grades = items, grades
            raise

    def find_shadow_item(self, course_id: CourseID, original_item_id: GradeItemID) -> ShadowItem | None:
        self._check("find_shadow_item")
        for item in self.items.values():
            if isinstance(item, ShadowItem) and item.course_id == course_id and item.source_item_id == original_item_id:
                return item
        return None

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
        self._check("create_shadow_item")
        shadow = ShadowItem(
            item_id=GradeItemID(next(self._ids)),
            course_id=course_id,
            name=name,
            source_item_id=original_item_id,
            max_score=max_score,
            min_score=min_score,
            pass_score=pass_score,
            hidden=hidden,
        )
        self.items[shadow.item_id] = shadow
        return shadow

    def upsert_shadow_grade(
        self, shadow_item_id: GradeItemID, user_id: UserID, raw_score: float, final_score: float
    ) -> None:
        self._check("upsert_shadow_grade")
        self.grades[(shadow_item_id, user_id)] = Grade(
            item_id=shadow_item_id, user_id=user_id, raw_score=raw_score, final_score=final_score
        )

    def find_items(self, course_id: CourseID | None = None) -> tuple[GradeItem, ...]:
        return tuple(
            item
            for item in self.items.values()
            if not item.is_shadow and (course_id is None or item.course_id == course_id)
        )

    def find_grades(self, item_id: GradeItemID) -> tuple[Grade, ...]:
        return tuple(g for (iid, _), g in self.grades.items() if iid == item_id)

    @property
    def shadows(self) -> list[ShadowItem]:
        return [item for item in self.items.values() if isinstance(item, ShadowItem)]

    def _check(self, op: str) -> None:
        if op in self.fail_on:
            raise RuntimeError(f"{op} failed")


@pytest.fixture
def quiz() -> GradeItem:
    return GradeItem(item_id=GradeItemID(1), course_id=CourseID(10), name="Quiz 1", max_score=100.0)


@pytest.fixture
def memory_gradebook(quiz: GradeItem) -> MemoryGradebook:
    return MemoryGradebook(items=[quiz])


@pytest.fixture
def score_event(quiz: GradeItem) -> t.Callable[..., ScoreChangedEvent]:
    """Build a score change event for ``quiz`` unless another item is given."""

    def make_event(final_score: float | None = 45.0, user_id: int = 7, item: GradeItem | None = None) -> ScoreChangedEvent:
        item = item or quiz
        return ScoreChangedEvent.from_grade(
            item, Grade(item_id=item.item_id, user_id=UserID(user_id), raw_score=final_score, final_score=final_score)
        )

    return make_event


@pytest.fixture
def static_config() -> type[StaticConfig]:
    return StaticConfig


@pytest.fixture
def policy(memory_gradebook: MemoryGradebook) -> ShadowSyncPolicy:
    return ShadowSyncPolicy(memory_gradebook, StaticConfig(min_floor=65))
