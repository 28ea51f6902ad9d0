"""Tests for the transmute command line."""

from __future__ import annotations

import typing as t
from pathlib import Path

import pytest
import sqlalchemy
from click.testing import CliRunner
from sqlalchemy.orm import Session

import transmute.lib.cli as click
from transmute.cli.__main__ import main
from transmute.cli.shadow import shadow_backfill, shadow_sync
from transmute.core import TransmuteContainer
from transmute.model import Grade, GradeItem, UserID
from transmute.storage import grade as grade_storage
from transmute.storage import shadow as shadow_storage

if t.TYPE_CHECKING:
    from conftest import StaticConfig


@pytest.fixture
def invoke() -> t.Callable[..., t.Any]:
    runner = CliRunner()

    def run(*args: str) -> t.Any:
        return runner.invoke(main, ["-E", "test", *args], obj=TransmuteContainer())

    return run


class TestCalculate(object):
    def test_lower_segment(self, invoke: t.Callable[..., t.Any]) -> None:
        result = invoke("calculate", "45", "100")

        assert result.exit_code == 0, result.output
        assert "Transmuted Grade: 72" in result.output
        assert "45.00%" in result.output
        assert "lower" in result.output

    def test_passing_score(self, invoke: t.Callable[..., t.Any]) -> None:
        result = invoke("calculate", "18", "20")

        assert result.exit_code == 0, result.output
        assert "Transmuted Grade: 94" in result.output
        assert "upper" in result.output

    def test_min_floor_option(self, invoke: t.Callable[..., t.Any]) -> None:
        result = invoke("calculate", "--min-floor", "70", "0", "50")

        assert result.exit_code == 0, result.output
        assert "Transmuted Grade: 70" in result.output

    def test_min_floor_override(self, invoke: t.Callable[..., t.Any]) -> None:
        """-o overrides the floor read from transmutation.yaml."""
        result = invoke("-o", "transmutation.min_floor=60", "calculate", "0", "50")

        assert result.exit_code == 0, result.output
        assert "Transmuted Grade: 60" in result.output

    def test_score_exceeds_total(self, invoke: t.Callable[..., t.Any]) -> None:
        result = invoke("calculate", "30", "20")

        assert result.exit_code == 2
        assert "Score cannot exceed total items" in result.output

    def test_zero_total(self, invoke: t.Callable[..., t.Any]) -> None:
        result = invoke("calculate", "0", "0")

        assert result.exit_code == 2
        assert "non-negative" in result.output

    def test_floor_out_of_range(self, invoke: t.Callable[..., t.Any]) -> None:
        result = invoke("calculate", "--min-floor", "120", "10", "20")

        assert result.exit_code == 2

    def test_degenerate_curve(self, invoke: t.Callable[..., t.Any]) -> None:
        result = invoke("calculate", "0.1", "1")

        assert result.exit_code == 1
        assert "degenerate_curve" in result.output


class TestShadow(object):
    """The shadow commands, run against the test transaction."""

    def test_backfill(
        self,
        db_session: Session,
        static_config: type[StaticConfig],
        item_factory: t.Callable[..., GradeItem],
        grade_factory: t.Callable[..., Grade],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        quiz = item_factory(course_id=61, name="Quiz")
        grade_factory(quiz, user_id=1, final_score=45.0)

        rs = shadow_backfill.callback(course_id=61, session=db_session, config=static_config())  # type: ignore

        assert rs == 0
        out = capsys.readouterr().out
        assert "Items: 1" in out
        assert "Grades written: 1" in out

    def test_sync(
        self,
        db_session: Session,
        static_config: type[StaticConfig],
        test_item: GradeItem,
        grade_factory: t.Callable[..., Grade],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        grade_factory(test_item, user_id=4, final_score=100.0)

        rs = shadow_sync.callback(  # type: ignore
            item_id=test_item.item_id, user_id=4, session=db_session, config=static_config()
        )

        assert rs == 0
        assert "Wrote 100" in capsys.readouterr().out
        with db_session.begin():
            shadow = shadow_storage.find_item(test_item.course_id, test_item.item_id, session=db_session)
            assert shadow is not None
            stored = grade_storage.get(shadow.item_id, UserID(4), session=db_session)
        assert stored is not None
        assert stored.final_score == 100.0

    def test_sync_missing_grade(
        self,
        db_session: Session,
        static_config: type[StaticConfig],
        test_item: GradeItem,
    ) -> None:
        with pytest.raises(click.ClickException, match="has no grade"):
            shadow_sync.callback(  # type: ignore
                item_id=test_item.item_id, user_id=99, session=db_session, config=static_config()
            )


class TestSchema(object):
    """Migrations against a sqlite file, so that separate invocations share a database."""

    @pytest.fixture
    def database(self, tmp_path: Path) -> Path:
        return tmp_path / "gradebook.db"

    @pytest.fixture
    def schema(self, invoke: t.Callable[..., t.Any], database: Path) -> t.Callable[..., t.Any]:
        def run(*args: str) -> t.Any:
            return invoke("-o", f"storage.persistent.database.database={database}", "schema", *args)

        return run

    def tables(self, database: Path) -> set[str]:
        engine = sqlalchemy.create_engine(f"sqlite:///{database}")
        try:
            return set(sqlalchemy.inspect(engine).get_table_names())
        finally:
            engine.dispose()

    def test_up(self, schema: t.Callable[..., t.Any], database: Path) -> None:
        result = schema("up")

        assert result.exit_code == 0, result.output
        assert "Upgraded schema to 001_initial" in result.output
        assert {"grade_items", "grade_grades", "alembic_version"} <= self.tables(database)

    def test_current(self, schema: t.Callable[..., t.Any]) -> None:
        result = schema("current")
        assert result.exit_code == 0, result.output
        assert "Schema revision: none (head is 001_initial)" in result.output

        schema("up")
        result = schema("current")

        assert result.exit_code == 0, result.output
        assert "Schema revision: 001_initial (up to date)" in result.output

    def test_down(self, schema: t.Callable[..., t.Any], database: Path) -> None:
        schema("up")

        result = schema("down", "base")

        assert result.exit_code == 0, result.output
        assert "Downgraded schema to none" in result.output
        assert not {"grade_items", "grade_grades"} & self.tables(database)

    def test_stamp(self, schema: t.Callable[..., t.Any], database: Path) -> None:
        result = schema("stamp", "head")

        assert result.exit_code == 0, result.output
        assert "Schema revision: 001_initial (up to date)" in schema("current").output
        assert "grade_items" not in self.tables(database)
