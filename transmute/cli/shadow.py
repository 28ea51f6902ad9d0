"""Maintain transmuted shadow grade items in the configured gradebook database."""

from __future__ import annotations

import contextlib

from sqlalchemy.orm import Session

import transmute.lib.cli as click
from transmute.core import ConfigProvider, di
from transmute.model import GradeItemID, ScoreChangedEvent, UserID
from transmute.storage import grade as grade_storage
from transmute.storage import grade_item as grade_item_storage
from transmute.storage.gradebook import SQLGradebook
from transmute.sync import backfill, on_score_changed, ShadowSyncPolicy, SyncStatus


@click.group("shadow")
def shadow():
    """Create and resynchronize shadow grade items."""
    ...


@shadow.command("backfill")
@click.option("--course", "course_id", type=int, default=None, help="only backfill items of this course")
@di.inject
def shadow_backfill(
    course_id: int | None,
    session: Session = di.Provide["storage.persistent.session"],
    config: ConfigProvider = di.Provide["config_provider"],
) -> int:
    """Ensure every numeric grade item has a shadow, and resync all grades."""
    with contextlib.closing(session):
        gradebook = SQLGradebook(session)
        report = backfill(ShadowSyncPolicy(gradebook, config), gradebook, course_id=course_id)

    click.echo(f"Items: {report.items}")
    click.echo(f"  Shadows ensured: {report.ensured}")
    click.echo(f"  Grades written: {report.written}")
    click.echo(f"  Skipped: {report.skipped}")
    if report.failed:
        click.echo(click.style(f"  Failed: {report.failed}", fg="red"))
        return 1
    return 0


@shadow.command("sync")
@click.argument("item_id", type=int)
@click.argument("user_id", type=int)
@di.inject
def shadow_sync(
    item_id: int,
    user_id: int,
    session: Session = di.Provide["storage.persistent.session"],
    config: ConfigProvider = di.Provide["config_provider"],
) -> int:
    """Resync the transmuted grade of USER_ID for grade item ITEM_ID."""
    with contextlib.closing(session):
        gradebook = SQLGradebook(session)
        with gradebook.atomic():
            item = grade_item_storage.get(GradeItemID(item_id), session=session)
            grade = grade_storage.get(GradeItemID(item_id), UserID(user_id), session=session)

        if item is None:
            raise click.ClickException(f"grade item {item_id} not found")
        if grade is None:
            raise click.ClickException(f"user {user_id} has no grade for item {item_id}")

        outcome = on_score_changed(ScoreChangedEvent.from_grade(item, grade), ShadowSyncPolicy(gradebook, config))

    if outcome.status is SyncStatus.Written:
        assert outcome.shadow is not None
        click.echo(f"Wrote {outcome.value:g} to shadow item {outcome.shadow.item_id} ({outcome.shadow.name})")
        return 0

    click.echo(f"{outcome.status.value}: {outcome.reason}")
    return 1 if outcome.status is SyncStatus.Failed else 0
