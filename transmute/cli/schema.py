from __future__ import annotations

import contextlib
import typing as t

import alembic.command
import alembic.config
import sqlalchemy
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

import transmute.lib.cli as click
from transmute.core import di

AlembicConfig: t.Final = di.Provide["storage.persistent.alembic_config"]
Engine: t.Final = di.Provide["storage.persistent.engine"]


@contextlib.contextmanager
def bound(alembic_conf: alembic.config.Config, engine: sqlalchemy.Engine) -> t.Generator[alembic.config.Config]:
    """Run migrations on a connection from ``engine`` rather than one opened by alembic."""
    with engine.begin() as connection:
        alembic_conf.attributes["connection"] = connection
        try:
            yield alembic_conf
        finally:
            del alembic_conf.attributes["connection"]


def revisions(alembic_conf: alembic.config.Config, engine: sqlalchemy.Engine) -> tuple[str | None, str | None]:
    head = ScriptDirectory.from_config(alembic_conf).get_current_head()
    with engine.connect() as connection:
        applied = MigrationContext.configure(connection).get_current_revision()
    return applied, head


@click.group("schema")
def schema():
    """Create and migrate the gradebook tables."""


@schema.command()
@di.inject
def current(alembic_conf: alembic.config.Config = AlembicConfig, engine: sqlalchemy.Engine = Engine):
    applied, head = revisions(alembic_conf, engine)
    state = "up to date" if applied == head else f"head is {head}"
    click.echo(f"Schema revision: {applied or 'none'} ({state})")


@schema.command()
@click.argument("revision", default="head")
@di.inject
def up(revision: str, alembic_conf: alembic.config.Config = AlembicConfig, engine: sqlalchemy.Engine = Engine):
    with bound(alembic_conf, engine) as conf:
        alembic.command.upgrade(conf, revision)
    applied, _ = revisions(alembic_conf, engine)
    click.echo(f"Upgraded schema to {applied or 'none'}")


@schema.command()
@click.argument("revision")
@di.inject
def down(revision: str, alembic_conf: alembic.config.Config = AlembicConfig, engine: sqlalchemy.Engine = Engine):
    with bound(alembic_conf, engine) as conf:
        alembic.command.downgrade(conf, revision)
    applied, _ = revisions(alembic_conf, engine)
    click.echo(f"Downgraded schema to {applied or 'none'}")


@schema.command()
@click.argument("revision")
@di.inject
def stamp(revision: str, alembic_conf: alembic.config.Config = AlembicConfig, engine: sqlalchemy.Engine = Engine):
    """Record REVISION as applied without running migrations, e.g. after create_all."""
    with bound(alembic_conf, engine) as conf:
        alembic.command.stamp(conf, revision)
    click.echo(f"Stamped schema as {revision}")
