from logging.config import fileConfig

import sqlalchemy
import sqlalchemy.pool
from alembic import context

from transmute.storage.table import base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connection = config.attributes.get("connection")
    if connection is not None:
        # supplied by `transmute schema`, which runs in the caller's transaction
        run_migrations(connection)
        return

    engine = sqlalchemy.engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=sqlalchemy.pool.NullPool,
    )
    with engine.connect() as connection:
        run_migrations(connection)


def run_migrations(connection: sqlalchemy.Connection) -> None:
    # batch mode lets ALTERs run on sqlite
    context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=True)
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
