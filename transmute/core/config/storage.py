from __future__ import annotations

import typing as t

import pydantic as p

from .base import BaseSettings


class StorageSettings(BaseSettings):
    persistent: PersistentSettings


class PersistentSettings(BaseSettings):
    database: DatabaseSettings


class DatabaseSettings(BaseSettings):
    """Connection parameters for the gradebook database.

    With the sqlite driver, ``database`` is a file path, or ``:memory:``.
    """

    host: p.IPvAnyAddress | str | None = None
    port: int | None = None
    database: str
    driver: t.Literal["postgresql+psycopg", "sqlite"] = "postgresql+psycopg"
