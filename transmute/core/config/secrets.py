from __future__ import annotations

import pydantic as p
from pydantic_settings import SettingsConfigDict

from transmute.model import BaseModel

from .base import BaseSecrets


class DatabaseSecrets(BaseSecrets):
    username: p.Secret[str] | None = None
    password: p.Secret[str] | None = None


class Secrets(BaseSecrets, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    """Credentials, read from TRANSMUTE_* environment variables.

    e.g. TRANSMUTE_DATABASE__PASSWORD sets ``database.password``
    """

    model_config = SettingsConfigDict(env_prefix="TRANSMUTE_", env_nested_delimiter="__")

    database: DatabaseSecrets = DatabaseSecrets()
