import typing as t

import pydantic as p

from .base import BaseSettings


class TransmutationSettings(BaseSettings):
    """Curve parameters, read by the shadow sync policy on every invocation."""

    min_floor: t.Annotated[int, p.Field(ge=0, le=100)] = 65
