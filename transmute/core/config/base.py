import typing as t

from pydantic_settings import BaseSettings as PydanticBaseSettings

from transmute.model import BaseModel


# NOTE: BaseModel comes second in the MRO so that its model_dump, which
#       defaults to by_alias=True, wins over pydantic's
class BaseSettings(PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    def __init__(self, cf: dict[str, t.Any] | None = None, **kwargs: t.Any):
        # specifically allow initialization with a dict
        if cf is not None:
            kwargs = {**cf, **kwargs}
        super().__init__(**kwargs)


class BaseSecrets(BaseSettings):
    """Settings which hold credentials; these are not read from YAML."""

    pass
