import typing as t

import pydantic as p


class BaseModel(p.BaseModel):
    """Project base model; dumps use field aliases unless told otherwise."""

    def model_dump(self, **kwargs: t.Any) -> dict[str, t.Any]:
        kwargs.setdefault("by_alias", True)
        return super().model_dump(**kwargs)
