# schemas/base.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ..utils.dates import coerce_datetime


class CamelModel(BaseModel):
    """응답/요청 JSON은 camelCase, 파이썬 쪽은 snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class DatedInput(CamelModel):
    date: datetime | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        if value is None or value == "":
            return None
        return coerce_datetime(value)
