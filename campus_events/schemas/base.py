from typing import Annotated
from datetime import datetime

from pydantic import AfterValidator, BaseModel
from pydantic.alias_generators import to_camel

from campus_events.utils.dates import to_utc_naive


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


UtcDateTime = Annotated[datetime, AfterValidator(to_utc_naive)]


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class MessageResponse(BaseModel):
    message: str
