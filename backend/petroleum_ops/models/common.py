"""
Shared model base and response envelopes.

Wire format is camelCase; Python attributes stay snake_case.
"""

import re
from datetime import date, datetime
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_iso_date(value: Any) -> date:
    """
    Accept ``date`` objects and ``YYYY-MM-DD`` strings only.

    Numbers, numeric strings (Unix timestamps) and datetimes are rejected.
    """
    if isinstance(value, datetime):
        raise ValueError("must be a date in YYYY-MM-DD format, not a datetime")
    if isinstance(value, date):
        return value
    if isinstance(value, str) and _ISO_DATE.fullmatch(value.strip()):
        return date.fromisoformat(value.strip())
    raise ValueError("must be a date in YYYY-MM-DD format")


ISODate = Annotated[date, BeforeValidator(parse_iso_date)]


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope."""

    success: bool = True
    data: T


class ApiListResponse(BaseModel, Generic[T]):
    """Success envelope for collections."""

    success: bool = True
    count: int
    data: list[T]


class ErrorResponse(BaseModel):
    """Error envelope."""

    success: bool = False
    message: str
