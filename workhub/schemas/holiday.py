# workhub/schemas/holiday.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from workhub.utils.dates import parse_iso_day


def _check_day(value: str) -> str:
    if parse_iso_day(value) is None:
        raise ValueError("date must be an ISO day (YYYY-MM-DD)")
    return value


def _check_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("name is required")
    return value


class HolidayBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    date: str
    description: str = ""
    is_recurring: bool = True

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return _check_name(value)

    @field_validator("date")
    @classmethod
    def check_date(cls, value: str) -> str:
        return _check_day(value)


class HolidayCreate(HolidayBase):
    pass


class HolidayUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    date: Optional[str] = None
    description: Optional[str] = None
    is_recurring: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_name(value)

    @field_validator("date")
    @classmethod
    def check_date(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_day(value)


class Holiday(HolidayBase):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
