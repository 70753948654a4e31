from pydantic import Field, model_validator
from typing import Optional
from datetime import date, datetime

from .common import CamelModel


class HolidayBase(CamelModel):
    bimester_id: Optional[int] = None
    holiday_date: date = Field(alias="date")
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    is_recovered: bool = False
    recovery_date: Optional[date] = None
    is_active: bool = True

    @model_validator(mode="after")
    def check_recovery(self):
        if self.is_recovered and self.recovery_date is None:
            raise ValueError("Un asueto recuperado necesita fecha de recuperación")
        return self


class HolidayCreate(HolidayBase):
    pass


class HolidayUpdate(CamelModel):
    holiday_date: Optional[date] = Field(default=None, alias="date")
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    is_recovered: Optional[bool] = None
    recovery_date: Optional[date] = None
    is_active: Optional[bool] = None


class Holiday(HolidayBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
