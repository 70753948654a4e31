from pydantic import Field, model_validator
from typing import Optional
from datetime import date, datetime

from .common import CamelModel


class BimesterBase(CamelModel):
    cycle_id: int = Field(gt=0)
    number: int = Field(ge=1, le=4)
    name: Optional[str] = None
    start_date: date
    end_date: date
    weeks_count: int = Field(default=8, ge=1, le=20)
    is_active: bool = False

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError("La fecha de fin debe ser posterior a la de inicio")
        return self


class BimesterCreate(BimesterBase):
    pass


class BimesterUpdate(CamelModel):
    number: Optional[int] = Field(default=None, ge=1, le=4)
    name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    weeks_count: Optional[int] = Field(default=None, ge=1, le=20)
    is_active: Optional[bool] = None


class Bimester(BimesterBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
