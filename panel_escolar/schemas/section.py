from pydantic import Field
from typing import Optional
from datetime import datetime

from .common import CamelModel
from .teacher import TeacherSummary


class SectionBase(CamelModel):
    name: str = Field(min_length=1, max_length=10)
    capacity: int = Field(gt=0)
    grade_id: int = Field(gt=0)
    teacher_id: Optional[int] = None


class SectionCreate(SectionBase):
    pass


class SectionUpdate(CamelModel):
    name: Optional[str] = None
    capacity: Optional[int] = Field(default=None, gt=0)
    grade_id: Optional[int] = None
    teacher_id: Optional[int] = None


class Section(SectionBase):
    id: int
    teacher: Optional[TeacherSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
