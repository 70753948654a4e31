from pydantic import Field
from typing import Optional
from datetime import datetime

from .common import CamelModel


class CourseBase(CamelModel):
    code: str = Field(min_length=1)
    name: str = Field(min_length=1)
    area: Optional[str] = None
    color: Optional[str] = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")
    is_active: bool = True


class CourseCreate(CourseBase):
    pass


class CourseUpdate(CamelModel):
    code: Optional[str] = None
    name: Optional[str] = None
    area: Optional[str] = None
    color: Optional[str] = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")
    is_active: Optional[bool] = None


class Course(CourseBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CourseGrade(CamelModel):
    id: Optional[int] = None
    course_id: int
    grade_id: int
    is_core: bool = True
