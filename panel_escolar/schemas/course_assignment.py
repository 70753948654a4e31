from pydantic import Field
from typing import Optional, Literal
from datetime import datetime

from .common import CamelModel
from .course import Course
from .teacher import TeacherSummary

AssignmentType = Literal["titular", "specialist"]


class CourseAssignmentBase(CamelModel):
    section_id: int = Field(gt=0)
    course_id: int = Field(gt=0)
    teacher_id: int = Field(gt=0)
    assignment_type: AssignmentType = "titular"
    notes: Optional[str] = None


class CourseAssignmentCreate(CourseAssignmentBase):
    pass


class CourseAssignmentUpdate(CamelModel):
    teacher_id: Optional[int] = Field(default=None, gt=0)
    assignment_type: Optional[AssignmentType] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class CourseAssignment(CourseAssignmentBase):
    id: int
    is_active: bool = True
    course: Optional[Course] = None
    teacher: Optional[TeacherSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
