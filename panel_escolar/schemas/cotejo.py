from enum import Enum
from pydantic import Field
from typing import List, Optional
from datetime import datetime

from .common import CamelModel


class CotejoStatus(str, Enum):
    DRAFT = "DRAFT"
    COMPLETED = "COMPLETED"
    SUBMITTED = "SUBMITTED"


# Transiciones permitidas
NEXT_STATUS = {
    CotejoStatus.DRAFT: CotejoStatus.COMPLETED,
    CotejoStatus.COMPLETED: CotejoStatus.SUBMITTED,
}


class CotejoGenerate(CamelModel):
    enrollment_id: int = Field(gt=0)
    course_id: int = Field(gt=0)
    bimester_id: int = Field(gt=0)
    teacher_id: Optional[int] = None


class ActitudinalUpdate(CamelModel):
    actitudinal_score: float = Field(ge=0, le=20)
    feedback: Optional[str] = None


class DeclarativoUpdate(CamelModel):
    declarativo_score: float = Field(ge=0, le=30)
    feedback: Optional[str] = None


class CotejoResponse(CamelModel):
    id: int
    enrollment_id: int
    course_id: int
    bimester_id: int
    teacher_id: Optional[int] = None
    ericas_score: Optional[float] = None
    tareas_score: Optional[float] = None
    actitudinal_score: Optional[float] = None
    declarativo_score: Optional[float] = None
    total_score: Optional[float] = None
    status: CotejoStatus = CotejoStatus.DRAFT
    feedback: Optional[str] = None
    submitted_at: Optional[datetime] = None

    @property
    def is_editable(self) -> bool:
        return self.status != CotejoStatus.SUBMITTED

    def can_transition_to(self, status: CotejoStatus) -> bool:
        return NEXT_STATUS.get(self.status) == status


class BulkCotejoGenerate(CamelModel):
    course_id: int = Field(gt=0)
    bimester_id: int = Field(gt=0)
    enrollment_ids: List[int] = Field(min_length=1)
