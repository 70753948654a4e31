from typing import List, Optional

from pydantic import BaseModel

from panel_escolar.core.api_client import ApiClient
from panel_escolar.schemas.teacher import Teacher
from .base import CRUDService


class TeacherService(CRUDService[Teacher, BaseModel, BaseModel]):
    """Solo lectura: los docentes se administran desde usuarios"""

    def __init__(self, client: ApiClient):
        super().__init__(
            client, "/api/users/teachers", Teacher, Teacher, Teacher, label="docente"
        )

    def get_available(self) -> List[Teacher]:
        return self.list(isActive=True)

    def get_by_course(
        self, course_id: int, section_id: Optional[int] = None
    ) -> List[Teacher]:
        """Docentes que pueden impartir el curso (en la sección, si se indica)"""
        return self.list(courseId=course_id, sectionId=section_id)
