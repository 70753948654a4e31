from typing import List

from panel_escolar.core.api_client import ApiClient
from panel_escolar.schemas.course import Course, CourseCreate, CourseUpdate
from .base import CRUDService


class CourseService(CRUDService[Course, CourseCreate, CourseUpdate]):
    def __init__(self, client: ApiClient):
        super().__init__(
            client, "/api/courses", Course, CourseCreate, CourseUpdate, label="curso"
        )

    def get_by_grade(self, grade_id: int) -> List[Course]:
        """Cursos asociados a un grado (relación CourseGrade)"""
        return self.list(path=f"/grade/{grade_id}")

    def get_by_section(self, section_id: int) -> List[Course]:
        """Cursos con asignación vigente en la sección"""
        envelope = self.client.get(f"/api/course-assignments/section/{section_id}")
        courses = {}
        for item in envelope.data or []:
            course = item.get("course") if isinstance(item, dict) else None
            if course and course.get("id") not in courses:
                courses[course["id"]] = course
        return self._parse_list(list(courses.values()))
