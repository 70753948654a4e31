from typing import List, Union, Dict, Any

from pydantic import TypeAdapter, ValidationError

from panel_escolar.core.api_client import ApiClient
from panel_escolar.core.errors import ValidationFailed
from panel_escolar.schemas.course_assignment import (
    CourseAssignment,
    CourseAssignmentCreate,
    CourseAssignmentUpdate,
)
from .base import CRUDService


class CourseAssignmentService(
    CRUDService[CourseAssignment, CourseAssignmentCreate, CourseAssignmentUpdate]
):
    def __init__(self, client: ApiClient):
        super().__init__(
            client,
            "/api/course-assignments",
            CourseAssignment,
            CourseAssignmentCreate,
            CourseAssignmentUpdate,
            label="asignación",
        )

    def get_by_section(self, section_id: int) -> List[CourseAssignment]:
        return self.list(path=f"/section/{section_id}")

    def get_by_grade(self, grade_id: int) -> List[CourseAssignment]:
        return self.list(path=f"/grade/{grade_id}")

    def bulk_create(
        self, items: List[Union[CourseAssignmentCreate, Dict[str, Any]]]
    ) -> List[CourseAssignment]:
        """Crear varias asignaciones; se valida todo el lote antes de enviarlo"""
        raw = [
            i.model_dump(by_alias=True) if isinstance(i, CourseAssignmentCreate) else i
            for i in items
        ]
        try:
            assignments = TypeAdapter(List[CourseAssignmentCreate]).validate_python(raw)
        except ValidationError as e:
            raise ValidationFailed.from_pydantic(e)
        envelope = self.client.post(
            f"{self.endpoint}/bulk",
            json={"assignments": [a.to_payload() for a in assignments]},
        )
        data = envelope.data
        if isinstance(data, dict):
            data = data.get("created", [])
        return self._parse_list(data)
