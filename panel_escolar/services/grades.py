from typing import List

from panel_escolar.core.api_client import ApiClient
from panel_escolar.schemas.grade import Grade, GradeCreate, GradeUpdate, GradeCycle
from .base import CRUDService, parse_model


class GradeService(CRUDService[Grade, GradeCreate, GradeUpdate]):
    def __init__(self, client: ApiClient):
        super().__init__(
            client, "/api/grades", Grade, GradeCreate, GradeUpdate, label="grado"
        )

    def get_by_cycle(self, cycle_id: int) -> List[Grade]:
        """Grados habilitados en un ciclo (relación GradeCycle)"""
        envelope = self.client.get(f"/api/grade-cycles/cycle/{cycle_id}/grades")
        return self._parse_list(envelope.data)

    def link_to_cycle(self, cycle_id: int, grade_id: int) -> GradeCycle:
        link = GradeCycle(cycle_id=cycle_id, grade_id=grade_id)
        envelope = self.client.post(
            "/api/grade-cycles", json=link.to_payload(exclude_unset=True)
        )
        return parse_model(GradeCycle, envelope.data or link.model_dump(), "grado del ciclo")
