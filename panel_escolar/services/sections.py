from typing import List

from panel_escolar.core.api_client import ApiClient
from panel_escolar.schemas.section import Section, SectionCreate, SectionUpdate
from .base import CRUDService


class SectionService(CRUDService[Section, SectionCreate, SectionUpdate]):
    def __init__(self, client: ApiClient):
        super().__init__(
            client, "/api/sections", Section, SectionCreate, SectionUpdate, label="sección"
        )

    def get_by_grade(self, grade_id: int) -> List[Section]:
        sections = self.list(gradeId=grade_id)
        # El filtro del backend no siempre se respeta en listados antiguos
        return [s for s in sections if s.grade_id == grade_id]
