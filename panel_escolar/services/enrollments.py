from typing import List

from panel_escolar.core.api_client import ApiClient
from panel_escolar.schemas.enrollment import (
    Enrollment,
    EnrollmentCreate,
    EnrollmentUpdate,
    EnrollmentStatus,
)
from .base import CRUDService


class EnrollmentService(CRUDService[Enrollment, EnrollmentCreate, EnrollmentUpdate]):
    def __init__(self, client: ApiClient):
        super().__init__(
            client,
            "/api/enrollments",
            Enrollment,
            EnrollmentCreate,
            EnrollmentUpdate,
            label="inscripción",
        )

    def get_by_section(self, section_id: int, cycle_id: int = None) -> List[Enrollment]:
        return self.list(sectionId=section_id, cycleId=cycle_id)

    def update_status(self, id: int, status: EnrollmentStatus) -> Enrollment:
        envelope = self.client.patch(
            f"{self.endpoint}/{id}/status", json={"status": EnrollmentStatus(status).value}
        )
        return self._parse(envelope.data)

    def transfer(self, id: int, section_id: int) -> Enrollment:
        envelope = self.client.patch(
            f"{self.endpoint}/{id}/transfer", json={"newSectionId": section_id}
        )
        return self._parse(envelope.data)
