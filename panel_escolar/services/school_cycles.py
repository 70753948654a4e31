from typing import List, Optional

from panel_escolar.core.api_client import ApiClient
from panel_escolar.core.errors import NotFoundError
from panel_escolar.schemas.school_cycle import (
    SchoolCycle,
    SchoolCycleCreate,
    SchoolCycleUpdate,
    selectable_cycles,
)
from .base import CRUDService


class SchoolCycleService(CRUDService[SchoolCycle, SchoolCycleCreate, SchoolCycleUpdate]):
    def __init__(self, client: ApiClient):
        super().__init__(
            client,
            "/api/school-cycles",
            SchoolCycle,
            SchoolCycleCreate,
            SchoolCycleUpdate,
            label="ciclo escolar",
        )

    def get_active(self) -> Optional[SchoolCycle]:
        """Ciclo activo; None si el backend no tiene ninguno"""
        try:
            envelope = self.client.get(f"{self.endpoint}/active")
        except NotFoundError:
            return None
        return self._parse(envelope.data) if envelope.data else None

    def close(self, id: int) -> SchoolCycle:
        envelope = self.client.patch(f"{self.endpoint}/{id}/close")
        return self._parse(envelope.data)

    def selectable(self) -> List[SchoolCycle]:
        """Ciclos no archivados, para los selectores de inscripción"""
        return selectable_cycles(self.list())
