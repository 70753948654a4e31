from datetime import date
from typing import List, Union, Dict, Any

from panel_escolar.core.api_client import ApiClient
from panel_escolar.core.logger import get_logger
from panel_escolar.schemas.attendance import (
    AttendanceStatus,
    AttendanceRecord,
    BulkAttendanceCreate,
)
from .base import parse_models, validate_payload

logger = get_logger(__name__)


class AttendanceService:
    """Asistencia: los estados se cargan siempre desde el backend"""

    def __init__(self, client: ApiClient):
        self.client = client

    def get_statuses(self, active_only: bool = True) -> List[AttendanceStatus]:
        path = "/api/attendance-statuses/active" if active_only else "/api/attendance-statuses"
        envelope = self.client.get(path)
        statuses = parse_models(AttendanceStatus, envelope.data, "estado de asistencia")
        return sorted(statuses, key=lambda s: (s.order is None, s.order or 0, s.id))

    def get_by_section(self, section_id: int, day: date) -> List[AttendanceRecord]:
        envelope = self.client.get(
            f"/api/attendance/section/{section_id}", params={"date": day.isoformat()}
        )
        return parse_models(AttendanceRecord, envelope.data, "asistencia")

    def register_bulk(
        self, payload: Union[BulkAttendanceCreate, Dict[str, Any]]
    ) -> List[AttendanceRecord]:
        bulk = validate_payload(BulkAttendanceCreate, payload)
        envelope = self.client.post("/api/attendance/bulk", json=bulk.to_payload())
        logger.info(
            f"Asistencia registrada: sección {bulk.section_id}, "
            f"{len(bulk.records)} estudiantes"
        )
        return parse_models(AttendanceRecord, envelope.data, "asistencia")
