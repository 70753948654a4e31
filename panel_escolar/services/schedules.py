from typing import List, Optional, Union, Dict, Any

from panel_escolar.core.api_client import ApiClient
from panel_escolar.core.logger import get_logger
from panel_escolar.schemas.schedule import (
    Schedule,
    ScheduleCreate,
    ScheduleUpdate,
    find_conflicts,
)
from .base import CRUDService, validate_payload

logger = get_logger(__name__)


class ScheduleService(CRUDService[Schedule, ScheduleCreate, ScheduleUpdate]):
    def __init__(self, client: ApiClient):
        super().__init__(
            client, "/api/schedules", Schedule, ScheduleCreate, ScheduleUpdate, label="horario"
        )

    def get_by_section(self, section_id: int) -> List[Schedule]:
        return self.list(path=f"/section/{section_id}")

    def get_by_teacher(self, teacher_id: int) -> List[Schedule]:
        return self.list(path=f"/teacher/{teacher_id}")

    def check_conflicts(
        self,
        candidate: Union[ScheduleCreate, Dict[str, Any]],
        exclude_id: Optional[int] = None,
    ) -> List[Schedule]:
        """
        Verificación previa de choques contra los horarios de la sección y
        del docente. El backend sigue siendo quien decide.
        """
        candidate = validate_payload(ScheduleCreate, candidate)
        existing = self.get_by_section(candidate.section_id)
        if candidate.teacher_id is not None:
            known = {s.id for s in existing}
            existing += [
                s for s in self.get_by_teacher(candidate.teacher_id) if s.id not in known
            ]
        conflicts = find_conflicts(existing, candidate, exclude_id=exclude_id)
        if conflicts:
            logger.info(
                f"{len(conflicts)} conflicto(s) para el día {candidate.day_name} "
                f"{candidate.time_range}"
            )
        return conflicts
