from typing import Any, Dict, List, Optional, Union

from panel_escolar.core.api_client import ApiClient
from panel_escolar.core.errors import NotFoundError
from panel_escolar.core.logger import get_logger
from panel_escolar.schemas.academic_week import (
    AcademicWeek,
    AcademicWeekCreate,
    AcademicWeekUpdate,
    GenerateWeeks,
    WeekType,
)
from .base import CRUDService, validate_payload

logger = get_logger(__name__)


class AcademicWeekService(CRUDService[AcademicWeek, AcademicWeekCreate, AcademicWeekUpdate]):
    """Semanas académicas; siempre acotadas a un bimestre"""

    def __init__(self, client: ApiClient):
        super().__init__(
            client,
            "/api/academic-weeks",
            AcademicWeek,
            AcademicWeekCreate,
            AcademicWeekUpdate,
            label="semana académica",
        )

    def get_by_bimester(
        self, bimester_id: int, week_type: Optional[WeekType] = None
    ) -> List[AcademicWeek]:
        path = f"/bimester/{bimester_id}"
        if week_type == WeekType.REGULAR:
            path += "/regular"
        weeks = self.list(path=path)
        if week_type is not None:
            weeks = [w for w in weeks if w.week_type == week_type]
        return sorted(weeks, key=lambda w: w.number)

    def get_evaluation_week(self, bimester_id: int) -> Optional[AcademicWeek]:
        try:
            envelope = self.client.get(f"{self.endpoint}/bimester/{bimester_id}/evaluation")
        except NotFoundError:
            return None
        return self._parse(envelope.data) if envelope.data else None

    def get_by_number(self, bimester_id: int, number: int) -> AcademicWeek:
        envelope = self.client.get(f"{self.endpoint}/bimester/{bimester_id}/week/{number}")
        return self._parse(envelope.data)

    def get_current(self) -> Optional[AcademicWeek]:
        """Semana que contiene la fecha de hoy; None fuera de clases"""
        try:
            envelope = self.client.get(f"{self.endpoint}/current")
        except NotFoundError:
            return None
        return self._parse(envelope.data) if envelope.data else None

    def generate(
        self,
        bimester_id: int,
        options: Union[GenerateWeeks, Dict[str, Any], None] = None,
    ) -> List[AcademicWeek]:
        request = validate_payload(GenerateWeeks, options or {})
        envelope = self.client.post(
            f"{self.endpoint}/generate/{bimester_id}",
            params={
                "weeksCount": request.weeks_count,
                "includeEvaluationWeek": request.include_evaluation_week,
            },
        )
        weeks = self._parse_list(envelope.data)
        logger.info(f"{len(weeks)} semanas generadas para el bimestre {bimester_id}")
        return sorted(weeks, key=lambda w: w.number)
