from datetime import date
from typing import List, Optional

from panel_escolar.core.api_client import ApiClient
from panel_escolar.core.errors import NotFoundError
from panel_escolar.schemas.holiday import Holiday, HolidayCreate, HolidayUpdate
from .base import CRUDService, parse_model


class HolidayService(CRUDService[Holiday, HolidayCreate, HolidayUpdate]):
    def __init__(self, client: ApiClient):
        super().__init__(
            client, "/api/holidays", Holiday, HolidayCreate, HolidayUpdate, label="asueto"
        )

    def get_by_bimester(self, bimester_id: int) -> List[Holiday]:
        holidays = self.list(bimesterId=bimester_id)
        return sorted(holidays, key=lambda h: h.holiday_date)

    def find_by_date(self, bimester_id: int, day: date) -> Optional[Holiday]:
        """Asueto del bimestre en esa fecha; None si es día de clases"""
        try:
            envelope = self.client.get(
                "/api/attendance/holiday/by-date",
                params={"bimesterId": bimester_id, "date": day.isoformat()},
            )
        except NotFoundError:
            return None
        if not envelope.data:
            return None
        return parse_model(Holiday, envelope.data, self.label)
