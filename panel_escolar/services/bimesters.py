from typing import List, Optional

from panel_escolar.core.api_client import ApiClient
from panel_escolar.schemas.bimester import Bimester, BimesterCreate, BimesterUpdate
from .base import CRUDService


class BimesterService(CRUDService[Bimester, BimesterCreate, BimesterUpdate]):
    def __init__(self, client: ApiClient):
        super().__init__(
            client, "/api/bimesters", Bimester, BimesterCreate, BimesterUpdate, label="bimestre"
        )

    def get_by_cycle(self, cycle_id: int) -> List[Bimester]:
        bimesters = self.list(path=f"/cycle/{cycle_id}")
        return sorted(bimesters, key=lambda b: b.number)

    def get_active(self, cycle_id: int) -> Optional[Bimester]:
        for bimester in self.get_by_cycle(cycle_id):
            if bimester.is_active:
                return bimester
        return None
