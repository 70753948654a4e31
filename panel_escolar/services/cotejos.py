from typing import List, Union, Dict, Any

from panel_escolar.core.api_client import ApiClient
from panel_escolar.core.errors import ValidationFailed
from panel_escolar.schemas.cotejo import (
    CotejoResponse,
    CotejoGenerate,
    CotejoStatus,
    ActitudinalUpdate,
    DeclarativoUpdate,
)
from .base import parse_model, parse_models, validate_payload

ENDPOINT = "/api/cotejos"
LABEL = "cotejo"


class CotejoService:
    def __init__(self, client: ApiClient):
        self.client = client

    def get(self, id: int) -> CotejoResponse:
        envelope = self.client.get(f"{ENDPOINT}/{id}")
        return parse_model(CotejoResponse, envelope.data, LABEL)

    def get_by_section(
        self, section_id: int, course_id: int, bimester_id: int
    ) -> List[CotejoResponse]:
        envelope = self.client.get(
            f"{ENDPOINT}/section/{section_id}",
            params={"courseId": course_id, "bimesterId": bimester_id},
        )
        return parse_models(CotejoResponse, envelope.data, LABEL)

    def generate(self, payload: Union[CotejoGenerate, Dict[str, Any]]) -> CotejoResponse:
        data = validate_payload(CotejoGenerate, payload)
        envelope = self.client.post(f"{ENDPOINT}/generate", json=data.to_payload())
        return parse_model(CotejoResponse, envelope.data, LABEL)

    def _ensure_editable(self, cotejo: CotejoResponse):
        if not cotejo.is_editable:
            raise ValidationFailed(
                {"status": ["El cotejo ya fue enviado y no puede modificarse"]}
            )

    def update_actitudinal(
        self, cotejo: CotejoResponse, payload: Union[ActitudinalUpdate, Dict[str, Any]]
    ) -> CotejoResponse:
        self._ensure_editable(cotejo)
        data = validate_payload(ActitudinalUpdate, payload)
        envelope = self.client.patch(
            f"{ENDPOINT}/{cotejo.id}/actitudinal", json=data.to_payload(exclude_unset=True)
        )
        return parse_model(CotejoResponse, envelope.data, LABEL)

    def update_declarativo(
        self, cotejo: CotejoResponse, payload: Union[DeclarativoUpdate, Dict[str, Any]]
    ) -> CotejoResponse:
        self._ensure_editable(cotejo)
        data = validate_payload(DeclarativoUpdate, payload)
        envelope = self.client.patch(
            f"{ENDPOINT}/{cotejo.id}/declarativo", json=data.to_payload(exclude_unset=True)
        )
        return parse_model(CotejoResponse, envelope.data, LABEL)

    def submit(self, cotejo: CotejoResponse) -> CotejoResponse:
        """Solo un cotejo COMPLETED puede enviarse"""
        if not cotejo.can_transition_to(CotejoStatus.SUBMITTED):
            raise ValidationFailed(
                {"status": [f"No se puede enviar un cotejo en estado {cotejo.status.value}"]}
            )
        envelope = self.client.post(f"{ENDPOINT}/{cotejo.id}/submit")
        return parse_model(CotejoResponse, envelope.data, LABEL)
