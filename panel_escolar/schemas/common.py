from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Optional, Dict


class CamelModel(BaseModel):
    """Modelo base: atributos snake_case, JSON camelCase como el backend"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    def to_payload(self, exclude_unset: bool = False) -> Dict[str, Any]:
        return self.model_dump(
            mode="json", by_alias=True, exclude_unset=exclude_unset, exclude_none=exclude_unset
        )


class ApiEnvelope(BaseModel):
    success: bool = True
    message: str = ""
    data: Any = None
    meta: Optional[Dict[str, Any]] = None
