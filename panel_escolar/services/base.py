from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from panel_escolar.core.api_client import ApiClient
from panel_escolar.core.errors import ApiError, ValidationFailed
from panel_escolar.core.pagination import Page, PaginationMeta
from panel_escolar.core.logger import get_logger

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


def validate_payload(
    schema: Type[BaseModel], payload: Union[BaseModel, Dict[str, Any]]
) -> BaseModel:
    """Validar el payload contra el esquema; nunca se envía nada inválido"""
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(by_alias=True, exclude_unset=True)
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailed.from_pydantic(e)


def parse_model(model: Type[ModelType], data: Any, label: str) -> ModelType:
    """Validar datos del servidor; un fallo es error del backend, no del formulario"""
    if data is None:
        raise ApiError(f"{label.capitalize()} no encontrado")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error(f"Respuesta inesperada para {label}: {e}")
        raise ApiError(f"Datos inválidos de {label} recibidos del servidor")


def parse_models(model: Type[ModelType], data: Any, label: str) -> List[ModelType]:
    if data is None:
        return []
    if not isinstance(data, list):
        logger.error(f"Se esperaba un listado de {label}: {type(data).__name__}")
        raise ApiError(f"Datos inválidos de {label} recibidos del servidor")
    try:
        return TypeAdapter(List[model]).validate_python(data)
    except ValidationError as e:
        logger.error(f"Listado inesperado para {label}: {e}")
        raise ApiError(f"Datos inválidos de {label} recibidos del servidor")


def dump_payload(model: BaseModel, exclude_unset: bool = False) -> Dict[str, Any]:
    return model.model_dump(
        mode="json", by_alias=True, exclude_unset=exclude_unset
    )


class CRUDService(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Servicio REST genérico de un recurso.

    * `endpoint`: ruta del recurso, p. ej. "/api/grades"
    * `model`: modelo pydantic de lectura
    * `create_schema` / `update_schema`: esquemas de escritura
    * `label`: nombre del recurso para los mensajes de error
    """

    def __init__(
        self,
        client: ApiClient,
        endpoint: str,
        model: Type[ModelType],
        create_schema: Type[CreateSchemaType],
        update_schema: Type[UpdateSchemaType],
        label: str,
    ):
        self.client = client
        self.endpoint = endpoint.rstrip("/")
        self.model = model
        self.create_schema = create_schema
        self.update_schema = update_schema
        self.label = label

    def _parse(self, data: Any) -> ModelType:
        return parse_model(self.model, data, self.label)

    def _parse_list(self, data: Any) -> List[ModelType]:
        return parse_models(self.model, data, self.label)

    def _page(self, envelope, page: int, limit: int) -> Page[ModelType]:
        items = self._parse_list(envelope.data)
        if envelope.meta:
            meta = PaginationMeta.model_validate(envelope.meta)
        else:
            meta = PaginationMeta.fallback(len(items), page=page, limit=limit)
        return Page[self.model](data=items, meta=meta)

    def get_all(
        self, page: int = 1, limit: Optional[int] = None, **filters
    ) -> Page[ModelType]:
        limit = self.client.settings.clamp_page_size(limit)
        envelope = self.client.get(
            self.endpoint, params={"page": page, "limit": limit, **filters}
        )
        return self._page(envelope, page, limit)

    def list(self, path: str = "", **filters) -> List[ModelType]:
        """Listado sin paginar (endpoints de opciones para selectores)"""
        envelope = self.client.get(f"{self.endpoint}{path}", params=filters)
        return self._parse_list(envelope.data)

    def get_by_id(self, id: int) -> ModelType:
        envelope = self.client.get(f"{self.endpoint}/{id}")
        return self._parse(envelope.data)

    def create(self, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        obj = validate_payload(self.create_schema, obj_in)
        envelope = self.client.post(self.endpoint, json=dump_payload(obj))
        logger.info(f"{self.label.capitalize()} creado")
        return self._parse(envelope.data)

    def update(
        self, id: int, obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        obj = validate_payload(self.update_schema, obj_in)
        payload = dump_payload(obj, exclude_unset=True)
        if not payload:
            raise ValidationFailed(
                {"__root__": ["Al menos un campo debe ser proporcionado para actualizar"]}
            )
        envelope = self.client.patch(f"{self.endpoint}/{id}", json=payload)
        return self._parse(envelope.data)

    def delete(self, id: int) -> None:
        self.client.delete(f"{self.endpoint}/{id}")
        logger.info(f"{self.label.capitalize()} {id} eliminado")
