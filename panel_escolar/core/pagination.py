from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, TypeVar
from pydantic import AliasChoices, BaseModel, Field, model_validator

from panel_escolar.schemas.common import CamelModel
from panel_escolar.core.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class PaginationMeta(CamelModel):
    total: int = 0
    page: int = 1
    limit: int = 10
    total_pages: int = 0
    has_next_page: Optional[bool] = None
    has_previous_page: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices("hasPreviousPage", "hasPrevPage", "has_previous_page"),
    )

    @model_validator(mode="after")
    def derive_flags(self):
        """Completar los flags cuando el backend no los envía"""
        if not self.total_pages and self.limit > 0:
            self.total_pages = -(-self.total // self.limit)
        if self.has_next_page is None:
            self.has_next_page = self.page < self.total_pages
        if self.has_previous_page is None:
            self.has_previous_page = self.page > 1
        return self

    @classmethod
    def fallback(cls, items: int, page: int = 1, limit: int = 10) -> "PaginationMeta":
        """Meta por defecto para listados sin paginación en la respuesta"""
        return cls(total=items, page=page, limit=limit)


class Page(BaseModel, Generic[T]):
    data: List[T] = Field(default_factory=list)
    meta: PaginationMeta = Field(default_factory=PaginationMeta)

    def __iter__(self):
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)


def iter_pages(
    fetch_page: Callable[[int], "Page[Any]"],
    start_page: int = 1,
    max_pages: Optional[int] = None,
) -> Iterator[Any]:
    """
    Recorre un listado paginado página por página.

    Lleva registro de los ids ya devueltos para no repetir elementos si el
    backend desplaza resultados entre llamadas.
    """
    page_number = start_page
    returned_ids: Dict[Any, bool] = {}
    pages_read = 0

    while True:
        page = fetch_page(page_number)
        pages_read += 1

        for item in page.data:
            item_id = getattr(item, "id", None)
            if item_id is not None:
                if item_id in returned_ids:
                    continue
                returned_ids[item_id] = True
            yield item

        logger.debug(
            f"Página {page_number}: {len(page.data)} elementos "
            f"(total {page.meta.total})"
        )

        if not page.meta.has_next_page or not page.data:
            break
        if max_pages is not None and pages_read >= max_pages:
            break
        page_number += 1
