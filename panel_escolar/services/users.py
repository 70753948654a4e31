from typing import Optional

from panel_escolar.core.api_client import ApiClient
from panel_escolar.core.logger import get_logger
from panel_escolar.core.pagination import Page
from panel_escolar.schemas.user import User, UserCreate, UserStats, UserUpdate
from .base import CRUDService, parse_model

logger = get_logger(__name__)

SORT_FIELDS = ("givenNames", "email", "createdAt", "updatedAt")


class UserService(CRUDService[User, UserCreate, UserUpdate]):
    """Usuarios de la plataforma; los docentes se leen desde TeacherService"""

    def __init__(self, client: ApiClient):
        super().__init__(client, "/api/users", User, UserCreate, UserUpdate, label="usuario")

    def search(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        can_access_platform: Optional[bool] = None,
        role_id: Optional[int] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> Page[User]:
        if sort_by not in SORT_FIELDS:
            raise ValueError(f"No se puede ordenar por {sort_by}")
        if sort_order not in ("asc", "desc"):
            raise ValueError(f"Orden inválido: {sort_order}")
        return self.get_all(
            page=page,
            limit=limit,
            search=search,
            isActive=is_active,
            canAccessPlatform=can_access_platform,
            roleId=role_id,
            sortBy=sort_by,
            sortOrder=sort_order,
        )

    def get_by_email(self, email: str) -> User:
        envelope = self.client.get(f"{self.endpoint}/email/{email}")
        return self._parse(envelope.data)

    def get_by_dpi(self, dpi: str) -> User:
        envelope = self.client.get(f"{self.endpoint}/dpi/{dpi}")
        return self._parse(envelope.data)

    def get_stats(self) -> UserStats:
        envelope = self.client.get(f"{self.endpoint}/stats")
        return parse_model(UserStats, envelope.data, "estadísticas de usuarios")

    def _action(self, id: int, action: str) -> User:
        envelope = self.client.patch(f"{self.endpoint}/{id}/{action}")
        logger.info(f"Usuario {id}: {action}")
        return self._parse(envelope.data)

    def restore(self, id: int) -> User:
        return self._action(id, "restore")

    def grant_access(self, id: int) -> User:
        return self._action(id, "grant-access")

    def revoke_access(self, id: int) -> User:
        return self._action(id, "revoke-access")

    def verify_email(self, id: int) -> User:
        return self._action(id, "verify-email")
