from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Backend
    api_base_url: str = "http://localhost:3000"
    request_timeout: float = 30.0
    verify_ssl: bool = True

    # Environment
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # Threading
    max_fetch_workers: int = 4

    @property
    def api_root(self) -> str:
        """URL base sin la barra final"""
        return self.api_base_url.rstrip("/")

    def clamp_page_size(self, limit: Optional[int]) -> int:
        if not limit or limit < 1:
            return self.default_page_size
        return min(limit, self.max_page_size)

    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
