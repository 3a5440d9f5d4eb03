"""
Configuración centralizada de la aplicación

Author: TM3
Date: 2025-10-17
"""
import json
from typing import List, Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # API Settings
    API_TITLE: str = "Consulta API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Consulta de clientes, pedidos e movimentações financeiras"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3001
    ENVIRONMENT: str = "development"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "standard"

    # Database - DATABASE_URL wins; otherwise built from the DB_* variables
    DATABASE_URL: str = ""
    DB_HOST: str = ""
    DB_PORT: int = 5432
    DB_USER: str = ""
    DB_PASSWORD: str = ""
    DB_DATABASE: str = ""
    DB_CONNECT_TIMEOUT: int = 10

    # Per-request deadline for all store round-trips
    REQUEST_TIMEOUT_SECONDS: float = 15.0

    # Lookup limits (candidate search and primary resolution are capped separately)
    DIAGNOSTIC_CANDIDATE_LIMIT: int = 5
    RESOLVE_ORDER_LIMIT: Optional[int] = None

    # CORS - Can be string (comma-separated) or JSON array
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000,http://localhost:3001"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    def get_database_url(self) -> str:
        """Return DATABASE_URL, or compose one from DB_HOST/DB_USER/... ("" if neither is set)"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if not self.DB_HOST:
            return ""

        credentials = quote_plus(self.DB_USER)
        if self.DB_PASSWORD:
            credentials += ":" + quote_plus(self.DB_PASSWORD)
        return f"postgresql://{credentials}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_DATABASE}"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]


settings = Settings()
