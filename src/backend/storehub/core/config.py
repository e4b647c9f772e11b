from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


PROJECT_ROOT = Path(__file__).parent.parent.resolve()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=PROJECT_ROOT / ".env", env_file_encoding="utf-8", extra="ignore")

    PROJECT_NAME: str = "Storehub Backend"
    VERSION: str = "0.1.0"

    # Shared directory database (owner -> tenant mapping)
    MAIN_DB_URI: str = "mongodb://localhost:27017/yesp_main"

    # Server hosting one database per tenant; the database name is derived from the tenant id
    TENANT_DB_URI: str = "mongodb://localhost:27017"
    TENANT_DB_PREFIX: str = "yesp_"
    TENANT_DB_MAX_POOL_SIZE: int = Field(default=10, ge=1)
    TENANT_DB_SERVER_SELECTION_TIMEOUT_MS: int = Field(default=15000, ge=1)
    TENANT_DB_SOCKET_TIMEOUT_MS: int = Field(default=60000, ge=1)
    TENANT_CONNECT_TIMEOUT_SECONDS: float = Field(default=20.0, gt=0)

    # Registry capacity
    TENANT_MAX_CONNECTIONS: int = Field(default=500, ge=1)
    TENANT_IDLE_TIMEOUT_SECONDS: float = Field(default=0, ge=0)
    TENANT_PRUNE_INTERVAL_SECONDS: float = Field(default=300, ge=0)

    # Public storefront addressing, e.g. ab12cd.shops.example.com
    STORE_BASE_DOMAIN: Optional[str] = None

    JWT_SECRET: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "yesp-platform"
    JWT_AUDIENCE: str = "yesp-users"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 90

    CORS_ORIGINS: List[str] = ["*"]

    def get_main_db_host(self) -> str:
        """Host:port part of the main database URI, without credentials"""
        return self.MAIN_DB_URI.split("@")[-1].split("/")[0]


settings = Settings()
