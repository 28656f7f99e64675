"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets and hosts come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - Both store URLs are normalized to an async driver

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Separate ledger_database_url: purchase history may live in a different
      database than listings; by default both point at the same server
    - Empty firebase_project_id means "verifier not configured": authenticated
      routes answer 500 instead of silently accepting tokens
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Record store (listings)
    database_url: str = (
        "postgresql+asyncpg://modelmart:modelmart@db:5432/ai_models_db"
    )
    # Ledger store (purchase history)
    ledger_database_url: str = (
        "postgresql+asyncpg://modelmart:modelmart@db:5432/purchase_ledger"
    )

    @field_validator("database_url", "ledger_database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Identity (Firebase Authentication)
    firebase_project_id: str = ""
    firebase_certs_url: str = (
        "https://www.googleapis.com/robot/v1/metadata/x509/"
        "securetoken@system.gserviceaccount.com"
    )
    identity_timeout_seconds: float = 10.0

    # API
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:5175",
        "http://localhost:5176",
        "http://localhost:5177",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:5175",
    ]
    frontend_url: str | None = None
    latest_models_limit: int = 6

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def allowed_origins(self) -> list[str]:
        """CORS allow-list including the deployed frontend, when configured."""
        origins = list(self.cors_origins)
        frontend = (self.frontend_url or "").rstrip("/")
        if frontend and frontend not in origins:
            origins.append(frontend)
        return origins


@lru_cache
def get_settings() -> Settings:
    return Settings()
