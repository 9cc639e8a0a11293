"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded in production)
    - get_settings() is cached (lru_cache) — single instance per process
    - Access and refresh tokens use different secrets and lifetimes

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://vidtube:vidtube@db:5432/vidtube"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Tokens
    access_token_secret: str = "access-secret-placeholder"
    access_token_expire_minutes: int = 15
    refresh_token_secret: str = "refresh-secret-placeholder"
    refresh_token_expire_days: int = 10
    jwt_algorithm: str = "HS256"

    # Passwords
    bcrypt_rounds: int = 10

    # Cookies
    cookie_secure: bool = True
    cookie_samesite: str = "lax"

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Media
    media_dir: str = "public/media"
    media_url_prefix: str = "/media"
    upload_tmp_dir: str = "public/temp"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
