"""Application configuration and settings management."""
from functools import lru_cache
from pathlib import Path
from typing import List, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables or .env."""

    model_config = SettingsConfigDict(
        env_file=(Path(__file__).resolve().parent.parent / ".." / ".env"),
        env_file_encoding="utf-8",
        env_prefix="ARBORETUM_",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = "Arboretum"
    secret_key: str = "change-me"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./arboretum.db"
    database_timeout_seconds: float = 10.0

    # Sessions
    session_ttl_minutes: int = 60 * 24
    session_cookie_name: str = "arboretum_session"
    session_cookie_secure: bool = False  # enable behind HTTPS in production
    session_cookie_samesite: Literal["strict", "lax", "none"] = "strict"

    allowed_origins: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # SSL/TLS
    ssl_enabled: bool = False
    https_port: int = 8443

    # Uploads
    upload_dir: Path = Path("./uploads")
    avatar_url_prefix: str = "/uploads"
    avatar_max_bytes: int = 5 * 1024 * 1024

    # Optional admin account created on startup
    admin_username: str | None = None
    admin_email: str | None = None
    admin_password: str | None = None

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: List[str] | str) -> List[str]:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @property
    def session_ttl_seconds(self) -> int:
        return self.session_ttl_minutes * 60

    @property
    def avatar_dir(self) -> Path:
        return self.upload_dir / "avatars"


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings instance."""

    return Settings()


settings = get_settings()
