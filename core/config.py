"""
Core configuration using Pydantic Settings.
Loads from environment variables.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CV_MIME_TYPES = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
    "image/png",
)


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class CVUploadPolicy:
    """Upload limits applied to CV files. Read once at startup."""

    max_file_size: int
    allowed_mime_types: tuple[str, ...]
    allowed_extensions: tuple[str, ...]


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # App
    app_name: str = Field(default="jobtrack", alias="APP_NAME")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development", alias="APP_ENV"
    )
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )
    json_logs: bool = Field(default=True, alias="JSON_LOGS")

    # API
    api_v1_prefix: str = "/api/v1"
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        alias="ALLOWED_ORIGINS",
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./jobtrack.db", alias="DATABASE_URL"
    )
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # CV uploads
    cv_upload_dir: str = Field(default="./uploads/cvs", alias="CV_UPLOAD_DIR")
    max_cv_file_size: int = Field(default=10 * 1024 * 1024, alias="MAX_CV_FILE_SIZE")
    allowed_cv_mime_types: str = Field(
        default=",".join(DEFAULT_CV_MIME_TYPES), alias="ALLOWED_CV_MIME_TYPES"
    )
    allowed_cv_extensions: str = Field(
        default=".doc,.docx,.png", alias="ALLOWED_CV_EXTENSIONS"
    )

    # Logging
    log_request_body: bool = Field(default=False, alias="LOG_REQUEST_BODY")
    log_max_body_size: int = Field(default=1024, alias="LOG_MAX_BODY_SIZE")

    @property
    def cv_upload_policy(self) -> CVUploadPolicy:
        extensions = tuple(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in _split_csv(self.allowed_cv_extensions)
        )
        return CVUploadPolicy(
            max_file_size=self.max_cv_file_size,
            allowed_mime_types=tuple(_split_csv(self.allowed_cv_mime_types)),
            allowed_extensions=extensions,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
