# Standard library imports
from pathlib import Path
import secrets
from typing import Annotated, Any, Literal

# Third-party imports
from pydantic import AnyUrl, BeforeValidator, computed_field
from pydantic_core import MultiHostUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR: Path = Path(__file__).resolve().parent.parent


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class CommonSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # General settings
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ENVIRONMENT: Literal["dev", "staging", "production"] = "dev"
    DEBUG_MODE: bool = False
    PROJECT_NAME: str = "CivicPulse"
    FRONTEND_BASE_URL: str = "http://localhost:3000"
    BACKEND_BASE_URL: str = "http://localhost:8000"

    # Database settings; DATABASE_URL wins over the POSTGRES_* parts
    DATABASE_URL: str | None = None
    POSTGRES_SERVER: str | None = None
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str | None = None
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_DB: str | None = None
    SQLITE_PATH: str = "./civicpulse.db"

    @property
    def SQLALCHEMY_ASYNC_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.POSTGRES_SERVER:
            return str(
                MultiHostUrl.build(
                    scheme="postgresql+asyncpg",  # async driver for async queries
                    username=self.POSTGRES_USER,
                    password=self.POSTGRES_PASSWORD,
                    host=self.POSTGRES_SERVER,
                    port=self.POSTGRES_PORT,
                    path=self.POSTGRES_DB,
                )
            )
        return f"sqlite+aiosqlite:///{self.SQLITE_PATH}"

    @computed_field  # type: ignore[prop-decorator, misc]
    @property
    def API_BASE_URL(self) -> str:
        """Base URL the HTTP client talks to"""
        return f"{self.BACKEND_BASE_URL.rstrip('/')}{self.API_V1_STR}"

    # CORS settings
    BACKEND_CORS_ORIGINS: Annotated[list[AnyUrl] | str, BeforeValidator(parse_cors)] = [
        AnyUrl("http://localhost/"),
        AnyUrl("http://localhost:3000/"),
        AnyUrl("http://localhost:5173/"),
        AnyUrl("http://localhost:8000/"),
    ]

    @computed_field  # type: ignore[prop-decorator, misc]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    # Logging and error reporting
    LOG_LEVEL: str | None = None
    LOG_COLOR: bool = True
    SENTRY_DSN: str | None = None
    SENTRY_TRACES_SAMPLE_RATE: float = 1.0

    # JWT settings
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 1  # 1 day

    # S3 settings (issue photos)
    S3_URL: str = "http://localhost:9000"
    S3_ACCESS_KEY_ID: str = "minioadmin"
    S3_SECRET_ACCESS_KEY: str = "minioadmin"
    S3_SECURE: bool = False
    S3_PUBLIC_BUCKET_NAME: str = "issue-images"

    # Image upload constraints
    ALLOWED_IMAGE_TYPES: list[str] = [
        "image/png",
        "image/jpeg",
        "image/jpg",
        "image/gif",
    ]
    MAX_IMAGE_SIZE: int = 5 * 1024 * 1024  # 5 MB

    # Mapping provider
    MAPBOX_ACCESS_TOKEN: str = ""
    MAPBOX_GEOCODING_URL: str = "https://api.mapbox.com/geocoding/v5/mapbox.places"
    GEOCODING_RESULT_LIMIT: int = 5
    GEOCODING_MIN_QUERY_LENGTH: int = 3
    GEOCODING_DEBOUNCE_SECONDS: float = 0.5
    GEOCODING_TIMEOUT_SECONDS: float = 10.0

    # Listing and analytics defaults
    ISSUES_PAGE_SIZE: int = 12
    ISSUES_MAX_PAGE_SIZE: int = 100
    TEMPORAL_WINDOW_DAYS: int = 7
    TOP_VOTED_LIMIT: int = 10
