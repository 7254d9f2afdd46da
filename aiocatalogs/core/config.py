"""Application configuration."""

from typing import Annotated, Any, Literal, Self

from pydantic import AnyUrl, BeforeValidator, HttpUrl, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "AIOCatalogs"
    SERVER_PORT: int = 7000
    ROOTPATH: str = ""
    API_V1_STR: str = "/api/v1"
    BACKEND_HOST: str = "http://localhost:7000"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # Media clients call the addon endpoints from arbitrary origins
    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []
    CORS_ALLOW_ALL: bool = True
    CORS_ALLOW_METHODS: list[str] = ["GET", "POST", "DELETE", "OPTIONS"]
    CORS_ALLOW_HEADERS: list[str] = [
        "Origin",
        "X-Requested-With",
        "Content-Type",
        "Accept",
    ]

    @computed_field
    @property
    def all_cors_origins(self) -> list[str]:
        if self.CORS_ALLOW_ALL:
            return ["*"]
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    # Sentry
    SENTRY_DSN: HttpUrl | None = None

    # Addon manifest shell
    ADDON_ID: str = "community.aiocatalogs"
    ADDON_NAME: str = "AIOCatalogs"
    ADDON_VERSION: str = "1.0.0"
    ADDON_DESCRIPTION: str = "Aggregate multiple catalog addons into one addon"
    ADDON_LOGO: str = "https://i.imgur.com/fRPYeIV.png"
    ADDON_BACKGROUND: str = "https://i.imgur.com/QPPXf5T.jpeg"
    DEFAULT_USER_ID: str = "default"

    # Storage
    STORAGE_BACKEND: Literal["file", "database"] = "file"
    USER_CONFIGS_PATH: str = "userConfigs"

    # PostgreSQL (only used with STORAGE_BACKEND=database)
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "aiocatalogs"
    DATABASE_URL: str | None = None

    @computed_field
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    # Upstream fetches
    FETCH_TIMEOUT_SEC: float = 5.0
    FETCHER_USER_AGENT: str = "Mozilla/5.0 (compatible; AIOCatalogs/1.0)"

    @model_validator(mode="after")
    def _check_fetch_timeout(self) -> Self:
        if self.FETCH_TIMEOUT_SEC <= 0:
            raise ValueError("FETCH_TIMEOUT_SEC must be positive")
        return self


settings = Settings()
