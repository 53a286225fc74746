"""Application settings loaded from environment variables and `.env`.

Hey future me - nested sections use the `__` delimiter, so the relay host is
`RELAY__HOST`, the Last.fm key is `LASTFM__API_KEY` and so on. get_settings() is
cached for the API layer ONLY. Services and clients get their section passed in
through the constructor - never call get_settings() from inside the core.
"""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    """User-record store connection settings."""

    url: str = Field(
        default="sqlite+aiosqlite:///./mljboard.db",
        description="SQLAlchemy async database URL",
    )
    echo: bool = Field(default=False, description="Log every SQL statement")
    pool_pre_ping: bool = Field(default=True)
    pool_size: int = Field(default=5, ge=1)
    max_overflow: int = Field(default=10, ge=0)
    pool_timeout: int = Field(default=30, ge=1)
    pool_recycle: int = Field(default=3600, ge=-1)


class RelaySettings(BaseModel):
    """HOS relay server connection settings."""

    host: str = Field(default="localhost", min_length=1)
    port: int = Field(default=9000, ge=1, le=65535)
    https: bool = Field(default=False, description="Relay is served over HTTPS")
    password: str | None = Field(
        default=None, description="Shared secret sent as the HOS-PASSWD header"
    )

    @property
    def scheme(self) -> str:
        return "https" if self.https else "http"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"


class LastfmSettings(BaseModel):
    """Last.fm API settings."""

    api_key: str | None = Field(default=None)
    page_size: int = Field(default=200, ge=1, le=200)

    def is_configured(self) -> bool:
        """Check if an API key is present."""
        return bool(self.api_key and self.api_key.strip())


class HttpSettings(BaseModel):
    """Per-backend request timeouts in seconds. None disables the timeout."""

    relay_timeout: float | None = Field(default=10.0, gt=0)
    maloja_timeout: float | None = Field(default=30.0, gt=0)
    lastfm_timeout: float | None = Field(default=30.0, gt=0)


class Settings(BaseSettings):
    """Root settings object."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: str = Field(default="mljboard")
    log_level: str = Field(default="INFO")
    log_json_format: bool = Field(default=False)
    api_prefix: str = Field(default="/api")
    host: str = Field(default="0.0.0.0")  # nosec B104
    port: int = Field(default=8000, ge=1, le=65535)

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    relay: RelaySettings = Field(default_factory=RelaySettings)
    lastfm: LastfmSettings = Field(default_factory=LastfmSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
