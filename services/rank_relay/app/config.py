"""Configuration for the Rank Relay service."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Rank Relay service settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Service settings
    SERVICE_NAME: str = "rank-relay"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    API_PREFIX: str = "/api"

    # Upstream credential, sent as the x-api-key header
    OPEN_CLOUD_KEY: str | None = Field(default=None, repr=False)

    # Upstream families
    CLOUD_API_BASE_URL: str = "https://apis.roblox.com"
    GROUPS_API_BASE_URL: str = "https://groups.roblox.com"
    UPSTREAM_TIMEOUT_SECONDS: float = Field(default=12.0, gt=0)

    @property
    def has_open_cloud_key(self) -> bool:
        """Whether a non-blank credential is configured."""
        return bool(self.OPEN_CLOUD_KEY and self.OPEN_CLOUD_KEY.strip())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
