"""Configuration management for the client library."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_API_VERSION = "v1"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


class Settings(BaseSettings):
    """Library settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Endpoint Configuration
    api_version: str = Field(
        default=DEFAULT_API_VERSION, description="REST API version segment"
    )
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Service base URL")

    # Transport Configuration
    proxy: str | None = Field(default=None, description="HTTP proxy URL")
    timeout: int = Field(default=120, description="Request timeout in seconds")


class RequestOptions(BaseModel):
    """Per-instance overrides for where requests are sent."""

    model_config = ConfigDict(frozen=True)

    api_version: str | None = Field(default=None, description="API version override")
    base_url: str | None = Field(default=None, description="Base URL override")

    def resolved_api_version(self) -> str:
        return self.api_version or settings.api_version

    def resolved_base_url(self) -> str:
        return (self.base_url or settings.base_url).rstrip("/")


# Global settings instance
settings = Settings()
