"""Application settings loaded from environment variables and .env file."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for listing repositories and files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: str | None = None
    retries: int = 3  # max retries per request on throttling or server errors
    affiliation: str = "owner,collaborator,organization_member"
    page_size: int = Field(30, ge=1, le=100)  # GitHub caps per_page at 100
    max_pages: int = 1000  # upper bound on pages fetched by the repo lister


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
