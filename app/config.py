"""Environment-driven settings for the blog content service."""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, PositiveInt, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.errors import ConfigurationError


class Settings(BaseSettings):
    """Blog service settings loaded from environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    graphql_endpoint: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("WP_GRAPHQL_ENDPOINT", "NEXT_PUBLIC_WP_GRAPHQL_ENDPOINT"),
        description="WPGraphQL endpoint URL.",
    )
    revalidate_token: Optional[SecretStr] = Field(
        None,
        validation_alias=AliasChoices("REVALIDATE_TOKEN"),
        description="Shared secret expected by the revalidation webhook.",
    )
    site_url: str = Field(
        "https://cloudrenovation.ca",
        validation_alias=AliasChoices("SITE_URL", "NEXT_PUBLIC_SITE_URL"),
        description="Public base URL used for canonical links and sitemaps.",
    )
    site_name: str = Field("Cloud Renovation", validation_alias=AliasChoices("SITE_NAME"))
    site_description: str = Field(
        "Expert insights on home renovation, kitchen and bathroom remodeling, "
        "and modern home improvement techniques.",
        validation_alias=AliasChoices("SITE_DESCRIPTION"),
    )
    site_team_name: str = Field(
        "Cloud Renovation Team",
        validation_alias=AliasChoices("SITE_TEAM_NAME"),
        description="Author name used in structured data when a post has no author.",
    )
    cache_ttl_seconds: PositiveInt = Field(60, validation_alias=AliasChoices("CACHE_TTL_SECONDS"))
    cache_max_entries: PositiveInt = Field(1024, validation_alias=AliasChoices("CACHE_MAX_ENTRIES"))
    http_timeout_seconds: PositiveInt = Field(15, validation_alias=AliasChoices("HTTP_TIMEOUT_SECONDS"))
    user_agent: str = Field("CloudReno-Blog/1.0", validation_alias=AliasChoices("USER_AGENT"))

    @field_validator("site_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        url = value.strip().rstrip("/")
        if not url:
            raise ValueError("SITE_URL must not be blank.")
        return url

    @field_validator("graphql_endpoint", mode="before")
    @classmethod
    def _blank_endpoint_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def require_endpoint(self) -> str:
        """Return the GraphQL endpoint or raise :class:`ConfigurationError`."""
        if not self.graphql_endpoint:
            raise ConfigurationError("WordPress GraphQL endpoint not configured")
        return self.graphql_endpoint


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide :class:`Settings` instance."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid environment configuration: {exc}") from exc


def reset_settings_cache() -> None:
    """Drop the cached settings (used by tests)."""
    get_settings.cache_clear()
