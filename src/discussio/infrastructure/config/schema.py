"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]

# Numeric levels as used by the LOG_LEVEL variable of earlier deployments.
_NUMERIC_LOG_LEVELS: dict[str, str] = {
    "0": "DEBUG",
    "1": "INFO",
    "2": "WARNING",
    "3": "ERROR",
}


def _normalize_log_level(value: Any) -> Any:
    """Accept ``0..3``, ``warn`` and lowercase names besides canonical levels."""
    if value is None:
        return None
    text = str(value).strip().upper()
    if text in _NUMERIC_LOG_LEVELS:
        return _NUMERIC_LOG_LEVELS[text]
    if text == "WARN":
        return "WARNING"
    return text


class ImdbConfig(BaseModel):
    """IMDb title page lookups (YAML section: imdb.*)."""

    base_url: str = Field(
        default="https://www.imdb.com/title",
        description="Base URL of IMDb title pages; the ID is appended.",
    )
    fetch_timeout_seconds: float = Field(
        default=5.0,
        description="Hard deadline for one title page fetch (seconds).",
    )

    @field_validator("fetch_timeout_seconds")
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("fetch_timeout_seconds must be > 0")
        return v


class StremioConfig(BaseModel):
    """Stream handler configuration (YAML section: stremio.*)."""

    handler_timeout_seconds: float = Field(
        default=8.0,
        description="Overall deadline for one stream request (seconds).",
    )
    search_url: str = Field(
        default="https://www.google.com/search",
        description="Search endpoint the discussion query is appended to.",
    )

    @field_validator("handler_timeout_seconds")
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("handler_timeout_seconds must be > 0")
        return v


class CacheConfig(BaseModel):
    """Title cache configuration (YAML section: cache.*)."""

    max_entries: int = Field(
        default=0,
        description="Max cached titles (LRU eviction). 0 = unbounded.",
    )

    @field_validator("max_entries")
    @classmethod
    def _validate_max_entries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_entries must be >= 0")
        return v


class PublishConfig(BaseModel):
    """Stremio central registry publishing (YAML section: publish.*)."""

    enabled: bool = Field(
        default=False,
        description="Publish the manifest URL to the registry once at startup.",
    )
    manifest_url: str = Field(
        default="https://discussio.deno.dev/manifest.json",
        description="Public URL of this addon's manifest.json.",
    )
    central_url: str = Field(
        default="https://api.strem.io/api/addonPublish",
        description="Registry endpoint receiving the publish request.",
    )


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/imdb/stremio/cache/publish).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="discussio", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP client (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Default timeout of the shared HTTP client (seconds).",
    )
    http_user_agent: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    imdb: ImdbConfig = Field(default_factory=ImdbConfig)
    stremio: StremioConfig = Field(default_factory=StremioConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    publish: PublishConfig = Field(default_factory=PublishConfig)

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, v: Any) -> Any:
        return _normalize_log_level(v)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "imdb": self.imdb.model_dump(),
            "stremio": self.stremio.model_dump(),
            "cache": self.cache.model_dump(),
            "publish": self.publish.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read DISCUSSIO_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - DISCUSSIO_LOG_LEVEL (or LOG_LEVEL, also 0..3)
    - DISCUSSIO_IMDB_FETCH_TIMEOUT_SECONDS
    - DISCUSSIO_HANDLER_TIMEOUT_SECONDS
    - DISCUSSIO_PUBLISH_TO_CENTRAL (or PUBLISH_TO_CENTRAL)
    """

    model_config = SettingsConfigDict(
        env_prefix="DISCUSSIO_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = Field(
        default=None,
        validation_alias=AliasChoices("DISCUSSIO_LOG_LEVEL", "LOG_LEVEL"),
    )
    log_format: Optional[LogFormat] = None

    imdb_base_url: Optional[str] = None
    imdb_fetch_timeout_seconds: Optional[float] = None

    handler_timeout_seconds: Optional[float] = None
    search_url: Optional[str] = None

    cache_max_entries: Optional[int] = None

    publish_to_central: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices(
            "DISCUSSIO_PUBLISH_TO_CENTRAL", "PUBLISH_TO_CENTRAL"
        ),
    )
    public_manifest_url: Optional[str] = None
    central_url: Optional[str] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, v: Any) -> Any:
        return _normalize_log_level(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
