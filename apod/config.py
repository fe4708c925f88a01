"""Pydantic v2 settings for the APOD resolver — all tunables via env vars prefixed APOD_."""

from __future__ import annotations

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All configuration lives here; no hardcoded values elsewhere."""

    model_config = SettingsConfigDict(
        env_prefix="APOD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── Credentials ──────────────────────────────────────────────────────────
    nasa_api_key: str = "DEMO_KEY"

    # ── Upstream endpoints ───────────────────────────────────────────────────
    apod_api_url: str = "https://api.nasa.gov/planetary/apod"
    apod_page_base: str = "https://apod.nasa.gov/apod/"
    wayback_available_url: str = "https://archive.org/wayback/available"
    images_search_url: str = "https://images-api.nasa.gov/search"
    images_asset_url: str = "https://images-api.nasa.gov/asset/"
    search_keyword: str = "apod"

    # ── HTTP ──────────────────────────────────────────────────────────────────
    api_timeout: float = 15.0
    page_timeout: float = 15.0
    wayback_timeout: float = 10.0
    images_timeout: float = 15.0
    image_proxy_timeout: float = 20.0
    # 1 = single attempt; the strategy chain is the retry mechanism
    max_attempts: int = 1
    retry_min_wait: float = 1.0
    retry_max_wait: float = 10.0
    block_private_hosts: bool = True
    user_agent: str = "apod-resolver/1.0"

    # ── Cache ─────────────────────────────────────────────────────────────────
    cache_ttl_hours: float = 24.0
    asset_cache_ttl_hours: float = 24.0

    # ── Extraction ───────────────────────────────────────────────────────────
    explanation_limit: int = 2000

    # ── Logging ───────────────────────────────────────────────────────────────
    log_level: str = "INFO"

    # ── Field validators ──────────────────────────────────────────────────────

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"log_level must be one of {valid}")
        return upper

    @field_validator("apod_page_base", "images_asset_url")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """URL joins against these bases need a trailing slash."""
        return v if v.endswith("/") else v + "/"

    # ── Model validators ──────────────────────────────────────────────────────

    @model_validator(mode="after")
    def validate_positive_limits(self) -> "Settings":
        """Timeouts, TTLs and the attempt count must be positive."""
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        for name in (
            "api_timeout",
            "page_timeout",
            "wayback_timeout",
            "images_timeout",
            "image_proxy_timeout",
            "cache_ttl_hours",
            "asset_cache_ttl_hours",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.explanation_limit < 1:
            raise ValueError("explanation_limit must be positive")
        return self

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_hours * 3600

    @property
    def asset_cache_ttl_seconds(self) -> float:
        return self.asset_cache_ttl_hours * 3600

    def __repr__(self) -> str:
        """Mask secrets in repr."""
        return (
            f"Settings(apod_api_url={self.apod_api_url!r}, "
            f"apod_page_base={self.apod_page_base!r}, "
            f"nasa_api_key=***, "
            f"cache_ttl_hours={self.cache_ttl_hours!r})"
        )

    def __str__(self) -> str:
        return self.__repr__()

