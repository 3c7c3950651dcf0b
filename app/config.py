"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


RankingMode = Literal["ratio-mix", "profile-rank"]

RANKING_MODES: tuple[str, ...] = ("ratio-mix", "profile-rank")


def normalize_ranking_mode(value: object) -> str:
    """Return a canonical ranking mode slug or raise ``ValueError``."""

    if not isinstance(value, str):
        raise ValueError("Ranking mode must be a string")
    slug = value.strip().replace("_", "-").replace(" ", "-").lower()
    slug = "-".join(filter(None, slug.split("-")))
    if slug not in RANKING_MODES:
        raise ValueError(f"Unknown ranking mode: {value!r}")
    return slug


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="TubeFeed", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    catalog_api_url: HttpUrl = Field(
        default="http://localhost:3001", alias="CATALOG_API_URL"
    )
    source_timeout_seconds: float = Field(
        default=8.0, alias="SOURCE_TIMEOUT", gt=0, le=120
    )

    feed_target_count: int = Field(
        default=50, alias="FEED_TARGET_COUNT", ge=1, le=500
    )
    shorts_target_count: int = Field(
        default=40, alias="SHORTS_TARGET_COUNT", ge=1, le=500
    )
    shorts_fallback_count: int = Field(
        default=20, alias="SHORTS_FALLBACK_COUNT", ge=1, le=500
    )
    trending_ratio: float = Field(default=0.40, alias="TRENDING_RATIO", ge=0, le=1)
    shorts_popular_ratio: float = Field(
        default=0.75, alias="SHORTS_POPULAR_RATIO", ge=0, le=1
    )
    diversity_cap: int = Field(default=3, alias="DIVERSITY_CAP", ge=1, le=100)
    negative_score_threshold: float = Field(
        default=2.0, alias="NEGATIVE_SCORE_THRESHOLD", ge=0
    )
    shorts_max_seconds: int = Field(
        default=60, alias="SHORTS_MAX_SECONDS", ge=1, le=600
    )
    ranking_mode: RankingMode = Field(
        default="ratio-mix", alias="FEED_RANKING_MODE"
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("ranking_mode", mode="before")
    @classmethod
    def _parse_ranking_mode(cls, value: object) -> str:
        """Accept ``profile_rank``/``Profile Rank`` style spellings."""

        if value is None:
            return "ratio-mix"
        return normalize_ranking_mode(value)

    @property
    def main_feed_ratios(self) -> dict[str, float]:
        """Pool ratios for the main feed, in mixing order."""

        return {
            "trending": self.trending_ratio,
            "personalized": 1.0 - self.trending_ratio,
        }

    @property
    def shorts_feed_ratios(self) -> dict[str, float]:
        """Pool ratios for the short-form feed, in mixing order."""

        return {
            "popular": self.shorts_popular_ratio,
            "personalized": 1.0 - self.shorts_popular_ratio,
        }

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
