"""Configuration management.

Uses pydantic-settings for type-safe configuration from environment variables.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from feature_xray.core.models.base import ComputationCost, QueryCost


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Prefix: FEATURE_XRAY_
    """

    model_config = SettingsConfigDict(
        env_prefix="FEATURE_XRAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Budget used when the caller does not pass options
    default_computation_cost: ComputationCost = Field(
        default=ComputationCost.UNBOUNDED,
        description="Computation budget for feature extraction",
    )
    default_query_cost: QueryCost = Field(
        default=QueryCost.SAMPLE,
        description="Query budget; anything below full-scan samples rows",
    )

    # Comparison
    significance_threshold: float = Field(
        default=0.2,
        description="Distance above which two feature vectors differ significantly",
    )
    head_tails_threshold: float = Field(
        default=0.4,
        description="Head share at which head/tail breaks stop subdividing",
    )
    top_contributors_limit: int = Field(
        default=10,
        description="Number of per-feature differences kept per comparison",
    )
    parallel_extraction: bool = Field(
        default=False,
        description="Extract both sides of a comparison on a thread pool",
    )

    # Feature computation
    histogram_bins: int = Field(
        default=10,
        ge=1,
        description="Number of histogram buckets",
    )

    # Logging
    log_format: str = Field(default="console")  # 'json' or 'console'


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
