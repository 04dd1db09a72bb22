"""
Engine configuration using Pydantic Settings.
All environment variables are loaded and validated here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VIEWABILITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"

    # Sampling
    poll_interval_ms: int = 100
    required_consecutive_passes: int = 9
    debug_mode: bool = False

    # MRC thresholds
    default_viewable_percentage: float = 50
    large_ad_viewable_percentage: float = 30
    large_ad_area_threshold: float = 242500

    # Occlusion sampling
    occlusion_sample_inset: float = 12

    # Frame walking
    max_frame_depth: int = 32


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience export
settings = get_settings()
