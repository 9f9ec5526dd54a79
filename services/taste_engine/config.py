"""
Engine configuration via pydantic-settings.
All config read from environment variables (prefix TASTE_) with defaults that
match production behaviour.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # Decay
    default_half_life_days: float = Field(default=180.0, gt=0)

    # Trajectory windows (age in days, relative to "now")
    recent_window_days: int = Field(default=90, gt=0)
    historical_window_days: int = Field(default=270, gt=0)

    # Both windows need at least this many signals before trajectory runs
    min_window_signals: int = Field(default=3, ge=1)

    model_config = {"env_prefix": "TASTE_", "env_file": ".env", "extra": "ignore"}


settings = Settings()
