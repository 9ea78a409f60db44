"""Configuration management using Pydantic Settings"""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "guidance-engine"
    log_level: str = "INFO"
    currency: str = "ETB"

    # Rule A: cash runway
    spend_lookback_days: int = 30
    runway_high_days: int = 3
    runway_medium_days: int = 7

    # Rule B: payment risk
    payment_lookahead_days: int = 7

    # Rule C: budget burn
    budget_burn_min_categories: int = 2

    # Rule D: goal delay
    goal_pace_horizon_days: int = 60
    goal_pace_factor: Decimal = Decimal("1.5")
    goal_contribution_lookback_days: int = 30

    # Rule E: community funds
    community_lookahead_days: int = 7
    community_overlap_window_days: int = 7
    community_overlap_balance_ratio: Decimal = Decimal("0.5")
    community_reserve_ratio: Decimal = Decimal("0.7")
    community_reserve_days: int = 3


settings = Settings()
