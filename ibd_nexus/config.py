from pydantic_settings import BaseSettings

from ibd_nexus.models.dietary_profile import DietaryProfile


class Settings(BaseSettings):
    database_url: str = "sqlite:///./ibd_nexus.db"
    journal_storage_key: str = "IBD_NEXUS_JOURNAL_ENTRIES"

    anthropic_api_key: str = ""
    summary_model: str = "claude-sonnet-4-5-20250929"
    vision_model: str = "claude-sonnet-4-5-20250929"

    # Anthropic API timeout settings (seconds)
    anthropic_timeout: int = 60
    anthropic_connect_timeout: int = 10

    # Food trigger thresholds
    food_min_entries: int = 3
    food_min_occurrences: int = 2
    food_safe_ratio: float = 0.8
    food_caution_ratio: float = 0.4

    # Trend analysis needs at least this many entries overall
    trend_min_entries: int = 2

    # Static profile passed to the menu and ingredient scanners
    dietary_profile: DietaryProfile = DietaryProfile()

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_nested_delimiter = "__"


settings = Settings()
