"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from facade_estimator.facade_engine.rules import EngineRules


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file.

    Engine thresholds can be overridden with nested variables, e.g.
    ``RULES__GLASS_ERROR_RATIO_PCT=85``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    anthropic_api_key: str = ""

    # Claude Vision model
    claude_model: str = "claude-sonnet-4-5-20250929"
    claude_max_tokens: int = 1024

    # Photo intake
    max_photos: int = 20
    photo_download_timeout: float = 15.0  # seconds
    analysis_concurrency: int = 4

    log_level: str = "INFO"

    rules: EngineRules = EngineRules()


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
