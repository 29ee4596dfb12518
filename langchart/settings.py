from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    A missing `GITHUB_TOKEN` restricts charts to public repositories and
    disables the activity streak.
    """

    github_token: str | None = None
    github_graphql_url: str = "https://api.github.com/graphql"
    github_api_base_url: str = "https://api.github.com"
    github_timeout_seconds: float = 20.0
    streak_wait_seconds: float = 10.0
    default_max_items: int = 6
    max_items_limit: int = 15
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1
    rate_limit_per_minute: int = 30
    rate_limit_window_seconds: int = 60

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def get_settings() -> Settings:
    return Settings()
