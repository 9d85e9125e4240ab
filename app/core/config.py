from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class MissingAPIKeyError(RuntimeError):
    """Raised when a provider is used without its credential configured."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} is not set")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    APP_NAME: str = "Moodwatch"
    PORT: int = 8000
    APP_ENV: Literal["development", "production"] = "production"

    # Catalog providers
    TMDB_API_KEY: str | None = None
    TMDB_API_URL: str = "https://api.themoviedb.org/3"
    TMDB_IMAGE_URL: str = "https://image.tmdb.org/t/p"
    TMDB_LANGUAGE: str = "en-US"
    WATCH_PROVIDER_REGION: str = "US"
    JIKAN_API_URL: str = "https://api.jikan.moe/v4"
    PROVIDER_TIMEOUT_SECONDS: float = 10.0

    TRENDING_PAGE_SIZE: int = 12  # 2 rows of 6 cards

    # AI
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_API_KEY: str | None = None


settings = Settings()
