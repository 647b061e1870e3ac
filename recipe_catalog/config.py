"""
Catalog configuration
=====================

Settings are read from the environment (and an optional ``.env`` file).
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

from . import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    app_name: str = "Recipe Catalog API"
    app_version: str = __version__
    environment: str = "development"  # "development" or "production"
    debug: bool = False

    # Storage
    database_path: str = "recipes.db"

    # Import
    json_data_path: Optional[str] = None  # JSON_DATA_PATH wins over the CLI argument
    default_json_path: str = "data/US_recipes.json"
    import_progress_every: int = 100
    import_error_preview: int = 5

    # CORS
    cors_origins: list = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
