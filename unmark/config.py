from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="UNMARK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = "127.0.0.1"
    port: int = 8001

    # Where the user configuration (custom phrases, enabled patterns) lives
    config_path: str = "unmark.json"

    # Pipe pattern removals through the indentation normalizer
    normalize_indentation: bool = True

    log_level: str = "WARNING"


settings = Settings()
