from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide configuration loaded from env or an .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # --- Credentials ---
    api_key: str = ""
    basic_auth_username: str = ""
    basic_auth_password: str = ""

    # --- Server ---
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # --- Scratch directories ---
    upload_dir: Path = Path("./uploads")
    output_dir: Path = Path("./output")
    stale_file_max_age_seconds: int = 3600

    # --- Upload / processing limits ---
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    pdftk_binary: str = "pdftk"
    process_timeout_seconds: float = Field(default=60.0, gt=0)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
