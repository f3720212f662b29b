"""
Application configuration and settings management.
Uses Pydantic Settings for type-safe environment variable handling.

Both tools read their defaults from here, but each tool also accepts
explicit values at construction so tests can swap the interpreter or
the forecast endpoint.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Application
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Code Execution
    python_interpreter: str = Field(default="python3", alias="PYTHON_INTERPRETER")
    code_timeout_seconds: float = Field(default=10, alias="CODE_TIMEOUT_SECONDS")
    code_max_buffer_bytes: int = Field(
        default=10 * 1024 * 1024, alias="CODE_MAX_BUFFER_BYTES"
    )

    # Open-Meteo
    open_meteo_base_url: str = Field(
        default="https://api.open-meteo.com/v1", alias="OPEN_METEO_BASE_URL"
    )
    weather_request_timeout: float = Field(
        default=10, alias="WEATHER_REQUEST_TIMEOUT"
    )

    # Feature Flags
    enable_code_execution: bool = Field(default=True, alias="ENABLE_CODE_EXECUTION")
    enable_weather: bool = Field(default=True, alias="ENABLE_WEATHER")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
