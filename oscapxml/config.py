"""
oscapxml Configuration
Environment driven settings for parsing and logging
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """oscapxml settings, read from OSCAPXML_* environment variables or .env"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="OSCAPXML_",
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Root log level used by the CLI")
    log_format: str = "%(asctime)s - %(levelname)s - %(message)s"

    # Parsing limits
    max_file_size: int = Field(default=100 * 1024 * 1024, description="Largest document accepted, in bytes")
    huge_tree: bool = Field(default=False, description="Lift libxml2 depth/size limits for very large content")

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("max_file_size")
    @classmethod
    def max_file_size_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_file_size must be a positive number of bytes")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings"""
    return Settings()
