"""Settings loader for the dice roller.

Values come from ``DICE_*`` environment variables or a local ``.env`` file.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .dice import MAX_DICE


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    advanced: bool = Field(False, description="Allow parenthesised dice count/sides by default")
    max_dice: int = Field(MAX_DICE, ge=1, description="Largest number of dice one roll may use")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    log_json: bool = Field(False, description="Render log lines as JSON instead of key=value")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
