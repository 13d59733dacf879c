"""Configuration settings for filter-composer."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    SUGGEST_DEFAULT_SIZE: int = 100
    SUGGEST_MAX_SIZE: int = 1000

    DEFAULT_RELATION: Literal["AND", "OR"] = "AND"
    ID_PREFIX: str = "filter"

    LOG_LEVEL: str = "WARNING"

    @property
    def suggest_bounds(self) -> tuple[int, int]:
        return (1, max(1, self.SUGGEST_MAX_SIZE))


settings = Settings()
