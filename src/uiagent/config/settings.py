from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv(override=False)

_TRUTHY = {"1", "true", "yes"}


class Settings(BaseSettings):
    """Runtime configuration; field names match environment variables case-insensitively."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    model: str = Field(default="gpt-5", validation_alias=AliasChoices("OPENAI_MODEL", "model"))
    mock_agent: bool = False
    planner_temperature: float = 0.1
    explainer_temperature: float = 0.2
    llm_timeout: float = 60.0
    prompt_char_limit: int = 4000
    log_level: str = "INFO"

    langfuse_public_key: Optional[str] = None
    langfuse_secret_key: Optional[str] = None
    langfuse_host: Optional[str] = None

    @field_validator("mock_agent", mode="before")
    @classmethod
    def _parse_flag(cls, value):
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY
        return bool(value)

    @property
    def has_model_credentials(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def tracing_enabled(self) -> bool:
        return bool(self.langfuse_public_key and self.langfuse_secret_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    cfg = settings or get_settings()
    logging.basicConfig(
        level=cfg.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
