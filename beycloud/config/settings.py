from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    """General library settings."""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "text"

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore"
    }
