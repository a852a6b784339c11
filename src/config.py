"""Application configuration."""

import logging
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from TimestampOrdering import COMMIT_NOOP

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Config(BaseSettings):
    """Settings loaded from ``TO_SCHEDULER_*`` environment variables.

    Invalid values raise ``pydantic.ValidationError`` when the settings are
    built, before any input is read.
    """

    model_config = SettingsConfigDict(
        env_prefix="TO_SCHEDULER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    commit_policy: Literal["noop", "reset"] = COMMIT_NOOP
    input_path: str = "data/in.txt"
    output_path: str = "data/out"
    debug: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("commit_policy", mode="before")
    @classmethod
    def lower_commit_policy(cls, value):
        return value.lower() if isinstance(value, str) else value


def configure_logging(level="INFO"):
    logging.basicConfig(level=level, format=LOG_FORMAT)
