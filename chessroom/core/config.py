"""
Configuration
----

Two groups of settings:

* GameSettings: per game preferences. Stored with every game, so a reloaded game keeps them.
  Only `auto_queen_promotion` changes engine behaviour, the rest is carried for the front end.
* AppSettings: process wide settings (database, logging). Read from environment variables.
"""

import logging
import os
from typing import Self

from pydantic import BaseModel, ConfigDict, field_validator

ENV_PREFIX = "CHESSROOM_"
_TRUTHY = {"1", "true", "yes", "on"}


class GameSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sound_effects: bool = True
    show_notations: bool = True
    highlight_moves: bool = True
    # When a pawn reaches the last rank the engine promotes it to a queen straight away,
    # instead of waiting for the front end to ask the player.
    auto_queen_promotion: bool = False


class AppSettings(BaseModel):
    database_url: str = "sqlite:///chessroom.db"
    echo_sql: bool = False
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Self:
        """Build settings from CHESSROOM_* environment variables. Missing variables keep their default."""
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if f"{ENV_PREFIX}DATABASE_URL" in env:
            values["database_url"] = env[f"{ENV_PREFIX}DATABASE_URL"]
        if f"{ENV_PREFIX}ECHO_SQL" in env:
            values["echo_sql"] = env[f"{ENV_PREFIX}ECHO_SQL"].strip().lower() in _TRUTHY
        if f"{ENV_PREFIX}LOG_LEVEL" in env:
            values["log_level"] = env[f"{ENV_PREFIX}LOG_LEVEL"]
        return cls(**values)


def configure_logging(settings: AppSettings) -> logging.Logger:
    """Attach a stream handler to the package logger (only once) and set its level."""
    logger = logging.getLogger("chessroom")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(settings.log_level)
    return logger
