"""Application configuration loading and validation."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(ValueError):
    """Raised when configuration cannot be loaded safely."""


class Settings(BaseModel):
    """Runtime settings loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    registry_path: Path = Path("./data/registry.json")
    allowed_tables: tuple[str, ...] = ()
    strict_sql_validation: bool = False
    log_level: str = Field(default="WARNING")

    @field_validator("registry_path", mode="before")
    @classmethod
    def validate_registry_path(cls, value: str | Path) -> Path:
        path = Path(value).expanduser() if isinstance(value, str) else value
        if not str(path):
            raise ValueError("REGISTRY_PATH cannot be empty.")
        return path

    @field_validator("allowed_tables", mode="before")
    @classmethod
    def split_allowed_tables(cls, value: str | list[str] | tuple[str, ...]) -> tuple[str, ...]:
        items = value.split(",") if isinstance(value, str) else value
        return tuple(item.strip() for item in items if item.strip())

    @field_validator("strict_sql_validation", mode="before")
    @classmethod
    def parse_flag(cls, value: str | bool) -> bool:
        if isinstance(value, bool):
            return value
        normalized = value.strip().lower()
        if normalized not in ("true", "false", ""):
            raise ValueError("expected 'true' or 'false'.")
        return normalized == "true"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(_LOG_LEVELS)}.")
        return normalized

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


def _env_value(name: str, default: str | None = None) -> str | None:
    import os

    value = os.getenv(name, default)
    if value is None:
        return None
    return value.strip()


def load_settings() -> Settings:
    """Load settings from environment variables."""
    payload = {
        "registry_path": _env_value("REGISTRY_PATH", "./data/registry.json"),
        "allowed_tables": _env_value("ALLOWED_TABLES", ""),
        "strict_sql_validation": _env_value("STRICT_SQL_VALIDATION", "false"),
        "log_level": _env_value("LOG_LEVEL", "WARNING"),
    }

    try:
        return Settings.model_validate(payload)
    except ValidationError as exc:
        messages = []
        for err in exc.errors():
            field = ".".join(str(item) for item in err["loc"])
            messages.append(f"- {field}: {err['msg']}")
        raise ConfigError(
            "Invalid configuration values:\n" + "\n".join(messages)
        ) from exc
