"""Typed settings with Pydantic validation."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


def _normalize_optional_path(value: str | Path | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class LoggingSettings(BaseModel):
    """Settings for the package logger."""

    model_config = ConfigDict(validate_assignment=True)

    level: int = Field(default=logging.INFO, ge=logging.NOTSET, le=logging.CRITICAL)
    log_dir: str | None = None

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: int | str | None) -> int:
        """Accept numeric levels as well as names such as ``"debug"``."""
        if value is None:
            return logging.INFO
        if isinstance(value, bool):
            raise TypeError("Boolean is not a valid log level")
        if isinstance(value, str):
            raw = value.strip()
            if not raw:
                return logging.INFO
            if raw.isdigit():
                return int(raw)
            resolved = logging.getLevelName(raw.upper())
            if not isinstance(resolved, int):
                raise ValueError(f"Unknown log level: {value}")
            return resolved
        return value

    @field_validator("log_dir", mode="before")
    @classmethod
    def _normalize_log_dir(cls, value: str | Path | None) -> str | None:
        """Convert empty strings to ``None``."""
        return _normalize_optional_path(value)


class StoreSettings(BaseModel):
    """Settings controlling the in-memory label repository."""

    model_config = ConfigDict(validate_assignment=True)

    trace_signals: bool = False
    seed_path: str | None = None

    @field_validator("seed_path", mode="before")
    @classmethod
    def _normalize_seed_path(cls, value: str | Path | None) -> str | None:
        return _normalize_optional_path(value)


class AppSettings(BaseModel):
    """Aggregate settings."""

    model_config = ConfigDict(validate_assignment=True)

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)

    def to_dict(self) -> dict:
        """Return settings as a plain dictionary."""
        return self.model_dump()


def load_app_settings(path: str | Path) -> AppSettings:
    """Load :class:`AppSettings` from *path* with validation.

    Format is detected by file extension: ``.toml`` uses :mod:`tomllib`,
    everything else is treated as JSON.  Any validation errors are wrapped into
    :class:`ValueError` with a human-friendly message.
    """
    p = Path(path)
    with p.open("rb") as fh:
        data = tomllib.load(fh) if p.suffix.lower() == ".toml" else json.load(fh)
    try:
        return AppSettings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc
