"""Service settings, read from ``VAULTSIM_*`` environment variables."""

from __future__ import annotations

import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "VAULTSIM_"


class Settings(BaseModel):
    """Settings for the HTTP service. The engine itself takes no configuration."""

    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call /api/* from a browser.",
    )
    log_level: str = Field(
        default="INFO",
        description="Root logging level, e.g. 'DEBUG', 'INFO', 'WARNING'.",
    )
    default_horizon_years: float = Field(
        default=10.0,
        ge=0,
        description="Horizon used when a simulation request does not name one.",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return value.upper()


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment; unset variables keep their defaults."""
    env = os.environ if environ is None else environ
    values: dict = {}

    origins = env.get(f"{ENV_PREFIX}CORS_ORIGINS")
    if origins:
        values["cors_origins"] = [origin.strip() for origin in origins.split(",") if origin.strip()]

    level = env.get(f"{ENV_PREFIX}LOG_LEVEL")
    if level:
        values["log_level"] = level

    horizon = env.get(f"{ENV_PREFIX}DEFAULT_HORIZON_YEARS")
    if horizon:
        values["default_horizon_years"] = horizon

    return Settings.model_validate(values)
