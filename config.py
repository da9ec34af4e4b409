"""
Configuration for the Pixel Transform service.

Settings are pydantic models populated from environment variables with the
PIXEL_TRANSFORM_ prefix, e.g.:

    PIXEL_TRANSFORM_ENV=production
    PIXEL_TRANSFORM_LOG_LEVEL=DEBUG
    PIXEL_TRANSFORM_BACKEND=pillow
    PIXEL_TRANSFORM_PORT=8000
"""

import os
from functools import lru_cache
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator

from core.constants import SurfaceConstants, TransformConstants
from core.enums import Algorithm, BackendType

ENV_PREFIX = "PIXEL_TRANSFORM_"


def _env(name: str, default: Any = None) -> Any:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class SystemSettings(BaseModel):
    """Process-wide settings."""

    log_level: str = Field(default="INFO", description="Root logging level")
    debug: bool = Field(default=False, description="Enable debug mode (auto-reload, verbose logs)")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {value}")
        return level


class APISettings(BaseModel):
    """HTTP server settings."""

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    cors_enabled: bool = True
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class TransformSettings(BaseModel):
    """Transform pipeline defaults."""

    backend: BackendType = BackendType.OPENCV
    default_format: str = TransformConstants.DEFAULT_FORMAT
    default_quality: float = Field(default=TransformConstants.DEFAULT_QUALITY, ge=0.0, le=1.0)
    default_algorithm: Algorithm = Algorithm.LANCZOS
    max_dimension: int = Field(default=SurfaceConstants.MAX_DIMENSION, ge=1)


class Settings(BaseModel):
    """Root settings object."""

    environment: str = "development"
    system: SystemSettings = Field(default_factory=SystemSettings)
    api: APISettings = Field(default_factory=APISettings)
    transform: TransformSettings = Field(default_factory=TransformSettings)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from PIXEL_TRANSFORM_* environment variables."""
        origins = _env("CORS_ORIGINS")
        return cls(
            environment=_env("ENV", "development"),
            system=SystemSettings(
                log_level=_env("LOG_LEVEL", "INFO"),
                debug=_env_bool("DEBUG", False),
            ),
            api=APISettings(
                host=_env("HOST", "0.0.0.0"),
                port=int(_env("PORT", 8000)),
                cors_enabled=_env_bool("CORS_ENABLED", True),
                cors_origins=[o.strip() for o in origins.split(",")] if origins else ["*"],
            ),
            transform=TransformSettings(
                backend=_env("BACKEND", BackendType.OPENCV.value),
                default_format=_env("DEFAULT_FORMAT", TransformConstants.DEFAULT_FORMAT),
                default_quality=float(_env("DEFAULT_QUALITY", TransformConstants.DEFAULT_QUALITY)),
                default_algorithm=_env("DEFAULT_ALGORITHM", Algorithm.LANCZOS.value),
                max_dimension=int(_env("MAX_DIMENSION", SurfaceConstants.MAX_DIMENSION)),
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings.from_env()
