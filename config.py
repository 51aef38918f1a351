"""
Raster Flow - Configuration

Pydantic models grouped by concern. Every field can be overridden through a
RASTER_* environment variable, e.g. RASTER_LOG_LEVEL=DEBUG or
RASTER_MAX_BUFFERS=200.
"""

import logging
import os
from functools import lru_cache
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator

from core.constants import (
    ConvolutionConstants,
    CurveConstants,
    RedEyeConstants,
    StoreConstants,
    SystemConstants,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "RASTER_"


class SystemConfig(BaseModel):
    """Process-level settings"""

    log_level: str = Field(default=SystemConstants.LOG_LEVEL_DEFAULT, description="Logging level")
    debug: bool = Field(default=False, description="Enable debug mode (auto reload)")
    thread_pool_size: int = Field(
        default=SystemConstants.THREAD_POOL_SIZE,
        ge=1,
        le=64,
        description="Row-band worker threads for convolution",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {value}")
        return value


class ApiConfig(BaseModel):
    """HTTP server settings"""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port")
    cors_enabled: bool = Field(default=True, description="Enable CORS middleware")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed origins")


class StoreConfig(BaseModel):
    """Buffer store limits"""

    max_buffers: int = Field(
        default=StoreConstants.DEFAULT_MAX_BUFFERS,
        ge=StoreConstants.MIN_BUFFERS,
        le=StoreConstants.MAX_BUFFERS,
        description="Maximum buffers kept in memory",
    )
    max_dimension: int = Field(
        default=StoreConstants.MAX_DIMENSION,
        ge=1,
        description="Largest accepted width or height",
    )


class RasterConfig(BaseModel):
    """Algorithm defaults used when a request omits them"""

    curve_step: float = Field(default=CurveConstants.DEFAULT_STEP, gt=0.0, le=1.0)
    spline_step: float = Field(default=CurveConstants.DEFAULT_SPLINE_STEP, gt=0.0, le=1.0)
    flatness_tolerance: float = Field(default=CurveConstants.DEFAULT_FLATNESS_TOLERANCE, gt=0.0)
    smoothing_threshold: int = Field(
        default=ConvolutionConstants.DEFAULT_SMOOTHING_THRESHOLD,
        ge=ConvolutionConstants.MIN_THRESHOLD,
        le=ConvolutionConstants.MAX_THRESHOLD,
    )
    red_eye_saturation_threshold: float = Field(
        default=RedEyeConstants.DEFAULT_SATURATION_THRESHOLD, ge=0.0, le=1.0
    )
    red_eye_min_red: int = Field(default=RedEyeConstants.DEFAULT_MIN_RED, ge=0, le=255)


class Settings(BaseModel):
    """Application settings"""

    environment: str = Field(default="development")
    system: SystemConfig = Field(default_factory=SystemConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    raster: RasterConfig = Field(default_factory=RasterConfig)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


# (section, field, environment variable suffix)
_ENV_FIELDS = [
    ("system", "log_level", "LOG_LEVEL"),
    ("system", "debug", "DEBUG"),
    ("system", "thread_pool_size", "THREAD_POOL_SIZE"),
    ("api", "host", "HOST"),
    ("api", "port", "PORT"),
    ("api", "cors_enabled", "CORS_ENABLED"),
    ("api", "cors_origins", "CORS_ORIGINS"),
    ("store", "max_buffers", "MAX_BUFFERS"),
    ("store", "max_dimension", "MAX_DIMENSION"),
    ("raster", "curve_step", "CURVE_STEP"),
    ("raster", "spline_step", "SPLINE_STEP"),
    ("raster", "flatness_tolerance", "FLATNESS_TOLERANCE"),
    ("raster", "smoothing_threshold", "SMOOTHING_THRESHOLD"),
    ("raster", "red_eye_saturation_threshold", "RED_EYE_SATURATION_THRESHOLD"),
    ("raster", "red_eye_min_red", "RED_EYE_MIN_RED"),
]


def _parse_env_value(name: str, raw: str) -> Any:
    if name == "cors_origins":
        return [origin.strip() for origin in raw.split(",") if origin.strip()]
    if name in ("debug", "cors_enabled"):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return raw


def load_settings(environ: Dict[str, str] = None) -> Settings:
    """
    Build settings from defaults plus RASTER_* environment overrides.

    Args:
        environ: Mapping to read instead of os.environ (tests)

    Raises:
        pydantic.ValidationError: If an override has an invalid value
    """
    environ = os.environ if environ is None else environ
    sections: Dict[str, Dict[str, Any]] = {}

    for section, name, suffix in _ENV_FIELDS:
        raw = environ.get(ENV_PREFIX + suffix)
        if raw is not None:
            sections.setdefault(section, {})[name] = _parse_env_value(name, raw)

    environment = environ.get(ENV_PREFIX + "ENVIRONMENT", "development")
    return Settings(environment=environment, **sections)


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings (read once)"""
    return load_settings()
