"""
SmartAd Console Configuration
=============================

This module handles configuration loading for the SmartAd console.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    SMARTAD_CATALOG_PATH          -> catalog.path
    SMARTAD_TICK_INTERVAL         -> rotation.tick_interval_seconds
    SMARTAD_SAMPLER_PERIOD        -> sampler.period_seconds
    SMARTAD_DETECTION_PROBABILITY -> sampler.detection_probability
    SMARTAD_DWELL_SECONDS         -> sampler.dwell_seconds
    SMARTAD_RANDOM_SEED           -> random.seed
    SMARTAD_PORT                  -> server.port
    SMARTAD_LOG_LEVEL             -> logging.level
    PORT                          -> server.port (takes precedence)

Example:
    from smartad_console.config import settings

    print(settings.app.name)
    print(settings.sampler.period_seconds)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class AppConfig(BaseModel):
    """Application identification."""

    name: str = Field(default="smartad-console", description="Application name")
    version: str = Field(default="v0.1.0", description="Application version")


class CatalogConfig(BaseModel):
    """Advertisement catalog source."""

    path: Optional[str] = Field(
        default=None,
        description="YAML catalog file (None = built-in demo catalog)",
    )


class RotationConfig(BaseModel):
    """Rotation scheduler timing."""

    tick_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Wall-clock seconds per countdown tick",
    )


class SamplerConfig(BaseModel):
    """Detection sampler and simulated sensor configuration."""

    period_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Seconds between sensor polls",
    )
    jitter_seconds: float = Field(
        default=0.0,
        ge=0,
        description="Max random extra delay per poll",
    )
    detection_probability: float = Field(
        default=0.3,
        ge=0,
        le=1.0,
        description="Chance of a detection per poll",
    )
    dwell_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Seconds a detection overlay stays visible",
    )
    min_age: int = Field(default=15, ge=0, description="Youngest simulated age")
    max_age: int = Field(default=74, ge=0, description="Oldest simulated age")
    min_confidence: float = Field(default=0.80, ge=0, le=1.0, description="Lowest confidence")
    max_confidence: float = Field(default=0.95, ge=0, le=1.0, description="Highest confidence")
    start_active: bool = Field(
        default=False,
        description="Start sampling as soon as the console starts",
    )

    @model_validator(mode="after")
    def _check_ranges(self) -> "SamplerConfig":
        if self.min_age > self.max_age:
            raise ValueError("sampler.min_age must not exceed sampler.max_age")
        if self.min_confidence > self.max_confidence:
            raise ValueError("sampler.min_confidence must not exceed sampler.max_confidence")
        return self


class AnalyticsConfig(BaseModel):
    """Analytics aggregator configuration."""

    max_log_entries: int = Field(
        default=100,
        ge=1,
        description="Detection log capacity (oldest evicted first)",
    )
    recent_window_ms: int = Field(
        default=60_000,
        gt=0,
        description="Window for the recent detections count",
    )
    recent_activity_limit: int = Field(
        default=10,
        ge=0,
        description="Rows in the recent activity feed",
    )


class RandomConfig(BaseModel):
    """Random source configuration."""

    seed: Optional[int] = Field(
        default=None,
        description="Fixed seed for reproducible runs (None = OS entropy)",
    )


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8001, ge=1, le=65535, description="Bind port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the SmartAd console.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    app: AppConfig = Field(default_factory=AppConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    rotation: RotationConfig = Field(default_factory=RotationConfig)
    sampler: SamplerConfig = Field(default_factory=SamplerConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    random: RandomConfig = Field(default_factory=RandomConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    # Find config file
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    # Load from YAML if exists
    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    # Apply environment variable overrides
    _apply_env_overrides(config_data)

    # Build settings object
    settings = Settings.model_validate(config_data)

    return settings


def override_settings(settings: Settings, updates: dict) -> Settings:
    """
    Return a re-validated copy of settings with section values replaced.

    Args:
        settings: Base settings
        updates: {section: {field: value}}; None values are skipped

    Returns:
        Settings: New validated settings

    Raises:
        pydantic.ValidationError: If an override is out of range
    """
    data = settings.model_dump()
    for section, values in updates.items():
        for key, value in values.items():
            if value is not None:
                data.setdefault(section, {})[key] = value
    return Settings.model_validate(data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Catalog
    if env_catalog := os.environ.get("SMARTAD_CATALOG_PATH"):
        config_data.setdefault("catalog", {})["path"] = env_catalog

    # Rotation
    if env_tick := os.environ.get("SMARTAD_TICK_INTERVAL"):
        config_data.setdefault("rotation", {})["tick_interval_seconds"] = float(env_tick)

    # Sampler
    if env_period := os.environ.get("SMARTAD_SAMPLER_PERIOD"):
        config_data.setdefault("sampler", {})["period_seconds"] = float(env_period)
    if env_prob := os.environ.get("SMARTAD_DETECTION_PROBABILITY"):
        config_data.setdefault("sampler", {})["detection_probability"] = float(env_prob)
    if env_dwell := os.environ.get("SMARTAD_DWELL_SECONDS"):
        config_data.setdefault("sampler", {})["dwell_seconds"] = float(env_dwell)

    # Random source
    if env_seed := os.environ.get("SMARTAD_RANDOM_SEED"):
        config_data.setdefault("random", {})["seed"] = int(env_seed)

    # Server settings (PORT wins, for container platforms)
    if env_port := os.environ.get("PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)
    elif env_port := os.environ.get("SMARTAD_PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)

    # Logging settings
    if env_log := os.environ.get("SMARTAD_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
