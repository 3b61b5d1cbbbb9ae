"""
Configuration settings for the problem registry using Pydantic Settings.

All values come from environment variables (or a .env file) and are read
once, when the application is created.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_LOG_CONFIG = Path(__file__).parent / "logging_config.yaml"
ENVIRONMENTS = ("development", "production")


class ServiceSettings(BaseSettings):
    """
    Settings for the problem registry service.

    Uses Pydantic Settings to load and validate configuration from
    environment variables with proper type checking and defaults.
    """

    host: str = Field(
        default="0.0.0.0",
        alias="HOST",
        description="API server host"
    )
    port: int = Field(
        default=3001,
        alias="PORT",
        description="API server port"
    )
    environment: str = Field(
        default="production",
        alias="APP_ENV",
        description="Deployment mode (development, production); error details are shown only in development"
    )
    route_prefix: str = Field(
        default="",
        alias="ROUTE_PREFIX",
        description="Prefix for every route, e.g. /api"
    )
    log_config_path: Path = Field(
        default=DEFAULT_LOG_CONFIG,
        alias="LOG_CONFIG_PATH",
        description="YAML logging configuration file"
    )
    reload: bool = Field(
        default=False,
        alias="RELOAD",
        description="Restart the server when source files change"
    )
    cors_origins: List[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
        description="Allowed CORS origins"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_prefix": "",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ENVIRONMENTS:
            raise ValueError(f"APP_ENV must be one of: {', '.join(ENVIRONMENTS)}")
        return value

    @field_validator("route_prefix")
    @classmethod
    def normalize_route_prefix(cls, value: str) -> str:
        value = value.strip().strip("/")
        return f"/{value}" if value else ""

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return self.model_dump(mode="json")


# Global settings instance
_settings: Optional[ServiceSettings] = None


def get_settings() -> ServiceSettings:
    """
    Get global settings instance (singleton pattern).

    Returns:
        Validated ServiceSettings instance
    """
    global _settings
    if _settings is None:
        _settings = ServiceSettings()
    return _settings


def reset_settings() -> None:
    """Reset global settings (useful for testing)."""
    global _settings
    _settings = None
