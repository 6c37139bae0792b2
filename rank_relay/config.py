"""
Configuration management for the rank relay.

This module handles all configuration settings loaded from environment variables.
Directories are created lazily when needed, not at import time.

Author: Blessing Ajala - Software Engineer
GitHub: https://github.com/Oyelamin
LinkedIn: https://www.linkedin.com/in/blessphp/
Twitter: @Blessin06147308
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_ASSISTANT_ID = "asst_N6FFm0AI1aNBtBAcSZKr1lLH"


def _get_env_list(key: str, default: Optional[str] = None) -> Optional[List[str]]:
    """Parse comma-separated environment variable into list."""
    value = os.getenv(key, default)
    if value:
        return [item.strip() for item in value.split(",") if item.strip()]
    return None


def _get_env_bool(key: str, default: bool = False) -> bool:
    """Parse boolean environment variable."""
    return os.getenv(key, str(default)).lower() in ("true", "1", "yes")


def _get_env_int(key: str, default: int) -> int:
    """Parse integer environment variable with validation."""
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def _get_env_float(key: str, default: float) -> float:
    """Parse float environment variable with validation."""
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class PathConfig:
    """Path configuration - directories created lazily."""

    base_dir: Path = field(default_factory=lambda: Path(__file__).parent.parent)

    @property
    def logs_dir(self) -> Path:
        return self.base_dir / "logs"

    @property
    def log_file(self) -> Path:
        return self.logs_dir / "app.log"


@dataclass(frozen=True)
class SheetConfig:
    """Spreadsheet CSV export configuration."""

    sheet_id: Optional[str] = field(default_factory=lambda: os.getenv("SHEET_ID") or None)
    sheet_name: str = field(default_factory=lambda: os.getenv("SHEET_NAME", "Rank"))
    timeout: float = field(default_factory=lambda: _get_env_float("SHEET_TIMEOUT", 10.0))
    url_template: str = (
        "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq?tqx=out:csv&sheet={sheet_name}"
    )

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.timeout <= 0:
            object.__setattr__(self, 'timeout', 10.0)


@dataclass(frozen=True)
class AssistantConfig:
    """OpenAI assistant configuration."""

    api_key: Optional[str] = field(default_factory=lambda: os.getenv("OPENAI_API_KEY") or None)
    assistant_id: str = field(default_factory=lambda: os.getenv("ASSISTANT_ID", DEFAULT_ASSISTANT_ID))
    poll_interval: float = field(default_factory=lambda: _get_env_float("ASSISTANT_POLL_INTERVAL", 1.0))
    max_attempts: int = field(default_factory=lambda: _get_env_int("ASSISTANT_MAX_ATTEMPTS", 60))
    delete_threads: bool = field(default_factory=lambda: _get_env_bool("ASSISTANT_DELETE_THREADS", True))

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.poll_interval <= 0:
            object.__setattr__(self, 'poll_interval', 1.0)
        if self.max_attempts < 1:
            object.__setattr__(self, 'max_attempts', 60)


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server configuration."""

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _get_env_int("PORT", 3000))


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    enable_performance_tracking: bool = field(default_factory=lambda: _get_env_bool("ENABLE_PERFORMANCE_TRACKING", True))


@dataclass(frozen=True)
class APIConfig:
    """FastAPI configuration."""

    title: str = "Rank Relay API"
    version: str = "1.0.0"
    description: str = "Answers questions about spreadsheet rank data using an OpenAI assistant"
    allowed_origins: List[str] = field(default_factory=lambda: _get_env_list("ALLOWED_ORIGINS", "*") or [])


@dataclass
class Settings:
    """Application settings container."""

    paths: PathConfig = field(default_factory=PathConfig)
    sheet: SheetConfig = field(default_factory=SheetConfig)
    assistant: AssistantConfig = field(default_factory=AssistantConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    api: APIConfig = field(default_factory=APIConfig)


# Global settings instance
settings = Settings()
