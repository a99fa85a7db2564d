"""Configuration data models."""

from dataclasses import dataclass
from pathlib import Path


DEFAULT_API_BASE_URL = "https://xbl.io/api/v2/dvr/"


@dataclass(frozen=True)
class AppConfig:
    """Application configuration settings."""
    api_key: str  # Already sanitized; empty means not set
    output_directory: Path
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: float = 60.0
    log_level: str = "INFO"
    log_dir: Path | None = None
    environment: str = "development"
