"""Configuration service for building settings from the environment."""

import os
import re
from collections.abc import Mapping
from pathlib import Path

import structlog

from ..models import DEFAULT_API_BASE_URL, AppConfig
from .errors import ConfigurationError
from .logging import DEVELOPMENT

log = structlog.stdlib.get_logger()

OUTPUT_DIRECTORY_NAME = "Captures"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_API_KEY_STRIP_RE = re.compile(r"[^a-zA-Z0-9]")


def sanitize_api_key(value: str | None) -> str:
    """Keep only the ASCII letters and digits of an API key."""
    if not value:
        return ""
    return _API_KEY_STRIP_RE.sub("", value)


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None) -> None:
        self.is_valid: bool = is_valid
        self.errors: list[str] = errors or []


class ConfigurationService:
    """Service for assembling application configuration.

    The environment and working directory are passed in rather than read
    ad hoc so a run can be reproduced in tests.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        cwd: Path | None = None,
    ) -> None:
        self.environ: Mapping[str, str] = os.environ if environ is None else environ
        self.cwd: Path = cwd or Path.cwd()

    @property
    def environment(self) -> str:
        """Deployment environment name; selects the log renderer."""
        return self.environ.get("ENVIRONMENT") or DEVELOPMENT

    def load_config(
        self,
        output_directory: Path | None = None,
        log_level: str | None = None,
        log_dir: Path | None = None,
    ) -> AppConfig:
        """Build configuration from the environment and explicit overrides.

        Overrides win over environment variables. A missing API key is not
        reported here; the fetch step raises it so the output directory is
        still created first.

        Args:
            output_directory: Override for the capture directory
            log_level: Override for the log level
            log_dir: Override for the log file directory

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: If a setting has an invalid value
        """
        env = self.environ

        if output_directory is None:
            env_dir = env.get("CAPTURES_DIR")
            output_directory = Path(env_dir) if env_dir else self.cwd / OUTPUT_DIRECTORY_NAME
        if not output_directory.is_absolute():
            output_directory = self.cwd / output_directory

        if log_dir is None and env.get("LOG_DIR"):
            log_dir = Path(env["LOG_DIR"])
        if log_dir is not None and not log_dir.is_absolute():
            log_dir = self.cwd / log_dir

        timeout_raw = env.get("REQUEST_TIMEOUT", "60")
        try:
            request_timeout = float(timeout_raw)
        except ValueError as e:
            raise ConfigurationError(
                "REQUEST_TIMEOUT must be a number.",
                setting="REQUEST_TIMEOUT",
                current_value=timeout_raw,
            ) from e

        base_url = env.get("XBL_API_BASE_URL") or DEFAULT_API_BASE_URL
        if not base_url.endswith("/"):
            base_url += "/"

        config = AppConfig(
            api_key=sanitize_api_key(env.get("API_KEY")),
            output_directory=output_directory,
            api_base_url=base_url,
            request_timeout=request_timeout,
            log_level=(log_level or env.get("LOG_LEVEL") or "INFO").upper(),
            log_dir=log_dir,
            environment=self.environment,
        )

        result = self.validate_config(config)
        if not result.is_valid:
            raise ConfigurationError(
                f"Invalid configuration: {', '.join(result.errors)}",
            )

        log.debug(
            "Configuration loaded",
            output_directory=str(config.output_directory),
            api_base_url=config.api_base_url,
            api_key_set=bool(config.api_key),
        )
        return config

    def validate_config(self, config: AppConfig) -> ValidationResult:
        """Validate configuration settings."""
        errors = []

        if not config.api_base_url.startswith(("http://", "https://")):
            errors.append("api_base_url must be an http(s) URL")

        if config.request_timeout <= 0:
            errors.append("request_timeout must be positive")

        if config.log_level not in VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}")

        return ValidationResult(len(errors) == 0, errors)
