"""Logging configuration for the capture sync job.

structlog renders events; stdlib logging routes them. Console output always
goes to stderr because stdout carries only the run's JSON response.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any

import structlog

DEVELOPMENT = "development"


class LoggingService:
    """Configures structlog and the stdlib handlers behind it."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Path | None = None,
        environment: str = DEVELOPMENT,
    ) -> None:
        """Initialize the logging service.

        Args:
            log_level: The minimum log level to capture
            log_dir: Directory for rotating log files (None for stderr only)
            environment: ``development`` renders for humans, anything else as JSON
        """
        self.log_level = log_level.upper()
        self.log_dir = log_dir
        self.environment = environment
        self.is_development = environment == DEVELOPMENT

    def configure(self) -> None:
        """Install handlers and structlog processors.

        Raises:
            OSError: If the log directory cannot be created or opened
        """
        handlers = self._build_handlers()

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(self.numeric_level)
        for handler in handlers:
            root_logger.addHandler(handler)

        structlog.configure(
            processors=self._get_processors(),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=False,
        )

    @property
    def numeric_level(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)

    def _build_handlers(self) -> list[logging.Handler]:
        """Create all handlers up front so a bad log dir leaves logging untouched."""
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(self.numeric_level)
        if self.is_development:
            console_handler.setFormatter(logging.Formatter(
                fmt="%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
                datefmt="%H:%M:%S"
            ))
        else:
            console_handler.setFormatter(logging.Formatter("%(message)s"))

        handlers: list[logging.Handler] = [console_handler]
        if self.log_dir:
            handlers.extend(self._build_file_handlers(self.log_dir))
        return handlers

    def _build_file_handlers(self, log_dir: Path) -> list[logging.Handler]:
        """Rotating ``app.log`` for everything, ``error.log`` for errors only."""
        log_dir.mkdir(parents=True, exist_ok=True)
        json_lines = logging.Formatter("%(message)s")

        app_handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / "app.log",
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=5,
            encoding="utf-8"
        )
        app_handler.setLevel(self.numeric_level)
        app_handler.setFormatter(json_lines)

        error_handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / "error.log",
            maxBytes=1024 * 1024,  # 1MB
            backupCount=3,
            encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(json_lines)

        return [app_handler, error_handler]

    def _get_processors(self) -> list[Any]:
        """Shared processors plus a renderer chosen by environment."""
        processors: list[Any] = [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        # Log files must stay machine-readable, so they force JSON
        if self.is_development and not self.log_dir:
            processors.append(structlog.dev.ConsoleRenderer(colors=False))
        else:
            processors.append(structlog.processors.JSONRenderer())
        return processors

    def get_logger(self, name: str | None = None) -> structlog.stdlib.BoundLogger:
        return structlog.stdlib.get_logger(name)


def setup_logging(
    log_level: str = "INFO",
    log_dir: Path | None = None,
    environment: str = DEVELOPMENT,
) -> LoggingService:
    """Configure application logging and return the service.

    Args:
        log_level: Minimum log level to capture
        log_dir: Directory for log files (None for stderr only)
        environment: Environment name (development/production)

    Raises:
        OSError: If ``log_dir`` cannot be used
    """
    service = LoggingService(log_level=log_level, log_dir=log_dir, environment=environment)
    service.configure()
    return service
