"""Main entry point for the Xbox capture sync job.

Runs once: syncs screenshots then game clips into the output directory,
prints a single JSON response on stdout and exits.
"""

import argparse
import sys
from collections.abc import Mapping
from pathlib import Path

import httpx
import structlog

from xbox_capture_sync import __version__
from xbox_capture_sync.models import AppConfig, RunResult
from xbox_capture_sync.services.capture_api import CaptureApiService
from xbox_capture_sync.services.capture_sync import CaptureSyncService
from xbox_capture_sync.services.config import VALID_LOG_LEVELS, ConfigurationService
from xbox_capture_sync.services.errors import AppError, FileSystemError, log_error
from xbox_capture_sync.services.filesystem import FileSystemService
from xbox_capture_sync.services.http_client import HttpClientService
from xbox_capture_sync.services.logging import setup_logging


log = structlog.stdlib.get_logger()


class ApplicationContext:
    """Wires the services for a single run and releases them afterwards."""

    def __init__(self, config: AppConfig, transport: httpx.BaseTransport | None = None) -> None:
        self.config: AppConfig = config
        self.http_client: HttpClientService = HttpClientService(
            timeout=config.request_timeout,
            transport=transport,
        )
        self.filesystem: FileSystemService = FileSystemService(config.output_directory)
        self.api: CaptureApiService = CaptureApiService(
            http_client=self.http_client,
            api_key=config.api_key,
            base_url=config.api_base_url,
        )
        self.sync: CaptureSyncService = CaptureSyncService(
            api=self.api,
            http_client=self.http_client,
            filesystem=self.filesystem,
        )

    def close(self) -> None:
        self.http_client.close()

    def __enter__(self) -> "ApplicationContext":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ParsedArgs:
    """Type-safe container for parsed command-line arguments."""

    def __init__(
        self,
        output_dir: Path | None,
        log_level: str | None,
        log_dir: Path | None,
    ) -> None:
        self.output_dir: Path | None = output_dir
        self.log_level: str | None = log_level
        self.log_dir: Path | None = log_dir


def parse_arguments(argv: list[str] | None = None) -> ParsedArgs:
    """Parse command-line arguments.

    All arguments are optional; the job runs with none.
    """
    parser = argparse.ArgumentParser(
        prog="xbox-capture-sync",
        description="Download new Xbox screenshots and game clips from xbl.io",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  API_KEY           xbl.io API key (required)
  CAPTURES_DIR      Output directory (default: ./Captures)
  XBL_API_BASE_URL  API base URL (default: https://xbl.io/api/v2/dvr/)
  REQUEST_TIMEOUT   HTTP timeout in seconds (default: 60)
  LOG_LEVEL         Logging level (default: INFO)
  LOG_DIR           Directory for log files
  ENVIRONMENT       development (readable logs) or production (JSON logs)
        """
    )

    _ = parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    _ = parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory captures are saved to (default: ./Captures)"
    )

    _ = parser.add_argument(
        "--log-level",
        choices=list(VALID_LOG_LEVELS),
        default=None,
        help="Set the logging level (default: INFO)"
    )

    _ = parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for log files (default: stderr only)"
    )

    ns = parser.parse_args(argv)

    return ParsedArgs(
        output_dir=ns.output_dir,
        log_level=ns.log_level,
        log_dir=ns.log_dir,
    )


def run_sync(config: AppConfig, transport: httpx.BaseTransport | None = None) -> RunResult:
    """Run one sync with the given configuration.

    Args:
        config: Loaded configuration
        transport: Optional HTTP transport override

    Returns:
        The run's result; failures are reported, not raised
    """
    with ApplicationContext(config, transport=transport) as context:
        return context.sync.execute()


def emit(result: RunResult) -> int:
    """Write the JSON response to stdout and return the process exit code."""
    print(result.to_json(), flush=True)
    return 0 if result.ok else 1


def main(
    argv: list[str] | None = None,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> None:
    """Main entry point for the application."""
    args = parse_arguments(argv)
    config_service = ConfigurationService(environ=environ, cwd=cwd)

    # stderr-only logging until the configured handlers are in place
    _ = setup_logging(
        log_level=args.log_level or "INFO",
        environment=config_service.environment,
    )

    try:
        config = config_service.load_config(
            output_directory=args.output_dir,
            log_level=args.log_level,
            log_dir=args.log_dir,
        )
    except AppError as e:
        log_error(e, operation="load_config")
        sys.exit(emit(RunResult.failure(e.message)))

    try:
        _ = setup_logging(
            log_level=config.log_level,
            log_dir=config.log_dir,
            environment=config.environment,
        )
    except OSError as e:
        error = FileSystemError(
            f"Failed to set up log directory: {config.log_dir}",
            path=str(config.log_dir),
            original_error=e,
        )
        log_error(error, operation="setup_logging")
        sys.exit(emit(RunResult.failure(error.message)))

    log.info(
        "Starting capture sync",
        version=__version__,
        output_directory=str(config.output_directory),
    )

    try:
        result = run_sync(config)
    except KeyboardInterrupt:
        log.info("Sync interrupted by user")
        result = RunResult.failure("Interrupted.")

    log.info("Capture sync finished", code=result.code, downloaded=result.downloaded)
    sys.exit(emit(result))


if __name__ == "__main__":
    main()
