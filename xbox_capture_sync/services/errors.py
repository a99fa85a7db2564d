"""Error types for the capture sync application.

Every failure in a sync run is fatal. Each error carries a short message
meant for the final JSON response plus technical details for the log.
"""

from enum import Enum
from typing import Any

import structlog

from ..models import CaptureType

log = structlog.stdlib.get_logger()


class ErrorCategory(Enum):
    """Categories of errors for classification and handling."""
    CONFIGURATION = "configuration"
    FETCH = "fetch"
    DECODE = "decode"
    DOWNLOAD = "download"
    FILE_SYSTEM = "file_system"
    UNEXPECTED = "unexpected"


class AppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNEXPECTED,
        technical_details: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category
        self.original_error = original_error

        if original_error and not technical_details:
            technical_details = f"{type(original_error).__name__}: {str(original_error)}"
        self.technical_details = technical_details

    def log_fields(self) -> dict[str, Any]:
        """Structured fields describing this error for the log."""
        return {
            "error_message": self.message,
            "category": self.category.value,
            "technical_details": self.technical_details,
        }


class ConfigurationError(AppError):
    """Exception for missing or invalid configuration."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        current_value: Any = None,
    ) -> None:
        technical_details = None
        if setting:
            technical_details = f"Setting: {setting}"
        if current_value is not None:
            technical_details = (technical_details or "") + f"\nCurrent: {str(current_value)[:100]}"

        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            technical_details=technical_details,
        )
        self.setting = setting
        self.current_value = current_value


class FetchError(AppError):
    """Exception for failures retrieving a capture list."""

    def __init__(
        self,
        capture_type: CaptureType,
        url: str | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        technical_details = None
        if original_error:
            technical_details = f"{type(original_error).__name__}: {str(original_error)}"
        if url:
            technical_details = f"URL: {url}" + (f"\n{technical_details}" if technical_details else "")
        if status_code:
            technical_details = f"Status: {status_code}" + (f"\n{technical_details}" if technical_details else "")

        super().__init__(
            message=f"Failed to retrieve {capture_type.value} from remote URL.",
            category=ErrorCategory.FETCH,
            technical_details=technical_details,
            original_error=original_error,
        )
        self.capture_type = capture_type
        self.url = url
        self.status_code = status_code


class DecodeError(AppError):
    """Exception for list responses that are not the expected JSON shape."""

    def __init__(
        self,
        capture_type: CaptureType,
        reason: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            message=f"Failed to decode {capture_type.value} response.",
            category=ErrorCategory.DECODE,
            technical_details=reason,
            original_error=original_error,
        )
        self.capture_type = capture_type
        self.reason = reason


class DownloadError(AppError):
    """Exception for failures copying a capture to disk."""

    def __init__(
        self,
        file_name: str,
        url: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        technical_details = f"File: {file_name}"
        if url:
            technical_details += f"\nURL: {url}"
        if original_error:
            technical_details += f"\nError: {type(original_error).__name__}: {str(original_error)}"

        super().__init__(
            message=f"Failed to download {file_name}.",
            category=ErrorCategory.DOWNLOAD,
            technical_details=technical_details,
            original_error=original_error,
        )
        self.file_name = file_name
        self.url = url


class FileSystemError(AppError):
    """Exception for file system failures outside a download."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        technical_details = None
        if original_error:
            technical_details = f"{type(original_error).__name__}: {str(original_error)}"
        if path:
            technical_details = f"Path: {path}" + (f"\n{technical_details}" if technical_details else "")

        super().__init__(
            message=message,
            category=ErrorCategory.FILE_SYSTEM,
            technical_details=technical_details,
            original_error=original_error,
        )
        self.path = path


def to_app_error(error: Exception) -> AppError:
    """Convert an arbitrary exception into an AppError.

    Args:
        error: The exception that aborted the run

    Returns:
        The error itself if it already is an AppError, otherwise a wrapped one
    """
    if isinstance(error, AppError):
        return error

    if isinstance(error, PermissionError):
        return FileSystemError(
            message="Permission denied.",
            path=error.filename,
            original_error=error,
        )
    elif isinstance(error, OSError):
        return FileSystemError(
            message=f"A file system error occurred: {error.strerror or str(error)}",
            path=error.filename,
            original_error=error,
        )

    return AppError(
        message=f"An unexpected error occurred: {str(error) or type(error).__name__}",
        category=ErrorCategory.UNEXPECTED,
        original_error=error,
    )


def log_error(error: AppError, operation: str) -> None:
    """Log an error with its technical details."""
    log.error("Error occurred", operation=operation, **error.log_fields())
