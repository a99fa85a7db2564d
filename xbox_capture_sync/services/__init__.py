"""Service layer for configuration, HTTP access and the sync procedure."""

from .capture_api import CaptureApiService
from .capture_sync import CaptureSyncService
from .config import ConfigurationService, ValidationResult, sanitize_api_key
from .errors import (
    AppError,
    ConfigurationError,
    DecodeError,
    DownloadError,
    ErrorCategory,
    FetchError,
    FileSystemError,
    to_app_error,
)
from .filesystem import FileSystemService
from .http_client import HttpClientService

__all__ = [
    "AppError",
    "CaptureApiService",
    "CaptureSyncService",
    "ConfigurationError",
    "ConfigurationService",
    "DecodeError",
    "DownloadError",
    "ErrorCategory",
    "FetchError",
    "FileSystemError",
    "FileSystemService",
    "HttpClientService",
    "ValidationResult",
    "sanitize_api_key",
    "to_app_error",
]
