"""Data models for the Xbox capture sync application."""

from .capture import (
    CAPTURE_TYPE_INFO,
    Capture,
    CaptureType,
    CaptureTypeInfo,
    parse_capture_timestamp,
)
from .config import DEFAULT_API_BASE_URL, AppConfig
from .result import RunResult

__all__ = [
    "AppConfig",
    "CAPTURE_TYPE_INFO",
    "Capture",
    "CaptureType",
    "CaptureTypeInfo",
    "DEFAULT_API_BASE_URL",
    "RunResult",
    "parse_capture_timestamp",
]
