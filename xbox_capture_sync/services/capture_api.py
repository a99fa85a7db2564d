"""Client for the xbl.io DVR capture listing endpoints."""

import json
from typing import Any

import httpx
import structlog

from ..models import DEFAULT_API_BASE_URL, CaptureType
from .errors import ConfigurationError, DecodeError, FetchError
from .http_client import HttpClientService

log = structlog.stdlib.get_logger()

AUTH_HEADER = "X-Authorization"


class CaptureApiService:
    """Fetches capture lists for each capture type."""

    def __init__(
        self,
        http_client: HttpClientService,
        api_key: str,
        base_url: str = DEFAULT_API_BASE_URL,
    ) -> None:
        """Initialize the capture API service.

        Args:
            http_client: HTTP client service for making requests
            api_key: Sanitized API key; empty means not set
            base_url: Base URL of the DVR API, with trailing slash
        """
        self.http_client: HttpClientService = http_client
        self.api_key: str = api_key
        self.base_url: str = base_url

    def list_url(self, capture_type: CaptureType) -> str:
        return f"{self.base_url}{capture_type.api_path}/"

    def fetch_captures(self, capture_type: CaptureType) -> list[Any]:
        """Fetch the capture list for one capture type.

        Args:
            capture_type: Which list to fetch

        Returns:
            Capture records in the order the API returned them

        Raises:
            ConfigurationError: If no API key is set (no request is made)
            FetchError: If the list cannot be retrieved
            DecodeError: If the response is not an object holding the list
        """
        if not self.api_key:
            raise ConfigurationError("API key not set.", setting="API_KEY")

        url = self.list_url(capture_type)
        log.info("Fetching capture list", capture_type=capture_type.value, url=url)

        try:
            response = self.http_client.get(url, headers={AUTH_HEADER: self.api_key})
        except httpx.HTTPStatusError as e:
            raise FetchError(
                capture_type,
                url=url,
                status_code=e.response.status_code,
                original_error=e,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(capture_type, url=url, original_error=e) from e

        if not response.content:
            raise FetchError(capture_type, url=url, status_code=response.status_code)

        return self._decode(capture_type, response.content)

    def _decode(self, capture_type: CaptureType, body: bytes) -> list[Any]:
        """Pull the capture array for ``capture_type`` out of a response body."""
        try:
            payload = json.loads(body)
        except ValueError as e:
            raise DecodeError(capture_type, reason="Body is not valid JSON", original_error=e) from e

        key = capture_type.response_key
        if not isinstance(payload, dict):
            raise DecodeError(capture_type, reason=f"Expected JSON object, got {type(payload).__name__}")
        if key not in payload:
            raise DecodeError(capture_type, reason=f"Missing key: {key}")

        captures = payload[key]
        if not isinstance(captures, list):
            raise DecodeError(capture_type, reason=f"Key {key} is {type(captures).__name__}, not an array")

        log.info("Capture list retrieved", capture_type=capture_type.value, count=len(captures))
        return captures
