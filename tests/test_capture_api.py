"""Tests for the capture list client."""

import json

import httpx
import pytest

from xbox_capture_sync.models import CaptureType
from xbox_capture_sync.services import (
    CaptureApiService,
    ConfigurationError,
    DecodeError,
    FetchError,
    HttpClientService,
)


def make_api(handler, api_key: str = "abc123") -> tuple[CaptureApiService, list[httpx.Request]]:
    """Build an API service over a mock transport that records requests."""
    requests: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    client = HttpClientService(transport=httpx.MockTransport(recording_handler))
    return CaptureApiService(http_client=client, api_key=api_key), requests


class TestFetchCaptures:

    @pytest.mark.parametrize("capture_type, url", [
        (CaptureType.SCREENSHOT, "https://xbl.io/api/v2/dvr/screenshots/"),
        (CaptureType.GAMECLIP, "https://xbl.io/api/v2/dvr/gameClips/"),
    ])
    def test_request_shape(self, capture_type: CaptureType, url: str) -> None:
        records = [{"id": 2}, {"id": 1}]
        api, requests = make_api(lambda r: httpx.Response(200, json={capture_type.response_key: records}))

        result = api.fetch_captures(capture_type)

        assert result == records
        assert len(requests) == 1
        assert requests[0].method == "GET"
        assert str(requests[0].url) == url
        assert requests[0].headers["X-Authorization"] == "abc123"

    def test_empty_list(self) -> None:
        api, _ = make_api(lambda r: httpx.Response(200, json={"screenshots": []}))
        assert api.fetch_captures(CaptureType.SCREENSHOT) == []

    def test_missing_key_makes_no_request(self) -> None:
        api, requests = make_api(lambda r: httpx.Response(200, json={}), api_key="")

        with pytest.raises(ConfigurationError) as exc_info:
            api.fetch_captures(CaptureType.SCREENSHOT)

        assert exc_info.value.message == "API key not set."
        assert requests == []

    def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        api, _ = make_api(handler)

        with pytest.raises(FetchError) as exc_info:
            api.fetch_captures(CaptureType.SCREENSHOT)

        assert exc_info.value.message == "Failed to retrieve Screenshot from remote URL."
        assert exc_info.value.capture_type is CaptureType.SCREENSHOT
        assert "ConnectError" in exc_info.value.technical_details

    @pytest.mark.parametrize("status", [401, 404, 500, 503])
    def test_error_status(self, status: int) -> None:
        api, _ = make_api(lambda r: httpx.Response(status, text="nope"))

        with pytest.raises(FetchError) as exc_info:
            api.fetch_captures(CaptureType.GAMECLIP)

        assert exc_info.value.status_code == status
        assert "GameClip" in exc_info.value.message

    def test_empty_body(self) -> None:
        api, _ = make_api(lambda r: httpx.Response(200, content=b""))

        with pytest.raises(FetchError):
            api.fetch_captures(CaptureType.SCREENSHOT)


class TestDecode:

    @pytest.mark.parametrize("capture_type", list(CaptureType))
    @pytest.mark.parametrize("body", [
        b"not json",
        b"\xff\xfe",
        json.dumps([1, 2, 3]).encode(),
        json.dumps("screenshots").encode(),
        json.dumps({"other": []}).encode(),
        json.dumps({"screenshots": {"a": 1}, "gameClips": {"a": 1}}).encode(),
        json.dumps({"screenshots": None, "gameClips": None}).encode(),
    ])
    def test_bad_bodies(self, capture_type: CaptureType, body: bytes) -> None:
        api, _ = make_api(lambda r: httpx.Response(200, content=body))

        with pytest.raises(DecodeError) as exc_info:
            api.fetch_captures(capture_type)

        assert exc_info.value.message == f"Failed to decode {capture_type.value} response."
        assert exc_info.value.capture_type is capture_type

    def test_key_of_other_type_not_accepted(self) -> None:
        api, _ = make_api(lambda r: httpx.Response(200, json={"screenshots": []}))

        with pytest.raises(DecodeError):
            api.fetch_captures(CaptureType.GAMECLIP)
