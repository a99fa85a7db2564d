"""Capture-related data models.

Describes the two capture categories exposed by the xbl.io DVR API and the
per-item records parsed out of its list responses.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any


CAPTURE_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
# Strict shape check; strptime alone accepts single-digit fields
_CAPTURE_TIMESTAMP_RE = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z")


class CaptureType(Enum):
    """Capture categories, in processing order."""
    SCREENSHOT = "Screenshot"
    GAMECLIP = "GameClip"

    @property
    def info(self) -> "CaptureTypeInfo":
        return CAPTURE_TYPE_INFO[self]

    @property
    def api_path(self) -> str:
        """URL path segment for the list request."""
        return self.info.api_path

    @property
    def response_key(self) -> str:
        """Key in the list response holding the capture array."""
        return self.info.response_key

    @property
    def uri_key(self) -> str:
        """Key in a capture record holding its URI descriptors."""
        return self.info.uri_key

    @property
    def date_key(self) -> str:
        """Key in a capture record holding its timestamp."""
        return self.info.date_key

    def filename(self, timestamp: datetime) -> str:
        """Build the local filename for a capture taken at ``timestamp``."""
        t = timestamp
        # Years are always four digits, including those below 1000
        return (
            f"{t.year:04d}-{t.month:02d}-{t.day:02d}-"
            f"{t.hour:02d}-{t.minute:02d}-{t.second:02d}-{self.info.suffix}"
        )


@dataclass(frozen=True)
class CaptureTypeInfo:
    """Static API and naming details for one capture category."""
    api_path: str
    response_key: str
    uri_key: str
    date_key: str
    suffix: str


CAPTURE_TYPE_INFO: dict[CaptureType, CaptureTypeInfo] = {
    CaptureType.SCREENSHOT: CaptureTypeInfo(
        "screenshots", "screenshots", "screenshotUris", "dateTaken", "screenshot.png"
    ),
    CaptureType.GAMECLIP: CaptureTypeInfo(
        "gameClips", "gameClips", "gameClipUris", "dateRecorded", "gameclip.mp4"
    ),
}


def parse_capture_timestamp(value: Any) -> datetime | None:
    """Parse an API timestamp of the exact form ``YYYY-MM-DDTHH:MM:SSZ``.

    Args:
        value: Raw value from the capture record

    Returns:
        Timezone-aware UTC datetime, or None if the value does not match
    """
    if not isinstance(value, str) or not _CAPTURE_TIMESTAMP_RE.fullmatch(value):
        return None

    try:
        parsed = datetime.strptime(value, CAPTURE_TIMESTAMP_FORMAT)
    except ValueError:
        return None

    return parsed.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class Capture:
    """A single downloadable capture."""
    capture_type: CaptureType
    taken_at: datetime
    uri: str

    @property
    def filename(self) -> str:
        return self.capture_type.filename(self.taken_at)

    @classmethod
    def from_record(cls, capture_type: CaptureType, record: Any) -> "Capture | None":
        """Build a capture from one item of an API list response.

        Only the first URI descriptor is used. Records without a usable URI
        or timestamp yield None so the caller can skip them.

        Args:
            capture_type: Category the record was listed under
            record: Decoded JSON object for the capture

        Returns:
            The capture, or None if the record is unusable
        """
        if not isinstance(record, Mapping):
            return None

        uris = record.get(capture_type.uri_key)
        if not isinstance(uris, list) or not uris:
            return None

        first = uris[0]
        if not isinstance(first, Mapping):
            return None

        uri = first.get("uri")
        if not isinstance(uri, str) or not uri:
            return None

        taken_at = parse_capture_timestamp(record.get(capture_type.date_key))
        if taken_at is None:
            return None

        return cls(capture_type=capture_type, taken_at=taken_at, uri=uri)
