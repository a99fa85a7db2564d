"""Capture sync service: mirrors remote captures into the output directory."""

import httpx
import structlog

from ..models import Capture, CaptureType, RunResult
from .capture_api import CaptureApiService
from .errors import DownloadError, log_error, to_app_error
from .filesystem import FileSystemService
from .http_client import HttpClientService

log = structlog.stdlib.get_logger()


class CaptureSyncService:
    """Downloads every capture not already present on disk.

    Capture types are processed in enum order and records in API order.
    The first error of any kind aborts the run.
    """

    def __init__(
        self,
        api: CaptureApiService,
        http_client: HttpClientService,
        filesystem: FileSystemService,
    ) -> None:
        self._api: CaptureApiService = api
        self._http_client: HttpClientService = http_client
        self._filesystem: FileSystemService = filesystem
        self.count: int = 0

    def run(self) -> int:
        """Sync all capture types.

        Returns:
            Number of newly downloaded files

        Raises:
            AppError: On the first failure; nothing after it is attempted
        """
        self.count = 0
        self._filesystem.ensure_directory()

        for capture_type in CaptureType:
            self.sync_type(capture_type)

        log.info("Sync completed", downloaded=self.count)
        return self.count

    def execute(self) -> RunResult:
        """Run the sync and fold any failure into the result."""
        try:
            downloaded = self.run()
        except Exception as e:
            error = to_app_error(e)
            log_error(error, operation="sync")
            return RunResult.failure(error.message)

        return RunResult.success(downloaded)

    def sync_type(self, capture_type: CaptureType) -> int:
        """Download new captures of a single type.

        Args:
            capture_type: Capture type to sync

        Returns:
            Number of files downloaded for this type
        """
        records = self._api.fetch_captures(capture_type)
        downloaded = 0

        for record in records:
            capture = Capture.from_record(capture_type, record)
            if capture is None:
                log.debug("Skipping unusable capture record", capture_type=capture_type.value)
                continue

            if self._filesystem.exists(capture.filename):
                log.info("Capture already exists", filename=capture.filename)
                continue

            self.download(capture)
            downloaded += 1
            self.count += 1

        log.info(
            "Capture type synced",
            capture_type=capture_type.value,
            records=len(records),
            downloaded=downloaded,
        )
        return downloaded

    def download(self, capture: Capture) -> None:
        """Copy one capture's media into the output directory.

        Raises:
            DownloadError: If the media cannot be fetched or written
        """
        path = self._filesystem.path_for(capture.filename)
        log.info("Downloading capture", filename=capture.filename)

        try:
            size = self._http_client.download_file(capture.uri, path)
        except (httpx.HTTPError, OSError) as e:
            raise DownloadError(capture.filename, url=capture.uri, original_error=e) from e

        log.debug("Capture saved", filename=capture.filename, size=size)
