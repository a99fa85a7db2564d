"""HTTP client service for API requests and streamed downloads."""

from pathlib import Path
from typing import Any

import httpx
import structlog

log = structlog.stdlib.get_logger()

USER_AGENT = "xbox-capture-sync/0.1.0"


class HttpClientService:
    """Blocking HTTP client. Requests are issued once; failures propagate."""

    def __init__(
        self,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client service.

        Args:
            timeout: Request timeout in seconds
            transport: Optional transport override (used by tests)
        """
        self.timeout = timeout
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout),
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            transport=transport,
        )

        log.debug("HTTP client service initialized", timeout=timeout)

    def get(self, url: str, headers: dict[str, str] | None = None) -> httpx.Response:
        """Make a GET request.

        Args:
            url: The URL to request
            headers: Optional additional headers

        Returns:
            HTTP response object

        Raises:
            httpx.HTTPStatusError: If the server answers with an error status
            httpx.RequestError: If the request cannot be completed
        """
        log.debug("Making HTTP GET request", url=url)

        response = self._client.get(url, headers=headers)
        response.raise_for_status()

        log.debug(
            "HTTP GET request successful",
            url=url,
            status_code=response.status_code,
            content_length=len(response.content),
        )
        return response

    def download_file(self, url: str, path: Path, chunk_size: int = 65536) -> int:
        """Stream a URL into a file.

        The body is written to ``<path>.part`` and moved into place only once
        complete, so ``path`` either holds the whole file or does not exist.

        Args:
            url: The URL to download from
            path: Local path to save the file
            chunk_size: Size of chunks to read/write in bytes

        Returns:
            Number of bytes written

        Raises:
            httpx.HTTPError: If the download fails
            OSError: If the file cannot be written
        """
        temp_path = path.with_name(path.name + ".part")
        downloaded = 0

        log.debug("Starting file download", url=url, path=str(path))

        try:
            with self._client.stream("GET", url) as response:
                response.raise_for_status()

                with open(temp_path, "wb") as f:
                    for chunk in response.iter_bytes(chunk_size):
                        f.write(chunk)
                        downloaded += len(chunk)

            temp_path.replace(path)

        except (httpx.HTTPError, OSError) as e:
            log.warning(
                "File download failed",
                url=url,
                path=str(path),
                error=str(e),
                error_type=type(e).__name__,
            )
            if temp_path.exists():
                try:
                    temp_path.unlink()
                    log.debug("Cleaned up partial download", path=str(temp_path))
                except OSError:
                    log.warning("Failed to clean up partial download", path=str(temp_path))
            raise

        log.debug("File download completed", url=url, path=str(path), size=downloaded)
        return downloaded

    def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        self._client.close()
        log.debug("HTTP client closed")

    def __enter__(self) -> "HttpClientService":
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        self.close()
