"""File system service for the capture output directory."""

from pathlib import Path

import structlog

from .errors import FileSystemError

log = structlog.stdlib.get_logger()


class FileSystemService:
    """Service for file system operations on the output directory."""

    def __init__(self, base_path: Path) -> None:
        """Initialize the file system service.

        Args:
            base_path: Directory captures are written to
        """
        self.base_path = base_path
        log.debug("File system service initialized", base_path=str(self.base_path))

    def ensure_directory(self, path: Path | None = None) -> None:
        """Ensure that a directory exists, creating it if necessary.

        Args:
            path: Directory path to ensure exists (defaults to the base path)

        Raises:
            FileSystemError: If the path is not a directory or cannot be created
        """
        path = path or self.base_path

        if path.exists():
            if not path.is_dir():
                log.error("Path exists but is not a directory", path=str(path))
                raise FileSystemError(
                    f"Output path is not a directory: {path}",
                    path=str(path),
                )
            return

        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            log.error("Failed to create directory", path=str(path), error=str(e))
            raise FileSystemError(
                f"Failed to create output directory: {path}",
                path=str(path),
                original_error=e,
            ) from e

        log.info("Directory created", path=str(path))

    def path_for(self, filename: str) -> Path:
        return self.base_path / filename

    def exists(self, filename: str) -> bool:
        """Check whether a file with this name is already in the directory."""
        return self.path_for(filename).exists()
