"""
File resolution against a fixed base directory.

The faithful resolver concatenates the base directory and the caller's
filename with no containment check, so ``../`` segments escape the base.
The hardened resolver canonicalizes the joined path and refuses anything
that does not stay under the canonical base directory.
"""

import errno
from abc import ABC, abstractmethod
from pathlib import Path

import structlog

from api.src.services.exceptions import AccessDenied, InvalidInput, ResourceNotFound
from shared.models.common import StrategyMode

logger = structlog.get_logger(__name__)


class FilePathResolver(ABC):
    """Maps a filename to a path under ``base_dir`` and reads it."""

    mode: StrategyMode

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    @abstractmethod
    def resolve(self, filename: str) -> Path:
        """
        Resolve ``filename`` to the path that will be read.

        Raises:
            AccessDenied: If the path is outside the permitted scope
        """

    def read(self, filename: str) -> bytes:
        """
        Read the file ``filename`` names.

        Args:
            filename: Caller-supplied filename

        Returns:
            Raw file content

        Raises:
            InvalidInput: If filename is empty or not a usable path
            ResourceNotFound: If the target does not exist
            AccessDenied: If the target is out of scope, a directory or unreadable
        """
        if not filename:
            raise InvalidInput("Filename is required")

        try:
            path = self.resolve(filename)
            content = path.read_bytes()
        except FileNotFoundError as e:
            logger.info("file_not_found", filename=filename, mode=self.mode.value)
            raise ResourceNotFound(f"File not found: {path}") from e
        except (IsADirectoryError, PermissionError, NotADirectoryError) as e:
            logger.warning("file_read_failed", filename=filename, error=str(e))
            raise AccessDenied(f"Error reading file: {e}") from e
        except ValueError as e:
            raise InvalidInput(f"Invalid filename: {e}") from e
        except OSError as e:
            if e.errno == errno.ENAMETOOLONG:
                raise InvalidInput("Filename too long") from e
            logger.warning("file_read_failed", filename=filename, error=str(e))
            raise AccessDenied(f"Error reading file: {e}") from e

        logger.info("file_read", filename=filename, size=len(content), mode=self.mode.value)
        return content


class ConcatenatingFileResolver(FilePathResolver):
    """Joins base directory and filename as strings."""

    mode = StrategyMode.FAITHFUL

    def resolve(self, filename: str) -> Path:
        return Path(f"{self.base_dir}/{filename}")


class ContainedFileResolver(FilePathResolver):
    """Rejects paths that resolve outside the base directory."""

    mode = StrategyMode.HARDENED

    def resolve(self, filename: str) -> Path:
        root = self.base_dir.resolve()
        target = (root / filename).resolve()
        if not target.is_relative_to(root):
            logger.warning("file_read_denied", filename=filename)
            raise AccessDenied(f"Path escapes base directory: {filename}")
        return target


def build_file_resolver(mode: StrategyMode, base_dir: Path) -> FilePathResolver:
    """Create the resolver for ``mode``."""
    if mode is StrategyMode.HARDENED:
        return ContainedFileResolver(base_dir)
    return ConcatenatingFileResolver(base_dir)
