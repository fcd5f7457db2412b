"""Filesystem discovery of importable files."""

import fnmatch
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from press_import.client.exceptions import InvalidPathError
from press_import.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DiscoveredFile:
    """A candidate input file and its listing details."""

    path: Path
    name: str
    extension: str
    size: int
    modified: datetime

    @classmethod
    def from_path(cls, path: Path) -> "DiscoveredFile":
        stat = path.stat()
        return cls(
            path=path.resolve(),
            name=path.name,
            extension=path.suffix.lstrip(".").lower(),
            size=stat.st_size,
            modified=datetime.fromtimestamp(stat.st_mtime),
        )


class FileDiscovery:
    """Find files below a directory by extension and optional name pattern."""

    def __init__(self, recursive: bool = True):
        self.recursive = recursive

    def discover(
        self,
        directory: str | Path,
        extensions: Iterable[str],
        pattern: str | None = None,
    ) -> list[DiscoveredFile]:
        """List matching files, sorted by their path below ``directory``.

        Args:
            directory: Directory to search
            extensions: Accepted extensions, without the dot (case-insensitive)
            pattern: Optional shell-style pattern matched against file names

        Raises:
            InvalidPathError: If ``directory`` is not a directory
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise InvalidPathError(f"Invalid directory path: {directory}")

        accepted = {extension.lower().lstrip(".") for extension in extensions}
        candidates = directory.rglob("*") if self.recursive else directory.glob("*")

        files = []
        for path in sorted(candidates, key=lambda p: p.relative_to(directory).as_posix()):
            if not path.is_file():
                continue
            if path.suffix.lstrip(".").lower() not in accepted:
                continue
            if pattern and not fnmatch.fnmatch(path.name, pattern):
                continue
            files.append(DiscoveredFile.from_path(path))

        logger.debug(
            "files_discovered",
            directory=str(directory),
            extensions=sorted(accepted),
            pattern=pattern,
            count=len(files),
        )
        return files


def format_size(size: int) -> str:
    """Human-readable file size, e.g. ``1.50 KB``."""
    value = float(size)
    for unit in ("B", "KB", "MB"):
        if value < 1024:
            return f"{value:.2f} {unit}"
        value /= 1024
    return f"{value:.2f} GB"
