"""Base source adapter.

A source adapter reads rows out of input files, normalizes them and feeds
them one by one to an importer, collecting the outcomes in an ``ImportLog``.

Errors are scoped:

- ``InvalidInputError`` / ``UnsupportedCapabilityError`` fail the row only.
- ``AuthenticationError`` ends the whole run.
- Anything else raised while reading or importing aborts the rest of the
  file as a ``SourceAdapterError``. Rows already imported stay in the log and
  the next file is processed.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator, Mapping
from datetime import date
from pathlib import Path
from typing import Any, ClassVar

from press_import.client.exceptions import (
    AuthenticationError,
    InvalidInputError,
    SourceAdapterError,
    UnsupportedCapabilityError,
)
from press_import.core.status import SaveStatus
from press_import.importers.base import NOT_AVAILABLE, Importer, ImportResult, is_blank
from press_import.reporting.import_log import ImportLog
from press_import.sources.discovery import DiscoveredFile
from press_import.utils.logging import get_logger, log_file_progress

logger = get_logger(__name__)

ROW_ERRORS = (InvalidInputError, UnsupportedCapabilityError)

# Rejected credentials fail every later request too; they end the run
RUN_ERRORS = (AuthenticationError,)

ProgressCallback = Callable[[Path, int, int], None]


class SourceAdapter(ABC):
    """Base class for file based row sources."""

    SOURCE_NAME: ClassVar[str]
    SUPPORTED_EXTENSIONS: ClassVar[tuple[str, ...]] = ()

    def __init__(self, importer: Importer):
        """Initialize adapter.

        Args:
            importer: Importer every row is handed to
        """
        self.importer = importer
        self.meta_prefix = importer.settings.meta_prefix

    @classmethod
    def supported_extensions(cls) -> tuple[str, ...]:
        return cls.SUPPORTED_EXTENSIONS

    @abstractmethod
    def read_rows(self, path: Path) -> Iterable[Mapping[str, Any]]:
        """Yield the raw rows of ``path``."""

    def import_files(
        self,
        files: Iterable[DiscoveredFile | Path | str],
        progress: ProgressCallback | None = None,
    ) -> ImportLog:
        """Import every file in order and return the resulting log.

        Args:
            files: Files to import, in processing order
            progress: Called with (file, completed, total) after each file
        """
        files = [self._as_path(file) for file in files]
        log = ImportLog()

        for index, path in enumerate(files, start=1):
            entries: list[dict[str, Any]] = []
            logger.info("file_import_started", file=str(path), source=self.SOURCE_NAME)

            try:
                self.import_file(path, entries)
            except SourceAdapterError as e:
                logger.error("file_import_aborted", file=str(path), rows=len(entries), error=e.message)
                log.add(str(path), entries)
                log.add_error(str(path), e.message)
            else:
                log.add(str(path), entries)
                logger.info("file_import_completed", file=str(path), rows=len(entries))

            log_file_progress(logger, path.name, index, len(files))
            if progress is not None:
                progress(path, index, len(files))

        return log

    def import_file(self, path: Path, entries: list[dict[str, Any]]) -> None:
        """Import the rows of one file, appending their entries.

        Raises:
            SourceAdapterError: On any error that is not scoped to a row
        """
        try:
            for line, row in enumerate(self.iter_rows(path), start=1):
                entries.append(self.import_row(row, path, line))
        except (SourceAdapterError, *RUN_ERRORS):
            raise
        except Exception as e:
            raise SourceAdapterError(f"{type(e).__name__}: {e}", file_path=path) from e

    def iter_rows(self, path: Path) -> Iterator[dict[str, Any]]:
        """Normalized rows of ``path``; rows with only blank values are dropped."""
        for raw in self.read_rows(path):
            row = self.normalize_row(raw)
            if row and not all(is_blank(value) for value in row.values()):
                yield row

    def import_row(self, row: dict[str, Any], path: Path, line: int) -> dict[str, Any]:
        try:
            return self.importer.import_row(row).to_entry()
        except ROW_ERRORS as e:
            logger.warning(
                "row_failed",
                file=str(path),
                row=line,
                error_type=type(e).__name__,
                error=str(e),
            )
            self.importer.stats[SaveStatus.FAILED.name.lower()] += 1
            return self.failed_entry(row)

    def failed_entry(self, row: Mapping[str, Any]) -> dict[str, Any]:
        key_field = self.importer.KEY_FIELD
        key = row.get(key_field)
        return ImportResult(
            id=NOT_AVAILABLE,
            key=NOT_AVAILABLE if is_blank(key) else str(key),
            status=SaveStatus.FAILED,
            parent=NOT_AVAILABLE if self.importer.result_has_parent else None,
            key_field=key_field,
        ).to_entry()

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    def normalize_row(self, raw: Mapping[Any, Any]) -> dict[str, Any]:
        row = {}
        for header, value in raw.items():
            name = self.normalize_header(header)
            if name:
                row[name] = self.normalize_value(value)
        return row

    def normalize_header(self, header: Any) -> str | None:
        """Trim, lower-case and underscore a column name.

        Metadata columns keep the case of their key. Unnamed spreadsheet
        columns are dropped.
        """
        if header is None:
            return None

        name = str(header).strip()
        prefix = self.meta_prefix
        if name[: len(prefix)].lower() == prefix.lower():
            key = name[len(prefix) :].strip()
            return f"{prefix}{key}" if key else None

        name = "_".join(name.lower().split())
        if not name or name.startswith("unnamed:"):
            return None
        return name

    @staticmethod
    def normalize_value(value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        if isinstance(value, date):
            # YAML front matter parses dates
            return value.isoformat()
        return value

    @staticmethod
    def _as_path(file: DiscoveredFile | Path | str) -> Path:
        if isinstance(file, DiscoveredFile):
            return file.path
        return Path(file)
