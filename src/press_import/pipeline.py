"""Import pipeline.

Wires one import run together: the importer for the entity type, the source
adapter, the input directory and the files to process. Configuration level
problems are raised before any file is touched; everything after that is
reported through the returned ``ImportLog``.
"""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import structlog

from press_import.client.exceptions import (
    ConfigurationError,
    InvalidPathError,
    NoFilesFoundError,
)
from press_import.client.repository import ContentRepository
from press_import.config import ImportConfig
from press_import.core.cache import ResolutionCache
from press_import.core.prefix import PrefixResolver
from press_import.importers import Importer, create_importer
from press_import.metadata.strategies import create_strategy
from press_import.reporting.import_log import ImportLog
from press_import.sources import SourceAdapter, create_adapter
from press_import.sources.base import ProgressCallback
from press_import.sources.discovery import DiscoveredFile, FileDiscovery
from press_import.utils.logging import get_logger

logger = get_logger(__name__)

FileSelector = Callable[[list[DiscoveredFile]], list[DiscoveredFile]]


@dataclass
class ImportPlan:
    """Resolved inputs of one run."""

    type_name: str
    source: str
    adapter: SourceAdapter
    directory: Path
    files: list[DiscoveredFile]


class ImportPipeline:
    """Run imports of one entity type from one source."""

    def __init__(
        self,
        repository: ContentRepository,
        config: ImportConfig | None = None,
        discovery: FileDiscovery | None = None,
        selector: FileSelector | None = None,
        cache: ResolutionCache | None = None,
    ):
        """Initialize pipeline.

        Args:
            repository: Content store the rows are reconciled against
            config: Import configuration (defaults apply when omitted)
            discovery: File discovery service
            selector: Narrows discovered files for interactive runs
            cache: Resolution cache for the run; a fresh one by default
        """
        self.repository = repository
        self.config = config or ImportConfig()
        self.discovery = discovery or FileDiscovery()
        self.selector = selector
        self.cache = cache or ResolutionCache()
        self.prefixes = PrefixResolver(repository, self.cache)

    def resolve_importer(self, type_name: str) -> Importer:
        return create_importer(
            type_name,
            repository=self.repository,
            cache=self.cache,
            settings=self.config.importers,
            strategy=create_strategy(self.config.seo.plugin),
            prefixes=self.prefixes,
        )

    def resolve_adapter(self, source: str, importer: Importer) -> SourceAdapter:
        return create_adapter(source, importer)

    def resolve_path(self, source: str, override: str | Path | None = None) -> Path:
        """Input directory: the override, else the one configured for ``source``.

        Raises:
            InvalidPathError: If the directory is missing or not configured
        """
        if override:
            path = Path(override)
            if not path.is_dir():
                raise InvalidPathError(f"Invalid path provided: {path}")
            return path

        configured = self.config.sources.for_source(source)
        if not configured or not Path(configured).is_dir():
            raise InvalidPathError(f"Invalid or missing path configuration for source: {source}")
        return Path(configured)

    def resolve_files(
        self,
        path: Path,
        adapter: SourceAdapter,
        pattern: str | None = None,
        interactive: bool = False,
    ) -> list[DiscoveredFile]:
        """Discover the adapter's files below ``path``.

        Raises:
            NoFilesFoundError: If nothing matches or nothing was selected
        """
        extensions = adapter.supported_extensions()
        files = self.discovery.discover(path, extensions, pattern)

        if not files:
            raise NoFilesFoundError(
                f"No supported files found in {path}. "
                f"This source supports: {', '.join(extensions)}"
            )

        if interactive:
            if self.selector is None:
                raise ConfigurationError("Interactive selection is not available")
            files = self.selector(files)
            if not files:
                raise NoFilesFoundError("No files selected")

        return files

    def plan(
        self,
        type_name: str,
        source: str,
        path: str | Path | None = None,
        pattern: str | None = None,
        interactive: bool = False,
    ) -> ImportPlan:
        """Resolve everything a run needs, before any file is read.

        Interactive selection happens here, so callers can prompt before
        showing progress.

        Raises:
            ConfigurationError: If the type, source, directory or files
                cannot be resolved
        """
        with structlog.contextvars.bound_contextvars(import_type=type_name, source=source):
            importer = self.resolve_importer(type_name)
            adapter = self.resolve_adapter(source, importer)
            directory = self.resolve_path(source, path)
            files = self.resolve_files(directory, adapter, pattern, interactive)

        return ImportPlan(
            type_name=type_name,
            source=source,
            adapter=adapter,
            directory=directory,
            files=files,
        )

    def execute(self, plan: ImportPlan, progress: ProgressCallback | None = None) -> ImportLog:
        """Import the files of ``plan`` and return the log."""
        with structlog.contextvars.bound_contextvars(
            import_type=plan.type_name, source=plan.source
        ):
            logger.info(
                "import_started",
                directory=str(plan.directory),
                files=len(plan.files),
            )

            log = plan.adapter.import_files(plan.files, progress=progress)

            totals = log.totals()
            logger.info(
                "import_completed",
                files=len(log),
                rows=totals.total,
                created=totals.created,
                updated=totals.updated,
                skipped=totals.skipped,
                failed=totals.failed,
                noop=totals.noop,
                cache_hits=self.cache.stats["hits"],
                cache_misses=self.cache.stats["misses"],
            )
        return log

    def run(
        self,
        type_name: str,
        source: str,
        path: str | Path | None = None,
        pattern: str | None = None,
        interactive: bool = False,
        progress: ProgressCallback | None = None,
    ) -> ImportLog:
        """Import every matching file and return the log.

        Raises:
            ConfigurationError: If the type, source, directory or files
                cannot be resolved
        """
        plan = self.plan(type_name, source, path, pattern, interactive)
        return self.execute(plan, progress=progress)
