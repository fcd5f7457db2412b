"""
CLI context for Press Import.

This module provides the context object that is passed to all CLI commands,
containing configuration and the content store.
"""

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from press_import.client.exceptions import ConfigurationError
from press_import.client.memory import InMemoryRepository
from press_import.client.repository import ContentRepository
from press_import.client.wordpress import WordPressRepository
from press_import.config import ImportConfig, LoggingConfig, load_config_from_yaml
from press_import.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


@dataclass
class ImportContext:
    """
    Context object for CLI commands.

    Attributes:
        config_path: Path to configuration file (defaults apply without one)
        log_level: Console log level given on the command line
        log_file: Log file given on the command line
        dry_run: Reconcile against an empty in-memory store instead
        config: Loaded import configuration
        repository: Content store the rows are reconciled against
    """

    config_path: Path | None = None
    log_level: str | None = None
    log_file: Path | None = None
    dry_run: bool = False

    # Lazy-loaded attributes
    _config: ImportConfig | None = field(default=None, init=False, repr=False)
    _repository: ContentRepository | None = field(default=None, init=False, repr=False)

    @property
    def config(self) -> ImportConfig:
        """Get or load import configuration.

        Raises:
            ConfigurationError: If the configuration file cannot be loaded
        """
        if self._config is None:
            try:
                if self.config_path is None:
                    logger.debug("config_defaults_used")
                    self._config = ImportConfig()
                else:
                    logger.debug("config_loading", config_path=str(self.config_path))
                    self._config = load_config_from_yaml(self.config_path)
            except (FileNotFoundError, ValidationError, ValueError) as e:
                raise ConfigurationError(str(e)) from e
            if self.config_path is not None:
                self._apply_logging(self._config.logging)
            logger.debug("config_loaded", store=self._config.store.backend)

        return self._config

    def _apply_logging(self, logging_config: LoggingConfig) -> None:
        """Reconfigure logging; command line options win over the file."""
        configure_logging(
            level=self.log_level or logging_config.level,
            log_format=logging_config.format,
            log_file=self.log_file or logging_config.file,
            file_level=logging_config.file_level,
        )

    @property
    def repository(self) -> ContentRepository:
        """Get or create the content store."""
        if self._repository is None:
            store = self.config.store
            if self.dry_run or store.backend == "memory":
                logger.debug("repository_created", backend="memory", dry_run=self.dry_run)
                self._repository = InMemoryRepository.from_config(self.config.prefixes)
            else:
                logger.debug("repository_created", backend="wordpress", url=store.url)
                self._repository = WordPressRepository.from_config(
                    store,
                    prefixes=self.config.prefixes,
                    logging_config=self.config.logging,
                )

        return self._repository

    def cleanup(self) -> None:
        """Clean up resources."""
        if isinstance(self._repository, WordPressRepository):
            logger.debug("closing_repository_client")
            self._repository.close()

    def __enter__(self) -> "ImportContext":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.cleanup()
