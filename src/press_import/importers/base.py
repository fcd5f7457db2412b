"""Base importer shared by the post, term and user importers.

An importer turns one flat row into an entity record, saves it and returns
an ``ImportResult`` for the import log. Rows missing their key column are
skipped before any record is built.
"""

from abc import ABC, abstractmethod
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from press_import.client.exceptions import UnsupportedCapabilityError
from press_import.client.repository import ContentRepository
from press_import.config import ImporterConfig
from press_import.core.cache import ResolutionCache
from press_import.core.entity import EntityRecord
from press_import.core.prefix import PrefixResolver
from press_import.core.status import SaveStatus
from press_import.metadata.strategies import MetadataStrategy
from press_import.utils.logging import get_logger

logger = get_logger(__name__)

NOT_AVAILABLE = "N/A"

SEO_FIELDS = ("seo_title", "seo_description", "seo_keyword")


def is_blank(value: Any) -> bool:
    """None, whitespace-only strings and empty collections are blank."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return not value
    return False


@dataclass
class ImportResult:
    """Outcome of one row, as written to the import log."""

    id: int | str
    key: str
    status: SaveStatus
    parent: int | str | None = NOT_AVAILABLE
    key_field: str = "path"

    def to_entry(self) -> dict[str, Any]:
        """Log entry; entities without hierarchy carry no parent column."""
        entry: dict[str, Any] = {"id": self.id, self.key_field: self.key}
        if self.parent is not None:
            entry["parent"] = self.parent
        entry["status"] = self.status
        return entry


class Importer(ABC):
    """Base class for importing rows of one entity type."""

    TYPE_NAME: ClassVar[str]

    # Column identifying the entity; blank means the row is skipped
    KEY_FIELD: ClassVar[str] = "path"

    # Plain columns copied into the field set: row column -> field name
    FIELD_MAP: ClassVar[dict[str, str]] = {}

    def __init__(
        self,
        repository: ContentRepository,
        cache: ResolutionCache,
        settings: ImporterConfig | None = None,
        strategy: MetadataStrategy | None = None,
        prefixes: PrefixResolver | None = None,
    ):
        """Initialize importer.

        Args:
            repository: Content store
            cache: Resolution cache shared by every record of the run
            settings: Row preprocessing defaults
            strategy: SEO/social metadata strategy, if one is configured
            prefixes: Prefix resolver sharing ``cache``
        """
        self.repository = repository
        self.cache = cache
        self.settings = settings or ImporterConfig()
        self.strategy = strategy
        self.prefixes = prefixes or PrefixResolver(repository, cache)
        self.stats: Counter[str] = Counter()

    def import_row(self, row: Mapping[str, Any]) -> ImportResult:
        """Import one row and return its outcome.

        Raises:
            InvalidInputError: If the row's path cannot be normalized
            UnsupportedCapabilityError: If SEO/social columns need a strategy
        """
        row = dict(row)

        if self.is_missing_key(row):
            logger.info("row_skipped", type=self.TYPE_NAME, reason=f"missing {self.KEY_FIELD}")
            result = self.skipped(row)
        else:
            result = self._import(row)

        self.stats[result.status.name.lower()] += 1
        return result

    @abstractmethod
    def _import(self, row: dict[str, Any]) -> ImportResult:
        """Build, fill and save the entity record for ``row``."""

    def is_missing_key(self, row: Mapping[str, Any]) -> bool:
        return is_blank(row.get(self.KEY_FIELD))

    def skipped(self, row: Mapping[str, Any]) -> ImportResult:
        key = row.get(self.KEY_FIELD)
        return ImportResult(
            id=NOT_AVAILABLE,
            key=NOT_AVAILABLE if is_blank(key) else str(key),
            status=SaveStatus.SKIPPED,
            parent=NOT_AVAILABLE if self.result_has_parent else None,
            key_field=self.KEY_FIELD,
        )

    @property
    def result_has_parent(self) -> bool:
        return True

    def result(self, record: EntityRecord, status: SaveStatus) -> ImportResult:
        entity = record.find()
        parent = None
        if self.result_has_parent:
            parent_entity = record.find_parent()
            parent = parent_entity.id if parent_entity is not None else NOT_AVAILABLE
        return ImportResult(
            id=entity.id if entity is not None else NOT_AVAILABLE,
            key=record.key_value,
            status=status,
            parent=parent,
            key_field=self.KEY_FIELD,
        )

    def record_options(self) -> dict[str, Any]:
        """Collaborators every entity record of this importer shares."""
        return {"repository": self.repository, "cache": self.cache, "prefixes": self.prefixes}

    # ------------------------------------------------------------------
    # Row preprocessing helpers
    # ------------------------------------------------------------------

    def mapped_fields(self, row: Mapping[str, Any]) -> dict[str, Any]:
        return {
            target: row[column]
            for column, target in self.FIELD_MAP.items()
            if not is_blank(row.get(column))
        }

    def split_list(self, value: Any) -> list[str]:
        """Split a delimited list column, dropping blanks."""
        if is_blank(value):
            return []
        if isinstance(value, (list, tuple)):
            items = value
        else:
            items = str(value).split(self.settings.list_delimiter)
        return [str(item).strip() for item in items if not is_blank(item)]

    def extract_metadata(self, row: dict[str, Any]) -> dict[str, Any]:
        """Pop prefixed metadata columns; blank values are dropped."""
        prefix = self.settings.meta_prefix
        meta_columns = [key for key in row if key.startswith(prefix)]
        metadata = {}
        for column in meta_columns:
            value = row.pop(column)
            name = column[len(prefix) :]
            if name and not is_blank(value):
                metadata[name] = value
        return metadata

    def require_strategy(self, capability: str) -> MetadataStrategy:
        if self.strategy is None:
            raise UnsupportedCapabilityError(
                f"Row has {capability} fields but no SEO plugin is configured (seo.plugin)"
            )
        return self.strategy

    def apply_seo(self, record: EntityRecord, row: dict[str, Any]) -> None:
        """Pop ``seo_*`` columns and map them through the metadata strategy."""
        values = {name: row.pop(name, None) for name in SEO_FIELDS}
        if all(is_blank(value) for value in values.values()):
            return

        strategy = self.require_strategy("SEO")
        metadata = strategy.map_seo(
            title=str(values["seo_title"] or ""),
            description=str(values["seo_description"] or ""),
            keyword=None if is_blank(values["seo_keyword"]) else str(values["seo_keyword"]),
        )
        if metadata:
            record.set_metadata(metadata)

    def get_stats(self) -> dict[str, int]:
        """Per-status row counts for this importer."""
        return dict(self.stats)
