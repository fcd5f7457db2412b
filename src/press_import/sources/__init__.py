"""
Source adapters.

Adapters read rows out of input files and hand them to an importer.
"""

from press_import.client.exceptions import UnsupportedSourceError
from press_import.importers.base import Importer
from press_import.sources.base import SourceAdapter
from press_import.sources.content import ContentAdapter
from press_import.sources.discovery import DiscoveredFile, FileDiscovery, format_size
from press_import.sources.excel import ExcelAdapter

ADAPTERS: dict[str, type[SourceAdapter]] = {
    ExcelAdapter.SOURCE_NAME: ExcelAdapter,
    ContentAdapter.SOURCE_NAME: ContentAdapter,
}


def create_adapter(source: str, importer: Importer) -> SourceAdapter:
    """Instantiate the adapter registered for ``source``.

    Raises:
        UnsupportedSourceError: If no adapter handles ``source``
    """
    adapter_class = ADAPTERS.get(source.lower())
    if adapter_class is None:
        raise UnsupportedSourceError(
            f"Unsupported source adapter: {source}. Available: {', '.join(sorted(ADAPTERS))}"
        )
    return adapter_class(importer)


__all__ = [
    "SourceAdapter",
    "ExcelAdapter",
    "ContentAdapter",
    "FileDiscovery",
    "DiscoveredFile",
    "ADAPTERS",
    "create_adapter",
    "format_size",
]
