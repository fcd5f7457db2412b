"""
Row importers.

One importer per entity type turns flat rows into saved entity records.
"""

from press_import.client.exceptions import UnsupportedTypeError
from press_import.importers.base import NOT_AVAILABLE, Importer, ImportResult, is_blank
from press_import.importers.post import PostImporter
from press_import.importers.term import TermImporter
from press_import.importers.user import UserImporter

IMPORTERS: dict[str, type[Importer]] = {
    PostImporter.TYPE_NAME: PostImporter,
    TermImporter.TYPE_NAME: TermImporter,
    UserImporter.TYPE_NAME: UserImporter,
}


def create_importer(type_name: str, **kwargs) -> Importer:
    """Instantiate the importer registered for ``type_name``.

    Raises:
        UnsupportedTypeError: If no importer handles ``type_name``
    """
    importer_class = IMPORTERS.get(type_name.lower())
    if importer_class is None:
        raise UnsupportedTypeError(
            f"Unsupported import type: {type_name}. Available: {', '.join(sorted(IMPORTERS))}"
        )
    return importer_class(**kwargs)


__all__ = [
    "Importer",
    "ImportResult",
    "PostImporter",
    "TermImporter",
    "UserImporter",
    "IMPORTERS",
    "NOT_AVAILABLE",
    "create_importer",
    "is_blank",
]
