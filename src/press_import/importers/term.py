"""Importer for taxonomy terms."""

from collections.abc import Mapping
from typing import Any

from press_import.core.entity import TermRecord
from press_import.importers.base import Importer, ImportResult, is_blank


class TermImporter(Importer):
    """Import rows keyed by ``path`` into terms of the row's ``taxonomy``.

    A row without a taxonomy falls back to ``importers.default_taxonomy``;
    when neither is set the row is skipped like a row without a path.
    """

    TYPE_NAME = "term"
    KEY_FIELD = "path"

    FIELD_MAP = {
        "name": "name",
        "description": "description",
    }

    def taxonomy_for(self, row: Mapping[str, Any]) -> str | None:
        taxonomy = row.get("taxonomy")
        if is_blank(taxonomy):
            return self.settings.default_taxonomy
        return str(taxonomy).strip()

    def is_missing_key(self, row: Mapping[str, Any]) -> bool:
        return super().is_missing_key(row) or not self.taxonomy_for(row)

    def _import(self, row: dict[str, Any]) -> ImportResult:
        taxonomy = self.taxonomy_for(row)
        row.pop("taxonomy", None)

        record = TermRecord(str(row["path"]), taxonomy, **self.record_options())

        self.apply_seo(record, row)
        metadata = self.extract_metadata(row)

        record.set(self.mapped_fields(row))
        if metadata:
            record.set_metadata(metadata)

        return self.result(record, record.save())
