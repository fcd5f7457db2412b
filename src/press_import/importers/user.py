"""Importer for user accounts."""

from typing import Any

from press_import.core.entity import UserRecord
from press_import.importers.base import Importer, ImportResult, is_blank
from press_import.metadata.strategies import SOCIAL_NETWORKS


class UserImporter(Importer):
    """Import rows keyed by ``login``.

    ``contact`` is accepted as an alias of ``email``. Social profile columns
    are mapped through the configured SEO strategy.
    """

    TYPE_NAME = "user"
    KEY_FIELD = "login"

    FIELD_MAP = {
        "email": "email",
        "role": "role",
        "first_name": "first_name",
        "last_name": "last_name",
        "display_name": "name",
        "nickname": "nickname",
        "url": "url",
        "description": "description",
    }

    @property
    def result_has_parent(self) -> bool:
        return False

    def _import(self, row: dict[str, Any]) -> ImportResult:
        if is_blank(row.get("email")) and not is_blank(row.get("contact")):
            row["email"] = row["contact"]

        record = UserRecord(str(row["login"]), **self.record_options())

        self.apply_seo(record, row)
        self.apply_social_profiles(record, row)
        metadata = self.extract_metadata(row)

        record.set(self.mapped_fields(row))
        if metadata:
            record.set_metadata(metadata)

        return self.result(record, record.save())

    def apply_social_profiles(self, record: UserRecord, row: dict[str, Any]) -> None:
        profiles = {
            network: str(row.pop(network)).strip()
            for network in SOCIAL_NETWORKS
            if not is_blank(row.get(network))
        }
        if not profiles:
            return

        strategy = self.require_strategy("social profile")
        metadata = strategy.map_social_profiles(profiles)
        if metadata:
            record.set_metadata(metadata)
