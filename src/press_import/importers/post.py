"""Importer for posts, pages and custom post types."""

from typing import Any

from press_import.client.exceptions import InvalidInputError
from press_import.core.entity import PostRecord, TermRecord, UserRecord
from press_import.importers.base import Importer, ImportResult, is_blank
from press_import.utils.logging import get_logger

logger = get_logger(__name__)


class PostImporter(Importer):
    """Import rows keyed by ``path`` into posts of the row's ``type``."""

    TYPE_NAME = "post"
    KEY_FIELD = "path"

    FIELD_MAP = {
        "title": "title",
        "body": "content",
        "excerpt": "excerpt",
        "status": "status",
        "template": "template",
    }

    def _import(self, row: dict[str, Any]) -> ImportResult:
        post_type = row.pop("type", None)
        if is_blank(post_type):
            post_type = self.settings.default_post_type

        record = PostRecord(str(row["path"]), str(post_type).strip(), **self.record_options())

        self.apply_seo(record, row)
        metadata = self.extract_metadata(row)

        fields = self.mapped_fields(row)

        author = self.resolve_author(row.get("author"))
        if author is not None:
            fields["author"] = author

        categories = self.resolve_terms(row.get("categories"), self.settings.category_taxonomy)
        if categories:
            fields["categories"] = categories

        tags = self.resolve_terms(row.get("tags"), self.settings.tag_taxonomy)
        if tags:
            fields["tags"] = tags

        record.set(fields)
        if metadata:
            record.set_metadata(metadata)

        return self.result(record, record.save())

    def resolve_author(self, value: Any) -> int | None:
        """Author column holds a user id or a login."""
        if is_blank(value):
            return None

        value = str(value).strip()
        if value.isdigit():
            return int(value)

        user = UserRecord(value, **self.record_options()).find()
        if user is None:
            logger.warning("author_not_found", login=value)
            return None
        return user.id

    def resolve_terms(self, value: Any, taxonomy: str) -> list[int]:
        """Resolve a delimited list of term paths or slugs to term ids."""
        ids: list[int] = []
        for item in self.split_list(value):
            if item.isdigit():
                term_id = int(item)
            else:
                try:
                    term = TermRecord(item, taxonomy, **self.record_options()).find()
                except InvalidInputError:
                    term = None
                if term is None:
                    logger.warning("term_not_found", taxonomy=taxonomy, term=item)
                    continue
                term_id = term.id
            if term_id not in ids:
                ids.append(term_id)
        return ids
