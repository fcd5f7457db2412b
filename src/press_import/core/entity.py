"""Idempotent upsert engine for posts, taxonomy terms and user accounts.

One ``EntityRecord`` wraps the pending ``FieldSet`` of a single entity. It
resolves the existing entity (and its parent) through the shared
``ResolutionCache``, decides whether a write is needed at all, and issues a
single create-or-update call against the ``ContentRepository``.

The three variants only differ in how they are keyed and looked up; the
behavioral differences (required fields, compared fields, hierarchy, role
membership, metadata writes) are described by ``EntityTraits``.
"""

import secrets
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from press_import.client.exceptions import InvalidInputError
from press_import.client.repository import ContentRepository, Entity, EntityKind, WriteError
from press_import.core.cache import ResolutionCache
from press_import.core.fields import META_FIELD, FieldSet
from press_import.core.path import ContentPath
from press_import.core.prefix import PrefixResolver
from press_import.core.status import SaveStatus
from press_import.utils.logging import get_logger, sanitize_payload

logger = get_logger(__name__)


@dataclass(frozen=True)
class EntityTraits:
    """Capabilities of an entity family.

    Attributes:
        kind: Entity family in the store
        required_fields: At least one must be non-empty to create the entity
        hierarchical: Keyed by a path with a parent chain
        compared_fields: Fields checked for changes (None = every pending field)
        membership_fields: (pending field, stored list field) pairs compared
            with "is member of" instead of equality
        metadata_written_separately: Metadata goes through
            ``write_metadata_entry`` after the main write
    """

    kind: EntityKind
    required_fields: tuple[str, ...]
    hierarchical: bool = True
    compared_fields: frozenset[str] | None = None
    membership_fields: tuple[tuple[str, str], ...] = ()
    metadata_written_separately: bool = False


def _as_text(value: Any) -> str:
    """Metadata values are compared the way the store serializes them."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


class EntityRecord:
    """Base reconciliation engine; subclasses provide keying and lookup."""

    traits: ClassVar[EntityTraits]

    def __init__(
        self,
        key: str,
        scope: str,
        *,
        repository: ContentRepository,
        cache: ResolutionCache,
        prefixes: PrefixResolver | None = None,
    ):
        """Initialize an entity record.

        Args:
            key: Path (posts, terms) or login (users)
            scope: Post type or taxonomy; ignored for users
            repository: Content store
            cache: Resolution cache shared across the run
            prefixes: Prefix resolver sharing the same cache

        Raises:
            InvalidInputError: If the key cannot be normalized
        """
        self.scope = scope
        self.repository = repository
        self.cache = cache
        self.prefixes = prefixes or PrefixResolver(repository, cache)
        self.fields = FieldSet()
        self._entity: Entity | None = None
        self._parent: Entity | None = None
        self.key = self._normalize_key(key)

    # ------------------------------------------------------------------
    # Variant hooks
    # ------------------------------------------------------------------

    def _normalize_key(self, key: str) -> Any:
        return ContentPath(key)

    def _lookup(self, key: Any) -> Entity | None:
        raise NotImplementedError

    def _prepare(self, existing: Entity | None) -> None:
        raise NotImplementedError

    def cache_key(self, key: str) -> str:
        """Cache key for ``key`` in this record's namespace."""
        return f"{self.traits.kind.value}/{self.scope}:{key}"

    @property
    def key_value(self) -> str:
        return str(self.key)

    # ------------------------------------------------------------------
    # Field mutation
    # ------------------------------------------------------------------

    def set(self, fields: Mapping[str, Any]) -> "EntityRecord":
        self.fields.merge(fields)
        return self

    def set_field(self, key: str, value: Any) -> "EntityRecord":
        self.fields[key] = value
        return self

    def set_metadata(self, metadata: Mapping[str, Any]) -> "EntityRecord":
        self.fields.merge_metadata(metadata)
        return self

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def find(self) -> Entity | None:
        """Resolve the existing entity; misses are memoized as well."""
        if self._entity is None:
            self._entity = self.cache.resolve(
                self.cache_key(self.key_value), lambda: self._lookup(self.key)
            )
        return self._entity

    def find_parent(self) -> Entity | None:
        """Resolve the entity one path segment up, if any."""
        if not self.traits.hierarchical:
            return None

        if self._parent is None:
            parent_path = self.key.parent()
            if parent_path is None:
                return None
            self._parent = self.cache.resolve(
                self.cache_key(parent_path.value), lambda: self._lookup(parent_path)
            )
        return self._parent

    def exists(self) -> bool:
        return self.find() is not None

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self) -> SaveStatus:
        """Create or update the entity, writing only when something changed."""
        kind = self.traits.kind.value

        if not self._validate():
            logger.warning(
                "entity_validation_failed",
                kind=kind,
                key=self.key_value,
                required=list(self.traits.required_fields),
            )
            return SaveStatus.FAILED

        existing = self.find()
        if existing is not None and (not self.fields or not self.has_changed()):
            logger.debug("entity_unchanged", kind=kind, key=self.key_value, entity_id=existing.id)
            return SaveStatus.NOOP

        creating = existing is None
        self._prepare(existing)

        metadata = self.fields.metadata
        payload = self.fields.to_dict()
        if self.traits.metadata_written_separately:
            payload.pop(META_FIELD, None)

        logger.debug(
            "entity_write",
            kind=kind,
            key=self.key_value,
            action="create" if creating else "update",
            payload=sanitize_payload(payload),
        )

        if creating:
            result = self.repository.create(self.traits.kind, self.scope, payload)
        else:
            result = self.repository.update(self.traits.kind, self.scope, existing.id, payload)

        if isinstance(result, WriteError):
            logger.warning(
                "entity_write_failed",
                kind=kind,
                key=self.key_value,
                code=result.code,
                error=result.message,
            )
            return SaveStatus.FAILED

        if self.traits.metadata_written_separately:
            for meta_key, meta_value in metadata.items():
                self.repository.write_metadata_entry(self.traits.kind, result.id, meta_key, meta_value)

        self._entity = self.repository.get(self.traits.kind, self.scope, result.id) or result

        if creating:
            self.cache.put(self.cache_key(self.key_value), self._entity)
            logger.info("entity_created", kind=kind, key=self.key_value, entity_id=self._entity.id)
            return SaveStatus.CREATED

        logger.info("entity_updated", kind=kind, key=self.key_value, entity_id=self._entity.id)
        return SaveStatus.UPDATED

    def _validate(self) -> bool:
        return self.exists() or any(self.fields.get(name) for name in self.traits.required_fields)

    # ------------------------------------------------------------------
    # Change detection
    # ------------------------------------------------------------------

    def has_changed(self) -> bool:
        """True when any pending field or metadata key differs from the store."""
        entity = self.find()
        if entity is None:
            return True

        return (
            self._fields_changed(entity)
            or self._membership_changed(entity)
            or self._metadata_changed(entity)
        )

    def _fields_changed(self, entity: Entity) -> bool:
        skipped = {META_FIELD, *(pending for pending, _ in self.traits.membership_fields)}
        compared = self.traits.compared_fields

        for key, value in self.fields.items():
            if key in skipped or (compared is not None and key not in compared):
                continue
            if entity.get(key) != value:
                return True
        return False

    def _membership_changed(self, entity: Entity) -> bool:
        for pending, stored in self.traits.membership_fields:
            if pending in self.fields and self.fields[pending] not in (entity.get(stored) or ()):
                return True
        return False

    def _metadata_changed(self, entity: Entity) -> bool:
        pending = self.fields.metadata
        if not pending:
            return False

        current = {
            key: values[0] if values else None
            for key, values in self.repository.read_metadata(self.traits.kind, entity.id).items()
        }

        return any(
            key not in current or _as_text(current[key]) != _as_text(value)
            for key, value in pending.items()
        )


class PostRecord(EntityRecord):
    """Post, page or custom post type entry addressed by its path."""

    traits = EntityTraits(
        kind=EntityKind.POST,
        required_fields=("title", "content", "author"),
    )

    def __init__(self, path: str, post_type: str = "post", **kwargs: Any):
        super().__init__(path, post_type, **kwargs)

    @property
    def post_type(self) -> str:
        return self.scope

    def _lookup(self, path: ContentPath) -> Entity | None:
        if path.is_root:
            return self.repository.front_page()

        key = self.prefixes.strip_post_type_prefix(path, self.scope)
        if not key:
            return None
        return self.repository.find_by_key(EntityKind.POST, self.scope, key)

    def _prepare(self, existing: Entity | None) -> None:
        if existing is not None:
            self.fields["id"] = existing.id
        if not self.key.is_root:
            self.fields["slug"] = self.key.last_segment
        self.fields["type"] = self.scope
        parent = self.find_parent()
        self.fields["parent"] = parent.id if parent else 0


class TermRecord(EntityRecord):
    """Taxonomy term addressed by its path of ancestor slugs."""

    traits = EntityTraits(
        kind=EntityKind.TERM,
        required_fields=("name",),
        compared_fields=frozenset({"name", "slug", "parent", "description"}),
        metadata_written_separately=True,
    )

    def __init__(self, path: str, taxonomy: str, **kwargs: Any):
        super().__init__(path, taxonomy, **kwargs)

    @property
    def taxonomy(self) -> str:
        return self.scope

    def slug_for(self, path: ContentPath) -> str | None:
        """Last segment of ``path`` once the taxonomy prefix is gone."""
        if path.is_root:
            return None
        stripped = self.prefixes.strip_taxonomy_prefix(path, self.scope)
        if not stripped:
            return None
        return ContentPath(stripped).last_segment

    def _lookup(self, path: ContentPath) -> Entity | None:
        slug = self.slug_for(path)
        if slug is None:
            return None
        return self.repository.find_by_key(EntityKind.TERM, self.scope, slug)

    def _prepare(self, existing: Entity | None) -> None:
        if existing is not None:
            self.fields["id"] = existing.id
        self.fields["slug"] = self.slug_for(self.key) or self.key.last_segment
        self.fields["taxonomy"] = self.scope
        parent = self.find_parent()
        self.fields["parent"] = parent.id if parent else 0


class UserRecord(EntityRecord):
    """User account addressed by its login."""

    traits = EntityTraits(
        kind=EntityKind.USER,
        # The login is the key, injected on save; content fields decide
        required_fields=("email", "role"),
        hierarchical=False,
        membership_fields=(("role", "roles"),),
    )

    def __init__(self, login: str, **kwargs: Any):
        super().__init__(login, "", **kwargs)

    def _normalize_key(self, key: str) -> str:
        login = str(key).strip()
        if not login:
            raise InvalidInputError("The provided login is empty")
        return login

    def cache_key(self, key: str) -> str:
        return f"{self.traits.kind.value}:{key}"

    @property
    def login(self) -> str:
        return self.key

    def _lookup(self, login: str) -> Entity | None:
        return self.repository.find_by_key(EntityKind.USER, "", login)

    def _prepare(self, existing: Entity | None) -> None:
        if existing is not None:
            self.fields["id"] = existing.id
        else:
            self.fields["password"] = secrets.token_urlsafe(16)
        self.fields["login"] = self.key
