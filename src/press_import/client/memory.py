"""In-memory content store.

Backs dry runs (``--dry-run`` / ``store.backend: memory``) and the test
suite. Every call is counted in ``calls`` so callers can assert how often the
store was actually hit.
"""

import copy
import itertools
from collections import Counter
from typing import Any

from press_import.client.repository import Entity, EntityKind, WriteError
from press_import.config import PrefixConfig
from press_import.utils.logging import get_logger

logger = get_logger(__name__)


class InMemoryRepository:
    """Dictionary-backed ``ContentRepository`` implementation."""

    def __init__(self, prefixes: dict[tuple[EntityKind, str], str] | None = None):
        """Initialize an empty store.

        Args:
            prefixes: Rewrite prefixes keyed by (kind, post type or taxonomy)
        """
        self._entities: dict[tuple[EntityKind, str], dict[int, Entity]] = {}
        self._metadata: dict[tuple[EntityKind, int], dict[str, list[Any]]] = {}
        self._failures: dict[tuple[EntityKind, str], str] = {}
        self._ids = itertools.count(1)
        self.prefixes: dict[tuple[EntityKind, str], str] = dict(prefixes or {})
        self.front_page_id: int | None = None
        self.calls: Counter[str] = Counter()

    @classmethod
    def from_config(cls, prefixes: PrefixConfig | None = None) -> "InMemoryRepository":
        """Empty store using the configured rewrite prefixes."""
        prefixes = prefixes or PrefixConfig()
        configured = {
            (EntityKind.POST, name): prefix for name, prefix in prefixes.post_types.items()
        }
        configured.update(
            {(EntityKind.TERM, name): prefix for name, prefix in prefixes.taxonomies.items()}
        )
        return cls(prefixes=configured)

    # ------------------------------------------------------------------
    # Seeding helpers
    # ------------------------------------------------------------------

    def add(
        self,
        kind: EntityKind,
        scope: str,
        fields: dict[str, Any],
        metadata: dict[str, Any] | None = None,
    ) -> Entity:
        """Store an entity directly, without counting it as a write."""
        entity_id = next(self._ids)
        entity = Entity(id=entity_id, fields=self._normalize(kind, scope, fields))
        self._bucket(kind, scope)[entity_id] = entity
        if metadata:
            self._metadata[(kind, entity_id)] = {k: [v] for k, v in metadata.items()}
        return copy.deepcopy(entity)

    def set_prefix(self, kind: EntityKind, scope: str, prefix: str | None) -> None:
        """Register the rewrite prefix of a post type or taxonomy."""
        if prefix:
            self.prefixes[(kind, scope)] = prefix
        else:
            self.prefixes.pop((kind, scope), None)

    def fail_writes_for(self, kind: EntityKind, key: str, message: str = "rejected") -> None:
        """Make every write of the entity with this slug or login fail."""
        self._failures[(kind, key)] = message

    def reset_calls(self) -> None:
        """Reset the call counters."""
        self.calls.clear()

    @property
    def write_count(self) -> int:
        """Number of create/update/metadata writes issued so far."""
        return self.calls["create"] + self.calls["update"] + self.calls["write_metadata_entry"]

    # ------------------------------------------------------------------
    # ContentRepository
    # ------------------------------------------------------------------

    def find_by_key(self, kind: EntityKind, scope: str, key: str) -> Entity | None:
        self.calls["find_by_key"] += 1
        for entity in self._bucket(kind, scope).values():
            if self._lookup_key(kind, scope, entity) == key:
                return copy.deepcopy(entity)
        return None

    def get(self, kind: EntityKind, scope: str, entity_id: int) -> Entity | None:
        self.calls["get"] += 1
        entity = self._bucket(kind, scope).get(entity_id)
        return copy.deepcopy(entity) if entity is not None else None

    def create(self, kind: EntityKind, scope: str, fields: dict[str, Any]) -> Entity | WriteError:
        self.calls["create"] += 1
        payload = dict(fields)
        metadata = payload.pop("meta", None) or {}
        payload.pop("id", None)

        failure = self._failure_for(kind, payload)
        if failure is not None:
            return failure

        if kind is not EntityKind.POST and self._conflicts(kind, scope, payload):
            return WriteError(f"{kind.value} already exists", code="exists")

        entity_id = next(self._ids)
        entity = Entity(id=entity_id, fields=self._normalize(kind, scope, payload))
        self._bucket(kind, scope)[entity_id] = entity
        self._merge_metadata(kind, entity_id, metadata)

        logger.debug("memory_entity_created", kind=kind.value, scope=scope, entity_id=entity_id)
        return copy.deepcopy(entity)

    def update(
        self, kind: EntityKind, scope: str, entity_id: int, fields: dict[str, Any]
    ) -> Entity | WriteError:
        self.calls["update"] += 1
        entity = self._bucket(kind, scope).get(entity_id)
        if entity is None:
            return WriteError(f"{kind.value} {entity_id} does not exist", code="not_found")

        payload = dict(fields)
        metadata = payload.pop("meta", None) or {}
        payload.pop("id", None)

        failure = self._failure_for(kind, {**entity.fields, **payload})
        if failure is not None:
            return failure

        entity.fields.update(self._normalize(kind, scope, payload))
        self._merge_metadata(kind, entity_id, metadata)

        logger.debug("memory_entity_updated", kind=kind.value, scope=scope, entity_id=entity_id)
        return copy.deepcopy(entity)

    def read_metadata(self, kind: EntityKind, entity_id: int) -> dict[str, list[Any]]:
        self.calls["read_metadata"] += 1
        return copy.deepcopy(self._metadata.get((kind, entity_id), {}))

    def write_metadata_entry(self, kind: EntityKind, entity_id: int, key: str, value: Any) -> None:
        self.calls["write_metadata_entry"] += 1
        self._metadata.setdefault((kind, entity_id), {})[key] = [value]

    def rewrite_prefix(self, kind: EntityKind, scope: str) -> str | None:
        self.calls["rewrite_prefix"] += 1
        return self.prefixes.get((kind, scope))

    def front_page(self) -> Entity | None:
        self.calls["front_page"] += 1
        if self.front_page_id is None:
            return None
        for (kind, _scope), bucket in self._entities.items():
            if kind is EntityKind.POST and self.front_page_id in bucket:
                return copy.deepcopy(bucket[self.front_page_id])
        return None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _bucket(self, kind: EntityKind, scope: str) -> dict[int, Entity]:
        if kind is EntityKind.USER:
            scope = ""
        return self._entities.setdefault((kind, scope), {})

    def _normalize(self, kind: EntityKind, scope: str, fields: dict[str, Any]) -> dict[str, Any]:
        normalized = {k: v for k, v in fields.items() if k not in ("meta", "id")}
        if kind is EntityKind.USER:
            normalized.pop("password", None)
            role = normalized.pop("role", None)
            if role:
                normalized["roles"] = [role]
        if kind is EntityKind.POST:
            normalized.setdefault("type", scope)
        if kind is EntityKind.TERM:
            normalized.setdefault("taxonomy", scope)
        return copy.deepcopy(normalized)

    def _lookup_key(self, kind: EntityKind, scope: str, entity: Entity) -> str | None:
        if kind is EntityKind.USER:
            return entity.fields.get("login")
        if kind is EntityKind.TERM:
            return entity.fields.get("slug")

        # Pages are addressed by the slugs of their ancestors
        bucket = self._bucket(kind, scope)
        slugs: list[str] = []
        current: Entity | None = entity
        seen: set[int] = set()
        while current is not None and current.id not in seen:
            seen.add(current.id)
            slugs.append(str(current.fields.get("slug", "")))
            current = bucket.get(current.fields.get("parent") or 0)
        return "/".join(reversed(slugs))

    def _conflicts(self, kind: EntityKind, scope: str, fields: dict[str, Any]) -> bool:
        field_name = "login" if kind is EntityKind.USER else "slug"
        value = fields.get(field_name)
        return value is not None and any(
            e.fields.get(field_name) == value for e in self._bucket(kind, scope).values()
        )

    def _failure_for(self, kind: EntityKind, fields: dict[str, Any]) -> WriteError | None:
        key = fields.get("login") if kind is EntityKind.USER else fields.get("slug")
        message = self._failures.get((kind, str(key)))
        if message is None:
            return None
        logger.debug("memory_write_rejected", kind=kind.value, key=key, reason=message)
        return WriteError(message)

    def _merge_metadata(self, kind: EntityKind, entity_id: int, metadata: dict[str, Any]) -> None:
        if not metadata:
            return
        stored = self._metadata.setdefault((kind, entity_id), {})
        for key, value in metadata.items():
            stored[key] = [value]
