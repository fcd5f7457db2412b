"""Content store interface shared by the import engine and its backends.

The engine only talks to a ``ContentRepository``; concrete stores live in
``press_import.client.memory`` and ``press_import.client.wordpress``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class EntityKind(str, Enum):
    """Entity families handled by the store."""

    POST = "post"
    TERM = "term"
    USER = "user"


@dataclass
class Entity:
    """Snapshot of a stored entity.

    ``fields`` uses the import field names (``title``, ``slug``, ``parent``,
    ``roles``...), whatever the backend calls them.
    """

    id: int
    fields: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a stored field value, or ``default`` when absent."""
        if key == "id":
            return self.id
        return self.fields.get(key, default)


@dataclass(frozen=True)
class WriteError:
    """Failure value returned by ``create``/``update`` instead of raising."""

    message: str
    code: str = "write_failed"


@runtime_checkable
class ContentRepository(Protocol):
    """Persistence collaborator used by entity records.

    ``scope`` is the post type for posts, the taxonomy for terms and is
    ignored for users. ``key`` is the prefix-free page path for posts, the
    slug for terms and the login for users.
    """

    def find_by_key(self, kind: EntityKind, scope: str, key: str) -> Entity | None: ...

    def get(self, kind: EntityKind, scope: str, entity_id: int) -> Entity | None: ...

    def create(self, kind: EntityKind, scope: str, fields: dict[str, Any]) -> Entity | WriteError: ...

    def update(
        self, kind: EntityKind, scope: str, entity_id: int, fields: dict[str, Any]
    ) -> Entity | WriteError: ...

    def read_metadata(self, kind: EntityKind, entity_id: int) -> dict[str, list[Any]]: ...

    def write_metadata_entry(self, kind: EntityKind, entity_id: int, key: str, value: Any) -> None: ...

    def rewrite_prefix(self, kind: EntityKind, scope: str) -> str | None: ...

    def front_page(self) -> Entity | None: ...
