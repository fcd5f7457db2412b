"""Pending field mutations for one entity."""

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any

META_FIELD = "meta"


class FieldSet(MutableMapping):
    """Ordered field name to value mapping; last write per key wins.

    Metadata lives under the reserved ``meta`` key as a nested mapping and is
    merged key by key rather than replaced.
    """

    def __init__(self, fields: Mapping[str, Any] | None = None):
        self._data: dict[str, Any] = {}
        if fields:
            self.merge(fields)

    def merge(self, fields: Mapping[str, Any]) -> "FieldSet":
        for key, value in fields.items():
            if key == META_FIELD and isinstance(value, Mapping):
                self.merge_metadata(value)
            else:
                self._data[key] = value
        return self

    def merge_metadata(self, metadata: Mapping[str, Any]) -> "FieldSet":
        merged = dict(self._data.get(META_FIELD) or {})
        merged.update(metadata)
        self._data[META_FIELD] = merged
        return self

    @property
    def metadata(self) -> dict[str, Any]:
        return dict(self._data.get(META_FIELD) or {})

    def to_dict(self) -> dict[str, Any]:
        data = dict(self._data)
        if META_FIELD in data:
            data[META_FIELD] = dict(data[META_FIELD])
        return data

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"FieldSet({self._data!r})"
