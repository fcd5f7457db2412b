"""Canonical content paths.

A ``ContentPath`` turns a raw path or absolute URL into the slash-trimmed key
used to look up hierarchical entities (``about/team``). The bare root ``/``
is the only key allowed to be "empty".
"""

from functools import cached_property
from urllib.parse import urlparse

from press_import.client.exceptions import InvalidInputError

ROOT = "/"


def _is_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class ContentPath:
    """Normalized slash-separated path with lazily computed segments."""

    def __init__(self, raw: str):
        """Normalize ``raw`` into a canonical key.

        Args:
            raw: Path (``/about/team/``) or absolute URL (``https://site/about/``)

        Raises:
            InvalidInputError: If the URL has no path or the path is empty
        """
        raw = str(raw).strip()
        path = self._path_from_url(raw) if _is_url(raw) else raw
        path = ROOT if path == ROOT else path.strip("/")

        if not path:
            raise InvalidInputError(f"The provided path is empty or invalid: {raw!r}")

        self._value = path

    @staticmethod
    def _path_from_url(url: str) -> str:
        path = urlparse(url).path
        if not path:
            raise InvalidInputError(f"The provided URL has no path: {url!r}")
        return path

    @property
    def value(self) -> str:
        """Canonical key (``/`` for root)."""
        return self._value

    @property
    def is_root(self) -> bool:
        return self._value == ROOT

    @cached_property
    def segments(self) -> tuple[str, ...]:
        """Ordered path segments; root yields ``("/",)``."""
        if self.is_root:
            return (ROOT,)
        return tuple(part for part in self._value.split("/") if part)

    @property
    def last_segment(self) -> str:
        return self.segments[-1]

    def parent(self) -> "ContentPath | None":
        """Path without its last segment, ``None`` for root and top-level paths."""
        if self.is_root or len(self.segments) < 2:
            return None
        return ContentPath("/".join(self.segments[:-1]))

    def remove_prefix(self, prefix: str | None) -> str:
        """Drop ``prefix`` when it is exactly the first segment.

        Returns the path unchanged for root, for an empty prefix, or when the
        first segment is something else.
        """
        if self.is_root or not prefix:
            return self._value

        if self.segments[0] == prefix:
            return "/".join(self.segments[1:])

        return self._value

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"ContentPath({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ContentPath):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)
