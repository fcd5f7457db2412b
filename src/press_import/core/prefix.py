"""Rewrite prefix stripping for post types and taxonomies.

A custom post type registered with rewrite slug ``news`` serves its entries
under ``/news/<slug>``; the prefix has to go before the path can be looked up
in the store.
"""

from press_import.client.repository import ContentRepository, EntityKind
from press_import.core.cache import ResolutionCache
from press_import.core.path import ContentPath


class PrefixResolver:
    """Looks up rewrite prefixes once per type/taxonomy name and strips them."""

    def __init__(self, repository: ContentRepository, cache: ResolutionCache):
        self.repository = repository
        self.cache = cache

    def prefix_for(self, kind: EntityKind, name: str) -> str | None:
        """Return the registered prefix, memoized in the shared cache."""
        return self.cache.resolve(
            f"prefix:{kind.value}:{name}",
            lambda: self.repository.rewrite_prefix(kind, name),
        )

    def post_type_prefix(self, post_type: str) -> str | None:
        return self.prefix_for(EntityKind.POST, post_type)

    def taxonomy_prefix(self, taxonomy: str) -> str | None:
        return self.prefix_for(EntityKind.TERM, taxonomy)

    def strip_post_type_prefix(self, path: ContentPath, post_type: str) -> str:
        return path.remove_prefix(self.post_type_prefix(post_type))

    def strip_taxonomy_prefix(self, path: ContentPath, taxonomy: str) -> str:
        return path.remove_prefix(self.taxonomy_prefix(taxonomy))
