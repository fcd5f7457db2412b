"""WordPress REST API content store.

Implements ``ContentRepository`` on top of the ``wp/v2`` endpoints,
authenticating with an application password. Entities are exposed with the
importer's field names (``login``, ``title``, ``content``); translation to
and from the REST payloads happens here.
"""

from typing import Any
from urllib.parse import urlparse

from press_import.client.base_client import BaseAPIClient
from press_import.client.exceptions import (
    APIError,
    AuthenticationError,
    NetworkError,
    NotFoundError,
)
from press_import.client.repository import Entity, EntityKind, WriteError
from press_import.config import LoggingConfig, PrefixConfig, StoreConfig
from press_import.utils.logging import get_logger

logger = get_logger(__name__)

API_ROOT = "wp-json/wp/v2"

# REST bases that differ from the post type / taxonomy name
POST_TYPE_REST_BASES = {"post": "posts", "page": "pages", "attachment": "media"}
TAXONOMY_REST_BASES = {"category": "categories", "post_tag": "tags"}

# Fields rendered as {"raw": ..., "rendered": ...} in the edit context
RENDERED_FIELDS = ("title", "content", "excerpt")

POST_FIELDS = (
    "slug",
    "status",
    "type",
    "parent",
    "author",
    "template",
    "categories",
    "tags",
)
TERM_FIELDS = ("name", "slug", "description", "parent", "taxonomy")
USER_FIELDS = (
    "email",
    "first_name",
    "last_name",
    "name",
    "nickname",
    "url",
    "description",
    "slug",
    "roles",
)


class WordPressRepository(BaseAPIClient):
    """``ContentRepository`` backed by the WordPress REST API."""

    def __init__(
        self,
        url: str,
        username: str,
        application_password: str,
        prefixes: PrefixConfig | None = None,
        **kwargs: Any,
    ):
        """Initialize WordPress store.

        Args:
            url: Site URL
            username: API user name
            application_password: Application password of the API user
            prefixes: Rewrite prefixes of post types and taxonomies
            **kwargs: Passed to ``BaseAPIClient``
        """
        super().__init__(
            base_url=f"{url.rstrip('/')}/{API_ROOT}",
            auth=(username, application_password),
            **kwargs,
        )
        self.prefixes = prefixes or PrefixConfig()
        # Post type or taxonomy of every entity seen, for metadata calls by id
        self._scopes: dict[tuple[EntityKind, int], str] = {}

    @classmethod
    def from_config(
        cls,
        store: StoreConfig,
        prefixes: PrefixConfig | None = None,
        logging_config: LoggingConfig | None = None,
    ) -> "WordPressRepository":
        logging_config = logging_config or LoggingConfig()
        return cls(
            url=store.url,
            username=store.username,
            application_password=store.application_password,
            prefixes=prefixes,
            verify_ssl=store.verify_ssl,
            timeout=store.timeout,
            rate_limit=store.rate_limit,
            retry_attempts=store.retry_attempts,
            retry_backoff_min=store.retry_backoff_min,
            retry_backoff_max=store.retry_backoff_max,
            log_payloads=logging_config.log_payloads,
            max_payload_size=logging_config.max_payload_size,
        )

    # ------------------------------------------------------------------
    # ContentRepository
    # ------------------------------------------------------------------

    def find_by_key(self, kind: EntityKind, scope: str, key: str) -> Entity | None:
        if kind is EntityKind.USER:
            return self._find_user(key)
        if kind is EntityKind.TERM:
            return self._find_term(scope, key)
        return self._find_post(scope, key)

    def get(self, kind: EntityKind, scope: str, entity_id: int) -> Entity | None:
        data = self._get_or_none(f"{self._endpoint(kind, scope)}/{entity_id}", {"context": "edit"})
        return self._to_entity(kind, scope, data) if data else None

    def create(self, kind: EntityKind, scope: str, fields: dict[str, Any]) -> Entity | WriteError:
        payload = self._to_payload(kind, fields, creating=True)
        return self._write(kind, scope, self._endpoint(kind, scope), payload)

    def update(
        self, kind: EntityKind, scope: str, entity_id: int, fields: dict[str, Any]
    ) -> Entity | WriteError:
        payload = self._to_payload(kind, fields, creating=False)
        return self._write(kind, scope, f"{self._endpoint(kind, scope)}/{entity_id}", payload)

    def read_metadata(self, kind: EntityKind, entity_id: int) -> dict[str, list[Any]]:
        data = self._get_or_none(
            f"{self._endpoint(kind, self._metadata_scope(kind, entity_id))}/{entity_id}",
            {"context": "edit", "_fields": "id,meta"},
        )
        meta = (data or {}).get("meta") or {}
        if not isinstance(meta, dict):
            return {}
        return {key: value if isinstance(value, list) else [value] for key, value in meta.items()}

    def write_metadata_entry(self, kind: EntityKind, entity_id: int, key: str, value: Any) -> None:
        endpoint = f"{self._endpoint(kind, self._metadata_scope(kind, entity_id))}/{entity_id}"
        try:
            self.post(endpoint, json_data={"meta": {key: value}})
        except AuthenticationError:
            raise
        except (APIError, NetworkError) as e:
            logger.warning(
                "metadata_write_failed",
                kind=kind.value,
                entity_id=entity_id,
                key=key,
                error=str(e),
            )

    def rewrite_prefix(self, kind: EntityKind, scope: str) -> str | None:
        if kind is EntityKind.POST:
            return self.prefixes.post_types.get(scope)
        if kind is EntityKind.TERM:
            return self.prefixes.taxonomies.get(scope)
        return None

    def front_page(self) -> Entity | None:
        settings = self._get_or_none("settings")
        if not settings or settings.get("show_on_front") != "page":
            return None
        page_id = settings.get("page_on_front") or 0
        if not page_id:
            return None
        return self.get(EntityKind.POST, "page", int(page_id))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _find_post(self, post_type: str, key: str) -> Entity | None:
        segments = [segment for segment in key.split("/") if segment]
        if not segments:
            return None

        candidates = self._get_or_none(
            self._endpoint(EntityKind.POST, post_type),
            {"slug": segments[-1], "status": "any", "context": "edit", "per_page": 100},
        )
        for item in candidates or []:
            if self._matches_path(item, segments):
                return self._to_entity(EntityKind.POST, post_type, item)
        return None

    @staticmethod
    def _matches_path(item: dict[str, Any], segments: list[str]) -> bool:
        """True when the permalink of ``item`` ends with ``segments``.

        Unpublished entries have no pretty permalink; for those only top
        level entries are matched.
        """
        link_path = urlparse(item.get("link") or "").path.strip("/")
        if link_path:
            return link_path.split("/")[-len(segments) :] == segments
        return len(segments) == 1 and not item.get("parent")

    def _find_term(self, taxonomy: str, slug: str) -> Entity | None:
        candidates = self._get_or_none(
            self._endpoint(EntityKind.TERM, taxonomy),
            {"slug": slug, "context": "edit", "hide_empty": "false"},
        )
        for item in candidates or []:
            if item.get("slug") == slug:
                return self._to_entity(EntityKind.TERM, taxonomy, item)
        return None

    def _find_user(self, login: str) -> Entity | None:
        candidates = self._get_or_none(
            self._endpoint(EntityKind.USER, ""),
            {"search": login, "search_columns[]": "user_login", "context": "edit"},
        )
        for item in candidates or []:
            if item.get("username") == login:
                return self._to_entity(EntityKind.USER, "", item)
        return None

    def _get_or_none(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        try:
            return self.request("GET", endpoint, params=params)
        except NotFoundError:
            return None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _write(
        self, kind: EntityKind, scope: str, endpoint: str, payload: dict[str, Any]
    ) -> Entity | WriteError:
        try:
            data = self.post(endpoint, json_data=payload)
        except AuthenticationError:
            raise
        except APIError as e:
            code = str((e.response or {}).get("code") or type(e).__name__)
            return WriteError(message=e.message, code=code)
        except NetworkError as e:
            return WriteError(message=str(e), code="network_error")
        return self._to_entity(kind, scope, data)

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def _endpoint(self, kind: EntityKind, scope: str) -> str:
        if kind is EntityKind.USER:
            return "users"
        if kind is EntityKind.TERM:
            return TAXONOMY_REST_BASES.get(scope, scope)
        return POST_TYPE_REST_BASES.get(scope, scope)

    def _metadata_scope(self, kind: EntityKind, entity_id: int) -> str:
        """Scope used for metadata calls, which only carry the entity id."""
        scope = self._scopes.get((kind, entity_id), "")
        if not scope and kind is EntityKind.POST:
            return "post"
        return scope

    def _to_entity(self, kind: EntityKind, scope: str, data: dict[str, Any]) -> Entity:
        self._scopes[(kind, int(data["id"]))] = scope

        if kind is EntityKind.USER:
            fields = {name: data[name] for name in USER_FIELDS if name in data}
            fields["login"] = data.get("username")
        elif kind is EntityKind.TERM:
            fields = {name: data[name] for name in TERM_FIELDS if name in data}
            fields.setdefault("taxonomy", scope)
        else:
            fields = {name: data[name] for name in POST_FIELDS if name in data}
            for name in RENDERED_FIELDS:
                value = data.get(name)
                if isinstance(value, dict):
                    value = value.get("raw", value.get("rendered"))
                if value is not None:
                    fields[name] = value
            fields.setdefault("type", scope)

        return Entity(id=int(data["id"]), fields=fields)

    @staticmethod
    def _to_payload(kind: EntityKind, fields: dict[str, Any], creating: bool) -> dict[str, Any]:
        payload = {key: value for key, value in fields.items() if key != "id"}

        if kind is EntityKind.USER:
            login = payload.pop("login", None)
            if creating and login:
                payload["username"] = login
            role = payload.pop("role", None)
            if role:
                payload["roles"] = [role]
        elif kind is EntityKind.TERM:
            payload.pop("taxonomy", None)
        else:
            payload.pop("type", None)

        return payload
