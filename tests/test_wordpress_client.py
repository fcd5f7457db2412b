import json

import httpx
import pytest

from press_import.client.exceptions import AuthenticationError
from press_import.client.repository import EntityKind, WriteError
from press_import.client.wordpress import WordPressRepository
from press_import.config import ImporterConfig, PrefixConfig, StoreConfig
from press_import.core.cache import ResolutionCache
from press_import.core.prefix import PrefixResolver
from press_import.core.status import SaveStatus
from press_import.importers import PostImporter
from press_import.sources import ExcelAdapter

API = "/wp-json/wp/v2"


class FakeSite:
    """Routes requests to canned responses and records them."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def on(self, method, path, *responses):
        self.routes[(method, API + path)] = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responses = self.routes.get((request.method, request.url.path))
        if not responses:
            return httpx.Response(404, json={"code": "rest_no_route", "message": "No route"})
        status, body = responses.pop(0) if len(responses) > 1 else responses[0]
        return httpx.Response(status, json=body)

    def body(self, index=-1):
        return json.loads(self.requests[index].content)


@pytest.fixture
def site():
    return FakeSite()


def _repository(handler):
    return WordPressRepository(
        url="https://example.com/",
        username="importer",
        application_password="secret",
        prefixes=PrefixConfig(post_types={"product": "shop"}, taxonomies={"genre": "genres"}),
        transport=httpx.MockTransport(handler),
        rate_limit=0,
        retry_attempts=3,
        retry_backoff_min=0,
        retry_backoff_max=0,
    )


@pytest.fixture
def wordpress(site):
    repository = _repository(site)
    yield repository
    repository.close()


def _page(page_id, slug, link, parent=0, title="Team"):
    return {
        "id": page_id,
        "slug": slug,
        "link": link,
        "parent": parent,
        "type": "page",
        "status": "publish",
        "title": {"raw": title, "rendered": title},
        "content": {"raw": "", "rendered": ""},
    }


def test_find_post_matches_full_path(site, wordpress):
    site.on(
        "GET",
        "/pages",
        (
            200,
            [
                _page(11, "team", "https://example.com/careers/team/", parent=4),
                _page(12, "team", "https://example.com/about/team/", parent=3),
            ],
        ),
    )

    entity = wordpress.find_by_key(EntityKind.POST, "page", "about/team")

    assert entity.id == 12
    assert entity.get("title") == "Team"
    assert entity.get("parent") == 3
    assert entity.get("type") == "page"
    params = site.requests[0].url.params
    assert params["slug"] == "team"
    assert params["status"] == "any"


def test_find_post_without_permalink_only_matches_top_level(site, wordpress):
    site.on("GET", "/posts", (200, [_page(5, "draft", "", parent=0)]))

    assert wordpress.find_by_key(EntityKind.POST, "post", "draft").id == 5
    assert wordpress.find_by_key(EntityKind.POST, "post", "news/draft") is None


def test_find_term_and_user(site, wordpress):
    site.on("GET", "/categories", (200, [{"id": 3, "slug": "jazz", "name": "Jazz", "parent": 0}]))
    site.on(
        "GET",
        "/users",
        (200, [{"id": 8, "username": "jdoe2", "email": "x@example.com"}, {"id": 7, "username": "jdoe"}]),
    )

    term = wordpress.find_by_key(EntityKind.TERM, "category", "jazz")
    user = wordpress.find_by_key(EntityKind.USER, "", "jdoe")

    assert (term.id, term.get("taxonomy")) == (3, "category")
    assert (user.id, user.get("login")) == (7, "jdoe")


def test_get_missing_entity_returns_none(wordpress):
    assert wordpress.get(EntityKind.POST, "page", 99) is None


def test_create_post_payload(site, wordpress):
    site.on("POST", "/pages", (201, _page(20, "about", "https://example.com/about/", title="About")))

    entity = wordpress.create(
        EntityKind.POST,
        "page",
        {"slug": "about", "title": "About", "type": "page", "parent": 0, "meta": {"hero": "a.jpg"}},
    )

    assert entity.id == 20
    assert site.body() == {"slug": "about", "title": "About", "parent": 0, "meta": {"hero": "a.jpg"}}


def test_user_payload_maps_login_and_role(site, wordpress):
    site.on("POST", "/users", (201, {"id": 7, "username": "jdoe", "roles": ["author"]}))
    site.on("POST", "/users/7", (200, {"id": 7, "username": "jdoe", "roles": ["editor"]}))

    wordpress.create(EntityKind.USER, "", {"login": "jdoe", "role": "author", "email": "j@example.com"})
    assert site.body() == {"username": "jdoe", "roles": ["author"], "email": "j@example.com"}

    updated = wordpress.update(EntityKind.USER, "", 7, {"login": "jdoe", "role": "editor"})
    assert site.body() == {"roles": ["editor"]}
    assert updated.get("roles") == ["editor"]


def test_rejected_write_returns_write_error(site, wordpress):
    site.on("POST", "/categories", (400, {"code": "term_exists", "message": "A term with the name exists."}))

    result = wordpress.create(EntityKind.TERM, "category", {"slug": "jazz", "name": "Jazz"})

    assert isinstance(result, WriteError)
    assert result.code == "term_exists"
    assert len(site.requests) == 1


def test_server_error_on_write_is_not_retried(site, wordpress):
    site.on("POST", "/posts", (500, {"code": "internal", "message": "boom"}))

    result = wordpress.create(EntityKind.POST, "post", {"slug": "hello"})

    assert isinstance(result, WriteError)
    assert len(site.requests) == 1


def test_server_error_on_read_is_retried(site, wordpress):
    site.on(
        "GET",
        "/tags",
        (503, {"code": "unavailable", "message": "busy"}),
        (200, [{"id": 9, "slug": "launch", "name": "Launch"}]),
    )

    term = wordpress.find_by_key(EntityKind.TERM, "post_tag", "launch")

    assert term.id == 9
    assert len(site.requests) == 2


def test_authentication_error_is_raised(site, wordpress):
    site.on("POST", "/posts", (401, {"code": "rest_not_logged_in", "message": "no"}))

    with pytest.raises(AuthenticationError):
        wordpress.create(EntityKind.POST, "post", {"slug": "hello"})


def test_metadata_uses_entity_scope(site, wordpress):
    site.on("GET", "/pages/12", (200, {"id": 12, "meta": {"hero": "a.jpg", "tags": ["x", "y"]}}))
    site.on("POST", "/pages/12", (400, {"code": "rest_invalid_param", "message": "bad meta"}))
    site.on("GET", "/pages", (200, [_page(12, "team", "https://example.com/team/")]))

    wordpress.find_by_key(EntityKind.POST, "page", "team")

    assert wordpress.read_metadata(EntityKind.POST, 12) == {"hero": ["a.jpg"], "tags": ["x", "y"]}
    assert site.requests[-1].url.params["_fields"] == "id,meta"

    # Rejected metadata writes are logged, not raised
    wordpress.write_metadata_entry(EntityKind.POST, 12, "hero", "b.jpg")
    assert site.body() == {"meta": {"hero": "b.jpg"}}


def test_front_page(site, wordpress):
    site.on("GET", "/settings", (200, {"show_on_front": "page", "page_on_front": 4}))
    site.on("GET", "/pages/4", (200, _page(4, "home", "https://example.com/", title="Home")))

    assert wordpress.front_page().id == 4


def test_front_page_shows_posts(site, wordpress):
    site.on("GET", "/settings", (200, {"show_on_front": "posts", "page_on_front": 0}))

    assert wordpress.front_page() is None


def test_rewrite_prefixes_come_from_configuration(wordpress):
    assert wordpress.rewrite_prefix(EntityKind.POST, "product") == "shop"
    assert wordpress.rewrite_prefix(EntityKind.POST, "page") is None
    assert wordpress.rewrite_prefix(EntityKind.TERM, "genre") == "genres"
    assert wordpress.rewrite_prefix(EntityKind.USER, "") is None


def test_from_config():
    store = StoreConfig(url="https://example.com", username="importer", application_password="secret")

    repository = WordPressRepository.from_config(store)

    assert repository.base_url == "https://example.com/wp-json/wp/v2"
    repository.close()


def test_rate_limited_write_is_retried(site, wordpress):
    site.on(
        "POST",
        "/categories",
        (429, {"code": "too_many_requests", "message": "slow down"}),
        (201, {"id": 4, "slug": "jazz", "name": "Jazz"}),
    )

    entity = wordpress.create(EntityKind.TERM, "category", {"slug": "jazz", "name": "Jazz"})

    assert entity.id == 4
    assert len(site.requests) == 2


def _time_out_posts_with_slug(site, slug):
    """Handler timing out POSTs whose body has ``slug`` (None: no slug).

    Every other request is routed to ``site``.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST" and json.loads(request.content or b"{}").get("slug") == slug:
            site.requests.append(request)
            raise httpx.ConnectTimeout("boom", request=request)
        return site(request)

    return handler


def test_timed_out_write_returns_write_error(site):
    repository = _repository(_time_out_posts_with_slug(site, "hello"))

    result = repository.create(EntityKind.POST, "post", {"slug": "hello", "title": "Hello"})

    assert isinstance(result, WriteError)
    assert result.code == "network_error"
    assert len(site.requests) == 1
    repository.close()


def test_timed_out_metadata_write_is_logged(site):
    repository = _repository(_time_out_posts_with_slug(site, None))

    repository.write_metadata_entry(EntityKind.POST, 12, "hero", "b.jpg")

    assert len(site.requests) == 1
    repository.close()


def test_timed_out_row_fails_and_file_continues(tmp_path, site):
    site.on(
        "POST",
        "/posts",
        (
            201,
            {"id": 5, "slug": "ok", "type": "post", "link": "https://example.com/ok/", "title": {"raw": "OK"}},
        ),
    )
    repository = _repository(_time_out_posts_with_slug(site, "timeout"))
    cache = ResolutionCache()
    importer = PostImporter(
        repository=repository,
        cache=cache,
        prefixes=PrefixResolver(repository, cache),
        settings=ImporterConfig(default_taxonomy="category"),
    )
    csv_file = tmp_path / "posts.csv"
    csv_file.write_text("path,title\ntimeout,Times out\nok,OK\n")

    log = ExcelAdapter(importer).import_files([csv_file])

    statuses = [entry["status"] for entry in log.files[str(csv_file)]]
    assert statuses == [SaveStatus.FAILED, SaveStatus.CREATED]
    assert not log.errors
    repository.close()
