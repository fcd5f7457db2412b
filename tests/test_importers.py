import pytest

from press_import.client.exceptions import UnsupportedCapabilityError, UnsupportedTypeError
from press_import.client.repository import EntityKind
from press_import.config import ImporterConfig
from press_import.core.status import SaveStatus
from press_import.importers import (
    PostImporter,
    TermImporter,
    UserImporter,
    create_importer,
)
from press_import.metadata.strategies import RankMathStrategy, YoastStrategy

# ----------------------------------------------------------------------
# Posts
# ----------------------------------------------------------------------


def test_post_row_is_created_and_logged(repository, importer_options, author):
    importer = PostImporter(**importer_options)

    result = importer.import_row(
        {"path": "/about/", "type": "page", "title": "About", "body": "Who we are", "author": "editor"}
    )

    assert result.status is SaveStatus.CREATED
    entry = result.to_entry()
    assert entry == {"id": result.id, "path": "about", "parent": "N/A", "status": SaveStatus.CREATED}

    stored = repository.get(EntityKind.POST, "page", result.id)
    assert stored.get("content") == "Who we are"
    assert stored.get("author") == author.id


def test_child_row_reports_parent_id(importer_options, author):
    importer = PostImporter(**importer_options)
    about = importer.import_row({"path": "about", "type": "page", "title": "About"})
    team = importer.import_row({"path": "about/team", "type": "page", "title": "Team"})

    assert team.status is SaveStatus.CREATED
    assert team.parent == about.id


def test_row_without_path_is_skipped_before_any_lookup(repository, importer_options):
    importer = PostImporter(**importer_options)

    result = importer.import_row({"path": "  ", "title": "Orphan"})

    assert result.status is SaveStatus.SKIPPED
    assert result.to_entry() == {
        "id": "N/A",
        "path": "N/A",
        "parent": "N/A",
        "status": SaveStatus.SKIPPED,
    }
    assert sum(repository.calls.values()) == 0


def test_post_type_defaults_from_settings(repository, importer_options):
    importer = PostImporter(**importer_options)

    result = importer.import_row({"path": "hello-world", "title": "Hello"})

    assert repository.get(EntityKind.POST, "post", result.id).get("type") == "post"


def test_numeric_author_is_used_as_id(repository, importer_options):
    importer = PostImporter(**importer_options)

    result = importer.import_row({"path": "hello", "title": "Hello", "author": "7"})

    assert repository.get(EntityKind.POST, "post", result.id).get("author") == 7


def test_categories_and_tags_resolve_to_term_ids(repository, importer_options):
    news = repository.add(EntityKind.TERM, "category", {"slug": "news", "name": "News", "parent": 0})
    launch = repository.add(EntityKind.TERM, "post_tag", {"slug": "launch", "name": "Launch"})
    importer = PostImporter(**importer_options)

    result = importer.import_row(
        {
            "path": "hello",
            "title": "Hello",
            "categories": "news, unknown",
            "tags": "launch",
        }
    )

    stored = repository.get(EntityKind.POST, "post", result.id)
    assert stored.get("categories") == [news.id]
    assert stored.get("tags") == [launch.id]


def test_prefixed_columns_become_metadata(repository, importer_options):
    importer = PostImporter(**importer_options)

    result = importer.import_row({"path": "hello", "title": "Hello", "m:hero_image": "hero.jpg"})

    assert repository.read_metadata(EntityKind.POST, result.id) == {"hero_image": ["hero.jpg"]}


def test_seo_columns_without_strategy_are_unsupported(repository, importer_options):
    importer = PostImporter(**importer_options)

    with pytest.raises(UnsupportedCapabilityError):
        importer.import_row({"path": "hello", "title": "Hello", "seo_title": "Hello | Site"})

    assert repository.write_count == 0


def test_blank_seo_columns_need_no_strategy(importer_options):
    importer = PostImporter(**importer_options)

    result = importer.import_row({"path": "hello", "title": "Hello", "seo_title": ""})

    assert result.status is SaveStatus.CREATED


def test_seo_columns_are_mapped_by_strategy(repository, importer_options):
    importer = PostImporter(strategy=RankMathStrategy(), **importer_options)

    result = importer.import_row(
        {"path": "hello", "title": "Hello", "seo_title": "Hello | Site", "seo_keyword": "hello"}
    )

    assert repository.read_metadata(EntityKind.POST, result.id) == {
        "rank_math_title": ["Hello | Site"],
        "rank_math_focus_keyword": ["hello"],
    }


def test_replayed_row_is_noop(repository, importer_options, author):
    importer = PostImporter(**importer_options)
    row = {"path": "about", "type": "page", "title": "About", "body": "Hi", "author": "editor"}

    assert importer.import_row(row).status is SaveStatus.CREATED
    repository.reset_calls()
    assert importer.import_row(row).status is SaveStatus.NOOP
    assert repository.write_count == 0
    assert importer.get_stats() == {"created": 1, "noop": 1}


# ----------------------------------------------------------------------
# Terms
# ----------------------------------------------------------------------


def test_term_rows_use_default_taxonomy(repository, importer_options):
    importer = TermImporter(**importer_options)

    genres = importer.import_row({"path": "genres", "name": "Genres"})
    rock = importer.import_row({"path": "genres/rock", "taxonomy": "", "name": "Rock"})

    assert rock.status is SaveStatus.CREATED
    assert rock.parent == genres.id
    assert repository.find_by_key(EntityKind.TERM, "category", "rock").get("name") == "Rock"


def test_term_row_without_taxonomy_is_skipped(repository, importer_options):
    importer_options["settings"] = ImporterConfig()
    importer = TermImporter(**importer_options)

    result = importer.import_row({"path": "rock", "name": "Rock"})

    assert result.status is SaveStatus.SKIPPED
    assert repository.write_count == 0


def test_term_metadata_columns(repository, importer_options):
    importer = TermImporter(**importer_options)

    result = importer.import_row({"path": "rock", "name": "Rock", "m:icon": "guitar", "m:empty": ""})

    assert repository.read_metadata(EntityKind.TERM, result.id) == {"icon": ["guitar"]}


# ----------------------------------------------------------------------
# Users
# ----------------------------------------------------------------------


def test_user_row_has_no_parent_column(repository, importer_options):
    importer = UserImporter(**importer_options)

    result = importer.import_row(
        {"login": "jdoe", "contact": "jdoe@example.com", "role": "author", "first_name": "Jane"}
    )

    assert result.to_entry() == {"id": result.id, "login": "jdoe", "status": SaveStatus.CREATED}
    stored = repository.get(EntityKind.USER, "", result.id)
    assert stored.get("email") == "jdoe@example.com"
    assert stored.get("first_name") == "Jane"


def test_user_row_without_login_is_skipped(importer_options):
    result = UserImporter(**importer_options).import_row({"login": "", "email": "x@example.com"})

    assert result.status is SaveStatus.SKIPPED
    assert "parent" not in result.to_entry()


def test_social_profiles_are_mapped_by_strategy(repository, importer_options):
    importer = UserImporter(strategy=YoastStrategy(), **importer_options)

    result = importer.import_row(
        {
            "login": "jdoe",
            "email": "jdoe@example.com",
            "role": "author",
            "twitter": "https://twitter.com/@jdoe",
            "facebook": "https://facebook.com/jdoe",
        }
    )

    assert repository.read_metadata(EntityKind.USER, result.id) == {
        "wpseo_twitter": ["jdoe"],
        "wpseo_facebook": ["https://facebook.com/jdoe"],
    }


def test_social_profiles_without_strategy_are_unsupported(importer_options):
    importer = UserImporter(**importer_options)

    with pytest.raises(UnsupportedCapabilityError):
        importer.import_row({"login": "jdoe", "email": "jdoe@example.com", "linkedin": "https://x"})


# ----------------------------------------------------------------------
# Registry
# ----------------------------------------------------------------------


def test_create_importer_by_type(importer_options):
    assert isinstance(create_importer("Term", **importer_options), TermImporter)


def test_unknown_type_is_rejected(importer_options):
    with pytest.raises(UnsupportedTypeError):
        create_importer("attachment", **importer_options)
