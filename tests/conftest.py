"""Shared fixtures for the import engine tests."""

import pytest

from press_import.client.memory import InMemoryRepository
from press_import.client.repository import EntityKind
from press_import.config import ImporterConfig
from press_import.core.cache import ResolutionCache
from press_import.core.prefix import PrefixResolver


@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def cache() -> ResolutionCache:
    return ResolutionCache()


@pytest.fixture
def prefixes(repository, cache) -> PrefixResolver:
    return PrefixResolver(repository, cache)


@pytest.fixture
def record_options(repository, cache, prefixes) -> dict:
    """Collaborators shared by every entity record of one run."""
    return {"repository": repository, "cache": cache, "prefixes": prefixes}


@pytest.fixture
def importer_options(repository, cache, prefixes) -> dict:
    return {
        "repository": repository,
        "cache": cache,
        "prefixes": prefixes,
        "settings": ImporterConfig(default_taxonomy="category"),
    }


@pytest.fixture
def author(repository):
    """An existing editor account."""
    return repository.add(
        EntityKind.USER,
        "",
        {"login": "editor", "email": "editor@example.com", "role": "editor"},
    )
