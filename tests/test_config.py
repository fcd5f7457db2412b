import pytest
from pydantic import ValidationError

from press_import.config import (
    ImportConfig,
    ImporterConfig,
    LoggingConfig,
    SeoConfig,
    StoreConfig,
    load_config_from_yaml,
)

CONFIG_YAML = """
store:
  backend: wordpress
  url: https://example.com/
  username: importer
  application_password: ${WP_APP_PASSWORD}
sources:
  excel: data/sheets
importers:
  default_taxonomy: category
  list_delimiter: ";"
seo:
  plugin: Yoast
prefixes:
  post_types:
    product: shop
"""


def test_load_from_yaml_expands_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("WP_APP_PASSWORD", "abcd efgh")
    config_file = tmp_path / "config.yaml"
    config_file.write_text(CONFIG_YAML)

    config = load_config_from_yaml(config_file)

    assert config.store.url == "https://example.com"
    assert config.store.application_password == "abcd efgh"
    assert config.sources.excel == "data/sheets"
    assert config.sources.content == "imports/content"
    assert config.importers.list_delimiter == ";"
    assert config.seo.plugin == "yoast"
    assert config.prefixes.post_types == {"product": "shop"}


def test_missing_environment_variable(tmp_path, monkeypatch):
    monkeypatch.delenv("WP_APP_PASSWORD", raising=False)
    config_file = tmp_path / "config.yaml"
    config_file.write_text(CONFIG_YAML)

    with pytest.raises(ValueError, match="WP_APP_PASSWORD"):
        load_config_from_yaml(config_file)


def test_missing_and_empty_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config_from_yaml(tmp_path / "absent.yaml")

    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    with pytest.raises(ValueError, match="Empty configuration"):
        load_config_from_yaml(empty)


def test_defaults_use_memory_store():
    config = ImportConfig()

    assert config.store.backend == "memory"
    assert config.importers.meta_prefix == "m:"
    assert config.seo.plugin is None


def test_wordpress_store_requires_credentials():
    with pytest.raises(ValidationError, match="application_password"):
        StoreConfig(backend="wordpress", url="https://example.com", username="importer")


def test_store_url_scheme():
    with pytest.raises(ValidationError):
        StoreConfig(backend="memory", url="example.com")


def test_unknown_seo_plugin():
    with pytest.raises(ValidationError):
        SeoConfig(plugin="all_in_one")
    assert SeoConfig(plugin="").plugin is None


def test_empty_delimiter_rejected():
    with pytest.raises(ValidationError):
        ImporterConfig(list_delimiter="")


def test_log_level_normalized():
    assert LoggingConfig(level="debug").level == "DEBUG"
    with pytest.raises(ValidationError):
        LoggingConfig(level="verbose")
