import pytest
from click.testing import CliRunner

from press_import.cli.context import ImportContext
from press_import.cli.main import cli
from press_import.cli.menu import parse_selection
from press_import.client.repository import EntityKind


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    excel_dir = tmp_path / "excel"
    excel_dir.mkdir()
    (excel_dir / "pages.csv").write_text("path,type,title\nabout,page,About\nabout/team,page,Team\n")

    config = tmp_path / "config.yaml"
    config.write_text(
        "store:\n"
        "  backend: memory\n"
        "sources:\n"
        f"  excel: {excel_dir}\n"
        f"  content: {tmp_path / 'content'}\n"
        "seo:\n"
        "  plugin: rank_math\n"
    )
    return config


def invoke(runner, tmp_path, *args):
    return runner.invoke(cli, ["--log-file", str(tmp_path / "logs" / "import.log"), *args])


def test_help_without_command(runner, tmp_path):
    result = invoke(runner, tmp_path)

    assert result.exit_code == 0
    assert "import" in result.output
    assert "sources" in result.output


def test_import_prints_log(runner, tmp_path, config_file):
    result = invoke(runner, tmp_path, "--config", str(config_file), "import", "post", "-s", "excel")

    assert result.exit_code == 0, result.output
    assert "Import Summary" in result.output
    assert "CREATED" in result.output
    assert "Import completed successfully" in result.output


def test_dry_run(runner, tmp_path, config_file):
    result = invoke(
        runner, tmp_path, "--config", str(config_file), "import", "post", "-s", "excel", "--dry-run"
    )

    assert result.exit_code == 0, result.output
    assert "Dry run" in result.output


def test_interactive_import_of_selected_file(runner, tmp_path, config_file):
    # Rows without any content fail, so importing news.csv would be reported
    (tmp_path / "excel" / "news.csv").write_text("path,type\nlaunch,post\n")

    result = runner.invoke(
        cli,
        [
            "--log-file",
            str(tmp_path / "logs" / "import.log"),
            "--config",
            str(config_file),
            "import",
            "post",
            "-s",
            "excel",
            "--interactive",
        ],
        input="2\n",
    )

    assert result.exit_code == 0, result.output
    assert "Select files to import" in result.output
    assert "news.csv" in result.output
    assert "Import completed successfully" in result.output


def test_unknown_type_exits_with_configuration_error(runner, tmp_path, config_file):
    result = invoke(runner, tmp_path, "--config", str(config_file), "import", "comment", "-s", "excel")

    assert result.exit_code == 2
    assert "Unsupported import type" in result.output


def test_missing_directory_exits_with_configuration_error(runner, tmp_path, config_file):
    result = invoke(
        runner,
        tmp_path,
        "--config",
        str(config_file),
        "import",
        "post",
        "-s",
        "content",
    )

    assert result.exit_code == 2


def test_invalid_config_exits_with_configuration_error(runner, tmp_path):
    config = tmp_path / "bad.yaml"
    config.write_text("store:\n  backend: wordpress\n")

    result = invoke(runner, tmp_path, "--config", str(config), "config", "show")

    assert result.exit_code == 2
    assert "Error loading configuration" in result.output


def test_config_show_masks_password(runner, tmp_path, monkeypatch):
    monkeypatch.setenv("WP_APP_PASSWORD", "super-secret")
    config = tmp_path / "config.yaml"
    config.write_text(
        "store:\n"
        "  url: https://example.com\n"
        "  username: importer\n"
        "  application_password: ${WP_APP_PASSWORD}\n"
        "prefixes:\n"
        "  post_types:\n"
        "    product: shop\n"
    )

    result = invoke(runner, tmp_path, "--config", str(config), "config", "show")

    assert result.exit_code == 0, result.output
    assert "super-secret" not in result.output
    assert "masked" in result.output
    assert "post type product: shop" in result.output


def test_sources_lists_adapters(runner, tmp_path, config_file):
    result = invoke(runner, tmp_path, "--config", str(config_file), "sources")

    assert result.exit_code == 0, result.output
    assert "excel" in result.output
    assert "content" in result.output
    assert "Import types: post, term, user" in result.output


@pytest.mark.parametrize(
    ("answer", "expected"),
    [
        ("all", [0, 1, 2, 3]),
        ("1,3-4", [0, 2, 3]),
        ("2, 2", [1]),
    ],
)
def test_parse_selection(answer, expected):
    assert parse_selection(answer, 4) == expected


@pytest.mark.parametrize("answer", ["0", "5", "3-1", "x", ","])
def test_parse_selection_rejects(answer):
    with pytest.raises(ValueError):
        parse_selection(answer, 4)


@pytest.mark.parametrize("dry_run", [True, False])
def test_memory_store_uses_configured_prefixes(tmp_path, dry_run):
    config = tmp_path / "config.yaml"
    config.write_text(
        "store:\n"
        "  backend: memory\n"
        "prefixes:\n"
        "  post_types:\n"
        "    product: shop\n"
        "  taxonomies:\n"
        "    genre: genres\n"
    )

    ctx = ImportContext(
        config_path=config, log_file=tmp_path / "logs" / "import.log", dry_run=dry_run
    )

    assert ctx.repository.rewrite_prefix(EntityKind.POST, "product") == "shop"
    assert ctx.repository.rewrite_prefix(EntityKind.TERM, "genre") == "genres"
    assert ctx.repository.rewrite_prefix(EntityKind.POST, "page") is None
