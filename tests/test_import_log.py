from rich.console import Console

from press_import.core.status import SaveStatus
from press_import.reporting.import_log import SUMMARY_HEADERS, ImportLog
from press_import.reporting.render import render_import_log


def _log() -> ImportLog:
    log = ImportLog()
    log.add(
        "pages.xlsx",
        [
            {"id": 1, "path": "about", "parent": "N/A", "status": SaveStatus.CREATED},
            {"id": 2, "path": "about/team", "parent": 1, "status": SaveStatus.CREATED},
            {"id": 3, "path": "contact", "parent": "N/A", "status": SaveStatus.NOOP},
            {"id": "N/A", "path": "N/A", "parent": "N/A", "status": SaveStatus.SKIPPED},
        ],
    )
    log.add(
        "users.csv",
        [
            {"id": 7, "login": "jdoe", "status": SaveStatus.UPDATED},
            {"id": "N/A", "login": "ghost", "status": SaveStatus.FAILED},
        ],
    )
    return log


def test_summary_counts_per_file_in_processing_order():
    summaries = _log().summary()

    assert [s.file for s in summaries] == ["pages.xlsx", "users.csv"]
    pages, users = summaries
    assert (pages.total, pages.created, pages.noop, pages.skipped) == (4, 2, 1, 1)
    assert (users.total, users.updated, users.failed) == (2, 1, 1)


def test_summary_table_headers_and_rows():
    headers, rows = _log().summary_table()

    assert headers == SUMMARY_HEADERS
    assert headers == ["File", "Total", "Created", "Updated", "Skipped", "Failed", "No Change"]
    assert rows[0] == ["pages.xlsx", 4, 2, 0, 1, 0, 1]


def test_totals_across_files():
    totals = _log().totals()

    assert totals.total == 6
    assert totals.created == 2
    assert totals.failed == 1


def test_details_use_union_of_keys_and_status_labels():
    headers, rows = _log().details()

    assert headers == ["Id", "Path", "Parent", "Status", "Login"]
    assert rows[2] == [3, "contact", "N/A", "NO CHANGE", ""]
    assert rows[4] == [7, "", "", "UPDATED", "jdoe"]


def test_add_replaces_entries_of_same_file():
    log = _log()
    log.add("users.csv", [{"id": 7, "login": "jdoe", "status": SaveStatus.NOOP}])

    assert len(log) == 2
    assert log.summary()[1].noop == 1
    assert log.summary()[1].total == 1


def test_add_clears_earlier_error_of_same_file():
    log = ImportLog()
    log.add_error("pages.csv", "unreadable row")
    log.add("pages.csv", [{"id": 1, "path": "a", "parent": "N/A", "status": SaveStatus.CREATED}])

    assert log.errors == {}
    assert log.summary()[0].error is None
    assert not log.has_failures


def test_file_errors_keep_logged_rows():
    log = ImportLog()
    log.add("broken.csv", [{"id": 1, "path": "a", "parent": "N/A", "status": SaveStatus.CREATED}])
    log.add_error("broken.csv", "unreadable row")

    summary = log.summary()[0]
    assert summary.total == 1
    assert summary.error == "unreadable row"
    assert log.has_failures


def test_render_prints_both_tables():
    console = Console(record=True, width=120)

    render_import_log(_log(), console=console)

    output = console.export_text()
    assert "Import Details" in output
    assert "Import Summary" in output
    assert "NO CHANGE" in output
    assert "6 rows" in output
