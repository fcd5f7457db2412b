"""Import logs and their console rendering."""

from press_import.reporting.import_log import SUMMARY_HEADERS, FileSummary, ImportLog
from press_import.reporting.render import (
    build_details_table,
    build_summary_table,
    render_import_log,
)

__all__ = [
    "ImportLog",
    "FileSummary",
    "SUMMARY_HEADERS",
    "build_summary_table",
    "build_details_table",
    "render_import_log",
]
