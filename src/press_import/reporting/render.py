"""Rich rendering of import logs."""

from rich.console import Console
from rich.table import Table

from press_import.core.status import STATUS_LABELS, SaveStatus
from press_import.reporting.colors import STATUS_COLORS, ImportColors
from press_import.reporting.import_log import SUMMARY_HEADERS, ImportLog

_LABEL_COLORS = {STATUS_LABELS[status]: color for status, color in STATUS_COLORS.items()}


def build_summary_table(log: ImportLog) -> Table:
    """Per-file status counts with a totals footer."""
    table = Table(
        title="Import Summary",
        border_style=ImportColors.BORDER,
        header_style=ImportColors.HEADER,
        show_footer=len(log) > 1,
    )

    totals = log.totals().as_row()
    for index, header in enumerate(SUMMARY_HEADERS):
        table.add_column(
            header,
            footer=str(totals[index]),
            justify="left" if index == 0 else "right",
        )

    for summary in log.summary():
        row = [str(value) for value in summary.as_row()]
        if summary.error:
            row[0] = f"[{ImportColors.ERROR}]{summary.file} (aborted)[/{ImportColors.ERROR}]"
        table.add_row(*row)

    return table


def build_details_table(log: ImportLog) -> Table:
    """One line per imported row, status colored."""
    headers, rows = log.details()

    table = Table(
        title="Import Details",
        border_style=ImportColors.BORDER,
        header_style=ImportColors.HEADER,
    )
    for header in headers:
        table.add_column(header)

    for row in rows:
        cells = []
        for value in row:
            color = _LABEL_COLORS.get(value) if isinstance(value, str) else None
            cells.append(f"[{color}]{value}[/{color}]" if color else str(value))
        table.add_row(*cells)

    return table


def render_import_log(log: ImportLog, console: Console | None = None, details: bool = True) -> None:
    """Print the summary table, file errors and optionally the detail table."""
    console = console or Console()

    if details and any(log.files.values()):
        console.print(build_details_table(log))

    console.print(build_summary_table(log))

    for file, message in log.errors.items():
        console.print(f"[{ImportColors.ERROR}]✗[/{ImportColors.ERROR}] {file}: {message}")

    totals = log.totals()
    color = ImportColors.WARNING if log.has_failures else ImportColors.SUCCESS
    console.print(
        f"[{color}]{totals.total} rows: "
        f"{totals.created} {SaveStatus.CREATED.label.lower()}, "
        f"{totals.updated} {SaveStatus.UPDATED.label.lower()}, "
        f"{totals.noop} unchanged, "
        f"{totals.skipped} {SaveStatus.SKIPPED.label.lower()}, "
        f"{totals.failed} {SaveStatus.FAILED.label.lower()}[/{color}]"
    )
