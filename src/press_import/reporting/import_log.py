"""Per-file record of import outcomes.

The log is owned by the pipeline and filled by the source adapter, one entry
list per processed file, in processing order.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from press_import.core.status import STATUS_LABELS, SaveStatus

SUMMARY_HEADERS = ["File", "Total", "Created", "Updated", "Skipped", "Failed", "No Change"]


@dataclass
class FileSummary:
    """Status counts of one file."""

    file: str
    total: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    noop: int = 0
    error: str | None = None

    def count(self, status: SaveStatus) -> None:
        self.total += 1
        attribute = status.name.lower()
        setattr(self, attribute, getattr(self, attribute) + 1)

    def as_row(self) -> list[Any]:
        return [
            self.file,
            self.total,
            self.created,
            self.updated,
            self.skipped,
            self.failed,
            self.noop,
        ]


@dataclass
class ImportLog:
    """Ordered mapping of file path to its log entries."""

    files: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    def add(self, file: str, entries: Iterable[Mapping[str, Any]]) -> None:
        """Store the entries of ``file``, replacing any earlier entries and error."""
        self.files[str(file)] = [dict(entry) for entry in entries]
        self.errors.pop(str(file), None)

    def add_error(self, file: str, message: str) -> None:
        """Record that ``file`` was aborted; its logged entries are kept."""
        file = str(file)
        self.files.setdefault(file, [])
        self.errors[file] = message

    def summary(self) -> list[FileSummary]:
        """Status counts per file, in processing order."""
        summaries = []
        for file, entries in self.files.items():
            summary = FileSummary(file=file, error=self.errors.get(file))
            for entry in entries:
                summary.count(SaveStatus(entry["status"]))
            summaries.append(summary)
        return summaries

    def summary_table(self) -> tuple[list[str], list[list[Any]]]:
        return list(SUMMARY_HEADERS), [summary.as_row() for summary in self.summary()]

    def totals(self) -> FileSummary:
        """Grand totals across every file."""
        totals = FileSummary(file="Total")
        for summary in self.summary():
            totals.total += summary.total
            totals.created += summary.created
            totals.updated += summary.updated
            totals.skipped += summary.skipped
            totals.failed += summary.failed
            totals.noop += summary.noop
        return totals

    def details(self) -> tuple[list[str], list[list[Any]]]:
        """Flattened entries of every file.

        Headers are the union of entry keys in first-seen order, title cased.
        Statuses are rendered as labels; missing values are blank.
        """
        entries = [entry for file_entries in self.files.values() for entry in file_entries]

        keys: list[str] = []
        for entry in entries:
            for key in entry:
                if key not in keys:
                    keys.append(key)

        rows = []
        for entry in entries:
            row = []
            for key in keys:
                value = entry.get(key, "")
                if key == "status" and value != "":
                    value = STATUS_LABELS[SaveStatus(value)]
                row.append("" if value is None else value)
            rows.append(row)

        return [key.replace("_", " ").title() for key in keys], rows

    @property
    def has_failures(self) -> bool:
        return bool(self.errors) or self.totals().failed > 0

    def __len__(self) -> int:
        return len(self.files)
