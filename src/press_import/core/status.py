"""Outcome of a single row reconciliation."""

from enum import IntEnum


class SaveStatus(IntEnum):
    """Exactly one status is produced per save attempt."""

    CREATED = 0
    UPDATED = 1
    SKIPPED = 2
    FAILED = 3
    NOOP = 4

    @property
    def label(self) -> str:
        """Human-readable label used in reports."""
        return STATUS_LABELS[self]


STATUS_LABELS = {
    SaveStatus.CREATED: "CREATED",
    SaveStatus.UPDATED: "UPDATED",
    SaveStatus.SKIPPED: "SKIPPED",
    SaveStatus.FAILED: "FAILED",
    SaveStatus.NOOP: "NO CHANGE",
}
