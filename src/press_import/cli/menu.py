"""Interactive file selection."""

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from press_import.reporting.colors import ImportColors
from press_import.sources.discovery import DiscoveredFile, format_size


def parse_selection(answer: str, count: int) -> list[int]:
    """Turn ``"1,3-5"`` or ``"all"`` into zero-based indexes.

    Raises:
        ValueError: If the answer is not a valid selection
    """
    answer = answer.strip().lower()
    if answer in ("all", "*"):
        return list(range(count))

    indexes: list[int] = []
    for part in answer.replace(" ", "").split(","):
        if not part:
            continue
        if "-" in part:
            start, end = (int(value) for value in part.split("-", 1))
        else:
            start = end = int(part)
        if start < 1 or end > count or start > end:
            raise ValueError(f"Selection out of range: {part}")
        for number in range(start, end + 1):
            if number - 1 not in indexes:
                indexes.append(number - 1)

    if not indexes:
        raise ValueError("Select at least one file")
    return indexes


def select_files(
    files: list[DiscoveredFile], console: Console | None = None
) -> list[DiscoveredFile]:
    """Let the user pick the files to import."""
    console = console or Console()

    table = Table(title="Select files to import", border_style=ImportColors.BORDER)
    table.add_column("#", justify="right")
    table.add_column("File")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    for number, file in enumerate(files, start=1):
        table.add_row(
            str(number),
            file.name,
            format_size(file.size),
            file.modified.strftime("%d/%m/%Y %H:%M"),
        )
    console.print(table)

    while True:
        answer = Prompt.ask("Files to import (e.g. 1,3-5)", default="all", console=console)
        try:
            indexes = parse_selection(answer, len(files))
        except ValueError as e:
            console.print(f"[{ImportColors.ERROR}]{e}[/{ImportColors.ERROR}]")
            continue
        return [files[index] for index in sorted(indexes)]
