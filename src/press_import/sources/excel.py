"""Spreadsheet source: xlsx, xls and csv files read with pandas."""

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import pandas as pd

from press_import.importers.base import Importer
from press_import.sources.base import SourceAdapter
from press_import.utils.logging import get_logger

logger = get_logger(__name__)


class ExcelAdapter(SourceAdapter):
    """One row per spreadsheet line; the first line holds the headers.

    Every cell is read as text so ids, slugs and zip-code like values keep
    their exact spelling. Empty cells become empty strings.
    """

    SOURCE_NAME = "excel"
    SUPPORTED_EXTENSIONS = ("xlsx", "xls", "csv")

    def __init__(self, importer: Importer, sheet_name: str | int = 0):
        super().__init__(importer)
        self.sheet_name = sheet_name

    def read_rows(self, path: Path) -> Iterable[Mapping[str, Any]]:
        df = self.read_frame(path)
        logger.debug("spreadsheet_read", file=str(path), rows=len(df), columns=list(df.columns))
        return df.to_dict("records")

    def read_frame(self, path: Path) -> pd.DataFrame:
        if path.suffix.lower() == ".csv":
            return pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")

        # xls files need pandas' xlrd engine
        engine = "openpyxl" if path.suffix.lower() == ".xlsx" else None
        return pd.read_excel(
            path,
            sheet_name=self.sheet_name,
            dtype=str,
            keep_default_na=False,
            engine=engine,
        )
