"""Text content source: json, markdown and plain text files.

A JSON file holds one object or a list of objects, one row each. Markdown
and text files are one row: an optional YAML front matter block supplies the
columns and the remaining text becomes ``body``. When the row lacks the
importer's key column it defaults to the file name without extension.
"""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from press_import.client.exceptions import SourceAdapterError
from press_import.importers.base import is_blank
from press_import.sources.base import SourceAdapter

FRONT_MATTER_DELIMITER = "---"


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split ``text`` into its YAML front matter and body.

    Raises:
        yaml.YAMLError: If the front matter is not valid YAML
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].strip() == FRONT_MATTER_DELIMITER:
            front_matter = yaml.safe_load("".join(lines[1:index])) or {}
            if not isinstance(front_matter, dict):
                raise ValueError("Front matter must be a mapping")
            return front_matter, "".join(lines[index + 1 :])

    # Unterminated block: treat everything as body
    return {}, text


class ContentAdapter(SourceAdapter):
    """Rows read from text based content files."""

    SOURCE_NAME = "content"
    SUPPORTED_EXTENSIONS = ("txt", "md", "json")

    def read_rows(self, path: Path) -> Iterable[Mapping[str, Any]]:
        text = path.read_text(encoding="utf-8")

        if path.suffix.lower() == ".json":
            rows = self.read_json(text, path)
        else:
            front_matter, body = split_front_matter(text)
            row = dict(front_matter)
            if body.strip():
                row.setdefault("body", body.strip())
            rows = [row]

        if path.suffix.lower() != ".json" or len(rows) == 1:
            key_field = self.importer.KEY_FIELD
            for row in rows:
                if is_blank(row.get(key_field)):
                    row[key_field] = path.stem

        return rows

    @staticmethod
    def read_json(text: str, path: Path) -> list[dict[str, Any]]:
        data = json.loads(text)
        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise SourceAdapterError("JSON content must be an object or a list of objects", path)
        return data
