"""Read the expected field names (and a short preview) from a CSV or Excel sheet."""

from __future__ import annotations

import csv
import io
import math
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, List, Optional, Sequence, Union

import pandas as pd

from .logging import get_logger

__all__ = ["SchemaReadError", "TabularSchema", "read_schema", "build_preview"]

logger = get_logger(__name__)

SchemaSource = Union[str, Path, IO[bytes]]

CSV_SUFFIXES = {".csv"}
EXCEL_SUFFIXES = {".xlsx"}


class SchemaReadError(ValueError):
    """Raised for unsupported, unreadable or empty schema files."""


@dataclass(slots=True)
class TabularSchema:
    headers: List[str]
    preview: List[List[str]] = field(default_factory=list)
    row_count: int = 0

    @property
    def preview_headers(self) -> List[str]:
        return self.preview[0] if self.preview else []

    @property
    def preview_rows(self) -> List[List[str]]:
        return self.preview[1:]


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def _is_blank_row(row: Sequence[Any]) -> bool:
    return all(_cell_text(cell) == "" for cell in row)


def build_preview(rows: List[List[str]], preview_rows: int = 10) -> List[List[str]]:
    """Header row plus up to ``preview_rows`` data rows, then a "... and N more rows" marker."""
    if not rows:
        return []
    limit = preview_rows + 1
    preview = [list(row) for row in rows[:limit]]
    if len(rows) > limit:
        preview.append([f"... and {len(rows) - limit} more rows"])
    return preview


def _read_csv_rows(source: SchemaSource) -> List[List[str]]:
    if isinstance(source, (str, Path)):
        with open(source, "r", encoding="utf-8-sig", newline="") as handle:
            return [list(row) for row in csv.reader(handle)]
    wrapper = io.TextIOWrapper(source, encoding="utf-8-sig", newline="")
    try:
        return [list(row) for row in csv.reader(wrapper)]
    finally:
        wrapper.detach()


def _read_excel_rows(source: SchemaSource) -> List[List[Any]]:
    frame = pd.read_excel(source, sheet_name=0, header=None, dtype=object)
    return frame.values.tolist()


def read_schema(
    source: SchemaSource,
    filename: Optional[str] = None,
    preview_rows: int = 10,
) -> TabularSchema:
    """Load headers from the first non-blank row of ``source``.

    ``filename`` supplies the extension when ``source`` is a stream.
    """
    name = filename or (str(source) if isinstance(source, (str, Path)) else "")
    suffix = Path(name).suffix.lower()

    try:
        if suffix in CSV_SUFFIXES:
            raw_rows = _read_csv_rows(source)
        elif suffix in EXCEL_SUFFIXES:
            raw_rows = _read_excel_rows(source)
        else:
            raise SchemaReadError(f"Unsupported file type: {suffix or name or 'unknown'}")
    except SchemaReadError:
        raise
    except (OSError, ValueError, ImportError, csv.Error, zipfile.BadZipFile) as exc:
        raise SchemaReadError(f"Error processing file: {exc}") from exc

    rows = [[_cell_text(cell) for cell in row] for row in raw_rows if not _is_blank_row(row)]
    if not rows:
        raise SchemaReadError(f"{name or 'Schema'} is empty or invalid")

    schema = TabularSchema(
        headers=rows[0],
        preview=build_preview(rows, preview_rows),
        row_count=len(rows) - 1,
    )
    logger.info("schema_read", source=name, headers=len(schema.headers), rows=schema.row_count)
    return schema
