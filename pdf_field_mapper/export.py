"""Render resolved assignments as a one-row spreadsheet."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import List, Sequence, Tuple, Union

from openpyxl import Workbook

from .logging import get_logger
from .models import FieldAssignment

__all__ = ["SHEET_NAME", "DEFAULT_FILENAME", "to_xlsx_bytes", "to_csv_bytes", "write_xlsx"]

logger = get_logger(__name__)

SHEET_NAME = "Mapped Data"
DEFAULT_FILENAME = "Mapped_Data.xlsx"


def _header_and_values(assignments: Sequence[FieldAssignment]) -> Tuple[List[str], List[str]]:
    if not assignments:
        raise ValueError("No mapped data to export")
    return [a.field for a in assignments], [a.value for a in assignments]


def _build_workbook(assignments: Sequence[FieldAssignment]) -> Workbook:
    headers, values = _header_and_values(assignments)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_NAME
    sheet.append(headers)
    sheet.append(values)
    return workbook


def to_xlsx_bytes(assignments: Sequence[FieldAssignment]) -> bytes:
    buffer = io.BytesIO()
    _build_workbook(assignments).save(buffer)
    return buffer.getvalue()


def write_xlsx(assignments: Sequence[FieldAssignment], destination: Union[str, Path]) -> Path:
    path = Path(destination)
    if path.is_dir():
        path = path / DEFAULT_FILENAME
    _build_workbook(assignments).save(path)
    logger.info("workbook_written", path=str(path), fields=len(assignments))
    return path


def to_csv_bytes(assignments: Sequence[FieldAssignment]) -> bytes:
    headers, values = _header_and_values(assignments)
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(headers)
    writer.writerow(values)
    return buffer.getvalue().encode("utf-8")
