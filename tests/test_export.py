import io

import pytest
from openpyxl import load_workbook

from pdf_field_mapper.export import DEFAULT_FILENAME, SHEET_NAME, to_csv_bytes, to_xlsx_bytes, write_xlsx
from pdf_field_mapper.models import FieldAssignment

ASSIGNMENTS = [
    FieldAssignment(field="Invoice Number", value="INV-1", strategy="candidate", score=1.0),
    FieldAssignment(field="Customer Name"),
]


def test_xlsx_has_header_row_and_value_row():
    workbook = load_workbook(io.BytesIO(to_xlsx_bytes(ASSIGNMENTS)))
    sheet = workbook[SHEET_NAME]

    assert list(sheet.iter_rows(values_only=True)) == [
        ("Invoice Number", "Customer Name"),
        ("INV-1", "not found"),
    ]


def test_write_xlsx_into_directory(tmp_path):
    path = write_xlsx(ASSIGNMENTS, tmp_path)

    assert path == tmp_path / DEFAULT_FILENAME
    assert load_workbook(path).sheetnames == [SHEET_NAME]


def test_csv_rendering():
    assert to_csv_bytes(ASSIGNMENTS).decode("utf-8").splitlines() == [
        "Invoice Number,Customer Name",
        "INV-1,not found",
    ]


def test_nothing_to_export():
    with pytest.raises(ValueError):
        to_xlsx_bytes([])
