import inspect
import io

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from pdf_field_mapper.app import create_app
from pdf_field_mapper.document import DocumentReadError, DocumentReader, DocumentText, PageText

DOCUMENT_TEXT = "Invoice Number: INV-2024-001\nTotal Amount: 523.10\nSignature:\nJohn Smith"


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setenv("OCR_ENABLED", "false")
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture()
def stub_reader(monkeypatch):
    def read(self, source, on_page=None):
        return DocumentText(pages=[PageText(number=1, text=DOCUMENT_TEXT)])

    monkeypatch.setattr(DocumentReader, "read", read)


def _uploads(schema_name="columns.csv", schema_body=b"Invoice Number,Customer Name,Signature\n"):
    return {
        "document": ("invoice.pdf", b"%PDF-1.4 stub", "application/pdf"),
        "schema": (schema_name, schema_body, "text/csv"),
    }


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "ocr_enabled": False, "ocr_language": "eng"}


def test_resolve_with_lines(client):
    response = client.post(
        "/resolve",
        json={
            "fields": ["Invoice Number", "Total Amount", "Customer Name"],
            "lines": ["Invoice Number: INV-2024-001", "Total Amount: 523.10"],
        },
    )

    assert response.status_code == 200
    assignments = response.json()["assignments"]
    assert [(a["field"], a["value"]) for a in assignments] == [
        ("Invoice Number", "INV-2024-001"),
        ("Total Amount", "523.10"),
        ("Customer Name", "not found"),
    ]
    assert assignments[0]["strategy"] == "candidate"


def test_resolve_with_text(client):
    response = client.post("/resolve", json={"fields": ["Signature"], "text": "Signature:\r\nJohn Smith"})

    assert response.status_code == 200
    assert response.json()["assignments"][0]["value"] == "John Smith"


def test_resolve_requires_document_content(client):
    response = client.post("/resolve", json={"fields": ["Name"]})

    assert response.status_code == 422


def test_candidates(client):
    response = client.post("/candidates", json={"lines": ["Name          John Smith", "Name          John Smith"]})

    assert response.status_code == 200
    assert response.json() == {
        "candidates": [{"label": "Name", "normalized": "name", "value": "John Smith"}]
    }


def test_map_uploads(client, stub_reader):
    response = client.post("/map", files=_uploads())

    assert response.status_code == 200
    payload = response.json()
    assert payload["headers"] == ["Invoice Number", "Customer Name", "Signature"]
    assert [(a["field"], a["value"]) for a in payload["assignments"]] == [
        ("Invoice Number", "INV-2024-001"),
        ("Customer Name", "not found"),
        ("Signature", "John Smith"),
    ]


def test_map_rejects_unsupported_schema(client, stub_reader):
    response = client.post("/map", files=_uploads(schema_name="columns.json", schema_body=b"{}"))

    assert response.status_code == 400
    assert "Unsupported" in response.json()["detail"]


def test_map_reports_unreadable_pdf(client, monkeypatch):
    def read(self, source, on_page=None):
        raise DocumentReadError("Unable to open PDF: bad header")

    monkeypatch.setattr(DocumentReader, "read", read)

    response = client.post("/map", files=_uploads())

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Error processing PDF")


def test_map_export_returns_workbook(client, stub_reader):
    response = client.post("/map/export", files=_uploads())

    assert response.status_code == 200
    assert "Mapped_Data.xlsx" in response.headers["content-disposition"]
    sheet = load_workbook(io.BytesIO(response.content))["Mapped Data"]
    assert list(sheet.iter_rows(values_only=True)) == [
        ("Invoice Number", "Customer Name", "Signature"),
        ("INV-2024-001", "not found", "John Smith"),
    ]


def test_upload_routes_run_in_the_threadpool():
    endpoints = {route.path: route.endpoint for route in create_app().routes if hasattr(route, "endpoint")}

    assert not inspect.iscoroutinefunction(endpoints["/map"])
    assert not inspect.iscoroutinefunction(endpoints["/map/export"])
