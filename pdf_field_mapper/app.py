"""FastAPI application exposing the field mapper."""

from __future__ import annotations

import io
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel, model_validator

from .document import DocumentReadError
from .export import to_xlsx_bytes
from .extractor import extract_candidates
from .logging import get_logger
from .pipeline import MappingReport, map_document
from .resolver import resolve_fields, split_lines
from .runtime import Runtime, build_runtime
from .schema import SchemaReadError

logger = get_logger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class DocumentLines(BaseModel):
    """Document content given either as ready-made lines or as one text blob."""

    lines: Optional[List[str]] = None
    text: Optional[str] = None

    @model_validator(mode="after")
    def _require_content(self) -> "DocumentLines":
        if self.lines is None and self.text is None:
            raise ValueError("either 'lines' or 'text' is required")
        return self

    def raw_lines(self) -> List[str]:
        if self.lines is not None:
            return self.lines
        return split_lines(self.text)


class ResolveRequest(DocumentLines):
    fields: List[str]


class Assignment(BaseModel):
    field: str
    value: str
    strategy: str
    score: float


class ResolveResponse(BaseModel):
    assignments: List[Assignment]


class Candidate(BaseModel):
    label: str
    normalized: str
    value: str


class CandidatesResponse(BaseModel):
    candidates: List[Candidate]


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.runtime = build_runtime()
    yield


def get_runtime(request: Request) -> Runtime:
    runtime: Runtime = request.app.state.runtime
    return runtime


def _map_uploads(document: UploadFile, schema: UploadFile, runtime: Runtime) -> MappingReport:
    document_bytes = document.file.read()
    schema_bytes = schema.file.read()
    try:
        return map_document(
            io.BytesIO(document_bytes),
            io.BytesIO(schema_bytes),
            reader=runtime.reader,
            schema_filename=schema.filename,
            preview_rows=runtime.config.preview_rows,
        )
    except SchemaReadError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except DocumentReadError as exc:
        raise HTTPException(status_code=400, detail=f"Error processing PDF: {exc}") from exc


def create_app() -> FastAPI:
    api = FastAPI(title="PDF Field Mapper", version="1.0.0", lifespan=lifespan)

    @api.get("/health")
    def health(runtime: Runtime = Depends(get_runtime)) -> dict:
        return {
            "status": "healthy",
            "ocr_enabled": runtime.config.ocr_enabled,
            "ocr_language": runtime.config.ocr_language,
        }

    @api.post("/resolve", response_model=ResolveResponse)
    def resolve(payload: ResolveRequest) -> ResolveResponse:
        assignments = resolve_fields(payload.fields, payload.raw_lines())
        return ResolveResponse(assignments=[Assignment(**a.as_dict()) for a in assignments])

    @api.post("/candidates", response_model=CandidatesResponse)
    def candidates(payload: DocumentLines) -> CandidatesResponse:
        pairs = extract_candidates(payload.raw_lines())
        return CandidatesResponse(
            candidates=[
                Candidate(label=p.label_raw, normalized=p.label_normalized, value=p.value_raw)
                for p in pairs
            ]
        )

    @api.post("/map")
    def map_files(
        document: UploadFile = File(..., description="PDF document"),
        schema: UploadFile = File(..., description="CSV or Excel file whose header row lists the fields"),
        runtime: Runtime = Depends(get_runtime),
    ) -> dict:
        report = _map_uploads(document, schema, runtime)
        return report.as_dict()

    @api.post("/map/export")
    def export_mapping(
        document: UploadFile = File(..., description="PDF document"),
        schema: UploadFile = File(..., description="CSV or Excel file whose header row lists the fields"),
        runtime: Runtime = Depends(get_runtime),
    ) -> Response:
        report = _map_uploads(document, schema, runtime)
        if not report.assignments:
            raise HTTPException(status_code=400, detail="Schema has no columns to map")
        filename = runtime.config.export_filename
        return Response(
            content=to_xlsx_bytes(report.assignments),
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return api


app = create_app()
