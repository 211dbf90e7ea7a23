"""End-to-end mapping: PDF lines + schema headers -> field assignments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .document import DocumentReader, DocumentText, PdfSource, ProgressCallback
from .extractor import extract_candidates
from .logging import get_logger
from .models import CandidatePair, FieldAssignment
from .resolver import resolve_fields
from .schema import SchemaSource, TabularSchema, read_schema

__all__ = ["MappingReport", "map_document", "map_lines"]

logger = get_logger(__name__)


@dataclass(slots=True)
class MappingReport:
    schema: TabularSchema
    document: Optional[DocumentText] = None
    candidates: List[CandidatePair] = field(default_factory=list)
    assignments: List[FieldAssignment] = field(default_factory=list)

    @property
    def resolved_count(self) -> int:
        return sum(1 for assignment in self.assignments if assignment.found)

    def as_dict(self) -> dict:
        return {
            "headers": list(self.schema.headers),
            "preview": self.schema.preview,
            "row_count": self.schema.row_count,
            "pages": len(self.document.pages) if self.document else 0,
            "candidates": [
                {"label": pair.label_raw, "value": pair.value_raw} for pair in self.candidates
            ],
            "assignments": [assignment.as_dict() for assignment in self.assignments],
        }


def map_lines(schema: TabularSchema, lines: List[str]) -> MappingReport:
    candidates = extract_candidates(lines)
    assignments = resolve_fields(schema.headers, lines, candidates=candidates)
    return MappingReport(schema=schema, candidates=candidates, assignments=assignments)


def map_document(
    document_source: PdfSource,
    schema_source: SchemaSource,
    *,
    reader: Optional[DocumentReader] = None,
    schema_filename: Optional[str] = None,
    preview_rows: int = 10,
    on_page: Optional[ProgressCallback] = None,
) -> MappingReport:
    """Read the PDF and the schema, then resolve every schema header against the PDF text."""
    schema = read_schema(schema_source, filename=schema_filename, preview_rows=preview_rows)
    document = (reader or DocumentReader()).read(document_source, on_page=on_page)
    if not document.has_text:
        logger.warning("document_without_text", pages=len(document.pages))

    report = map_lines(schema, document.lines())
    report.document = document
    logger.info(
        "document_mapped",
        fields=len(report.assignments),
        resolved=report.resolved_count,
        candidates=len(report.candidates),
    )
    return report
