"""Command-line interface for the field mapper."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer

from .document import DocumentReadError
from .extractor import extract_candidates
from .export import write_xlsx
from .logging import get_logger
from .models import FieldAssignment
from .pipeline import map_document
from .resolver import resolve_fields, split_lines
from .runtime import build_runtime
from .schema import SchemaReadError

logger = get_logger(__name__)

app = typer.Typer(add_completion=False, help="Map PDF text onto spreadsheet columns")


def _echo_assignments(assignments: List[FieldAssignment], as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps([a.as_dict() for a in assignments], ensure_ascii=False, indent=2))
        return
    width = max((len(a.field) for a in assignments), default=0)
    for assignment in assignments:
        typer.echo(f"{assignment.field.ljust(width)}  {assignment.value}")


def _read_text_lines(path: Path) -> List[str]:
    try:
        return split_lines(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise typer.BadParameter(f"Cannot read {path}: {exc}") from exc


@app.command("map")
def map_command(
    pdf: Path = typer.Option(..., "--pdf", exists=True, dir_okay=False, help="Source PDF document"),
    schema: Path = typer.Option(..., "--schema", exists=True, dir_okay=False, help="CSV/XLSX whose header row lists the fields"),
    out: Optional[Path] = typer.Option(None, "--out", help="Write the mapped row to this .xlsx file"),
    as_json: bool = typer.Option(False, "--json", help="Print assignments as JSON"),
) -> None:
    runtime = build_runtime()

    def on_page(done: int, total: int) -> None:
        logger.info("pdf_progress", page=done, pages=total, percent=round(done / total * 100))

    try:
        report = map_document(
            pdf,
            schema,
            reader=runtime.reader,
            preview_rows=runtime.config.preview_rows,
            on_page=on_page,
        )
    except (DocumentReadError, SchemaReadError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    if not report.assignments:
        typer.echo("Schema has no columns to map", err=True)
        raise typer.Exit(code=1)

    _echo_assignments(report.assignments, as_json)
    if out is not None:
        if out.is_dir():
            out = out / runtime.config.export_filename
        path = write_xlsx(report.assignments, out)
        typer.echo(f"Workbook written to {path}", err=True)


@app.command("candidates")
def candidates_command(
    pdf: Optional[Path] = typer.Option(None, "--pdf", exists=True, dir_okay=False, help="Read lines from a PDF"),
    text: Optional[Path] = typer.Option(None, "--text", exists=True, dir_okay=False, help="Read lines from a UTF-8 text file"),
) -> None:
    """Show the label/value pairs mined from a document."""
    if (pdf is None) == (text is None):
        raise typer.BadParameter("Pass exactly one of --pdf or --text")

    runtime = build_runtime()
    if pdf is not None:
        try:
            lines = runtime.reader.read(pdf).lines()
        except DocumentReadError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1) from exc
    else:
        lines = _read_text_lines(text)

    for pair in extract_candidates(lines):
        typer.echo(json.dumps({"label": pair.label_raw, "normalized": pair.label_normalized, "value": pair.value_raw}, ensure_ascii=False))


@app.command("resolve")
def resolve_command(
    text: Path = typer.Option(..., "--text", exists=True, dir_okay=False, help="UTF-8 text file with the document content"),
    fields: List[str] = typer.Option(..., "--field", "-f", help="Expected field name (repeatable)"),
    as_json: bool = typer.Option(False, "--json", help="Print assignments as JSON"),
) -> None:
    build_runtime()
    assignments = resolve_fields(fields, _read_text_lines(text))
    _echo_assignments(assignments, as_json)


@app.command("service")
def service_command(
    host: str = typer.Option("0.0.0.0", "--host", help="Service bind host"),
    port: int = typer.Option(8000, "--port", help="Service port"),
) -> None:
    import uvicorn

    uvicorn.run(
        "pdf_field_mapper.app:create_app",
        host=host,
        port=port,
        factory=True,
        log_level="info",
    )


def main():
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
