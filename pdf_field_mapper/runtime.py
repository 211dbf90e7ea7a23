"""Runtime wiring for CLI and service entrypoints."""

from __future__ import annotations

from dataclasses import dataclass

from .config import AppConfig, load_config
from .document import DocumentReader
from .logging import configure_logging


@dataclass(slots=True)
class Runtime:
    config: AppConfig
    reader: DocumentReader


def build_runtime(config: AppConfig | None = None) -> Runtime:
    cfg = config or load_config()
    configure_logging(cfg.log_level, cfg.log_format)

    reader = DocumentReader(
        ocr_enabled=cfg.ocr_enabled,
        ocr_language=cfg.ocr_language,
        ocr_min_chars=cfg.ocr_min_chars,
        ocr_resolution=cfg.ocr_resolution,
        line_tolerance=cfg.line_tolerance,
    )

    return Runtime(config=cfg, reader=reader)
