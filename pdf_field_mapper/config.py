"""Configuration loader for the field mapper."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

LOG_FORMATS = {"json", "console"}


def _get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is not None:
        value = value.strip()
        if value == "":
            return default
        return value
    return default


def _get_int(key: str, default: int) -> int:
    value = _get_env(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be an integer") from exc


def _get_float(key: str, default: float) -> float:
    value = _get_env(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be a number") from exc


def _get_bool(key: str, default: bool) -> bool:
    value = _get_env(key)
    if value is None:
        return default
    value_lower = value.lower()
    if value_lower in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if value_lower in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise ValueError(f"Environment variable {key} must be a boolean")


@dataclass(slots=True)
class AppConfig:
    log_level: str = "INFO"
    log_format: str = "json"
    ocr_enabled: bool = True
    ocr_language: str = "eng"
    ocr_min_chars: int = 20
    ocr_resolution: int = 108
    line_tolerance: float = 5.0
    preview_rows: int = 10
    export_filename: str = "Mapped_Data.xlsx"


def load_config() -> AppConfig:
    log_level = _get_env("LOG_LEVEL", "INFO").upper()
    log_format = _get_env("LOG_FORMAT", "json").lower()
    if log_format not in LOG_FORMATS:
        raise ValueError(f"LOG_FORMAT must be one of {sorted(LOG_FORMATS)}")

    ocr_enabled = _get_bool("OCR_ENABLED", True)
    ocr_language = _get_env("OCR_LANGUAGE", "eng")
    ocr_min_chars = max(0, _get_int("OCR_MIN_CHARS", 20))
    # 1.5x of the 72 dpi PDF user space
    ocr_resolution = max(36, _get_int("OCR_RESOLUTION", 108))
    line_tolerance = max(0.0, _get_float("LINE_TOLERANCE", 5.0))
    preview_rows = max(0, _get_int("PREVIEW_ROWS", 10))
    export_filename = _get_env("EXPORT_FILENAME", "Mapped_Data.xlsx")

    return AppConfig(
        log_level=log_level,
        log_format=log_format,
        ocr_enabled=ocr_enabled,
        ocr_language=ocr_language,
        ocr_min_chars=ocr_min_chars,
        ocr_resolution=ocr_resolution,
        line_tolerance=line_tolerance,
        preview_rows=preview_rows,
        export_filename=export_filename,
    )
