"""Turn a PDF into the top-to-bottom text lines the resolver consumes.

Native text comes from pdfplumber. A page whose native text is too short
(scans, image-only pages) is rendered and passed through Tesseract instead.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Callable, Dict, List, Optional, Union

import pdfplumber
import pytesseract

from .logging import get_logger
from .normalizer import clean_line
from .resolver import split_lines

__all__ = ["DocumentReadError", "DocumentReader", "DocumentText", "PageText", "clean_page_text", "words_to_text"]

logger = get_logger(__name__)

PdfSource = Union[str, Path, IO[bytes]]
ProgressCallback = Callable[[int, int], None]

_SPACE_BEFORE_BREAK = re.compile(r"\s+\n")


class DocumentReadError(RuntimeError):
    """Raised when a PDF cannot be opened or parsed."""


@dataclass(slots=True)
class PageText:
    number: int
    text: str
    ocr_used: bool = False


@dataclass(slots=True)
class DocumentText:
    pages: List[PageText] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(page.text + "\n\n" for page in self.pages)

    @property
    def has_text(self) -> bool:
        return any(page.text.strip() for page in self.pages)

    def lines(self) -> List[str]:
        return split_lines(self.text)


def words_to_text(words: List[Dict[str, Any]], line_tolerance: float = 5.0) -> str:
    """Join words in reading order, breaking the line when ``top`` jumps by more than the tolerance."""
    parts: List[str] = []
    last_top: Optional[float] = None
    for word in words:
        top = float(word["top"])
        if last_top is not None and abs(top - last_top) > line_tolerance:
            parts.append("\n")
        parts.append(str(word["text"]) + " ")
        last_top = top
    return "".join(parts)


def clean_page_text(text: str) -> str:
    """Apply the dash/colon/NBSP clean-up and drop whitespace left at line ends."""
    return _SPACE_BEFORE_BREAK.sub("\n", clean_line(text)).strip()


class DocumentReader:
    def __init__(
        self,
        *,
        ocr_enabled: bool = True,
        ocr_language: str = "eng",
        ocr_min_chars: int = 20,
        ocr_resolution: int = 108,
        line_tolerance: float = 5.0,
    ) -> None:
        self.ocr_enabled = ocr_enabled
        self.ocr_language = ocr_language
        self.ocr_min_chars = ocr_min_chars
        self.ocr_resolution = ocr_resolution
        self.line_tolerance = line_tolerance

    def read(self, source: PdfSource, on_page: Optional[ProgressCallback] = None) -> DocumentText:
        """Read every page of ``source``; ``on_page(done, total)`` is called after each page."""
        try:
            pdf = pdfplumber.open(source)
        except Exception as exc:
            raise DocumentReadError(f"Unable to open PDF: {exc}") from exc

        document = DocumentText()
        with pdf:
            try:
                pages = list(pdf.pages)
            except Exception as exc:
                raise DocumentReadError(f"Unable to read page tree: {exc}") from exc

            total = len(pages)
            for index, page in enumerate(pages, start=1):
                try:
                    document.pages.append(self._read_page(page, index))
                except DocumentReadError:
                    raise
                except Exception as exc:
                    raise DocumentReadError(f"Unable to read page {index}: {exc}") from exc
                if on_page is not None:
                    on_page(index, total)

        logger.info(
            "document_read",
            pages=len(document.pages),
            ocr_pages=sum(1 for page in document.pages if page.ocr_used),
        )
        return document

    def _read_page(self, page: Any, number: int) -> PageText:
        words = page.extract_words(use_text_flow=True, keep_blank_chars=False)
        text = words_to_text(words, self.line_tolerance)
        ocr_used = False

        if self.ocr_enabled and len(text.strip()) < self.ocr_min_chars:
            ocr_text = self._ocr_page(page, number)
            if ocr_text is not None:
                text = ocr_text
                ocr_used = True

        cleaned = clean_page_text(text)
        logger.debug("page_read", page=number, chars=len(cleaned), ocr=ocr_used)
        return PageText(number=number, text=cleaned, ocr_used=ocr_used)

    def _ocr_page(self, page: Any, number: int) -> Optional[str]:
        try:
            image = page.to_image(resolution=self.ocr_resolution).original
            return pytesseract.image_to_string(image, lang=self.ocr_language) or ""
        except (pytesseract.TesseractError, OSError, RuntimeError) as exc:
            logger.warning("ocr_failed", page=number, error=str(exc))
            return None
