"""Core package for the PDF-to-schema field mapper."""

__all__ = [
    "config",
    "models",
    "normalizer",
    "scorer",
    "extractor",
    "resolver",
    "document",
    "schema",
    "export",
    "pipeline",
    "runtime",
    "app",
    "cli",
]
