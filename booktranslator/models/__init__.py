"""Shared typed data models for Booktranslator.

This package contains dataclasses used across pipeline modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import (
    Chapter,
    ChapterTranslation,
    Chunk,
    ExtractedDocument,
    RunReport,
    TranslationRequest,
)

__all__ = [
    "Chapter",
    "ChapterTranslation",
    "Chunk",
    "ExtractedDocument",
    "RunReport",
    "TranslationRequest",
]
