"""Booktranslator pipeline package.

This package contains book-level orchestration, chapter-level translation, and
stage telemetry helpers.
"""

from .chapter_translator import ChapterTranslator
from .orchestrator import BookTranslatorPipeline

__all__ = ["BookTranslatorPipeline", "ChapterTranslator"]
