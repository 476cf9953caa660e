"""Input/output stage components for Booktranslator.

This package contains PDF extraction, chapter segmentation, and output storage
used by the pipeline.
"""

from .chapter_splitter import ChapterSegmenter, SizeBasedSectionSplitter
from .pdf_text_extractor import PdfExtractionError, PdfTextExtractor
from .storage import ArtifactStore

__all__ = [
    "ArtifactStore",
    "ChapterSegmenter",
    "PdfExtractionError",
    "PdfTextExtractor",
    "SizeBasedSectionSplitter",
]
