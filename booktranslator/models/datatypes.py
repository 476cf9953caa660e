"""Core datatypes shared across Booktranslator modules.

Responsibilities:
- Represent immutable records exchanged between pipeline stages.
- Keep chapter, chunk, and translation data explicit so context threading is
  visible at every call site.

Key types:
- `ExtractedDocument`, `Chapter`, `Chunk`, `TranslationRequest`,
  `ChapterTranslation`, and `RunReport`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping


INTRODUCTION_NUMBER = 0
EPILOGUE_NUMBER = 99


@dataclass(frozen=True, slots=True)
class ExtractedDocument:
    """Text extracted from a PDF document.

    Attributes:
        pages: Per-page extracted text in page order.
        page_count: Number of pages in the source document.
    """

    pages: tuple[str, ...]
    page_count: int

    @property
    def text(self) -> str:
        """Return full document text with pages joined by newlines."""

        return "\n".join(self.pages)


@dataclass(frozen=True, slots=True)
class Chapter:
    """A chapter or pseudo-chapter extracted from source text.

    Attributes:
        number: Chapter number; 0 is the introduction, 99 the epilogue.
        title: Chapter title or inferred label.
        content: Full chapter text.
        char_start: Offset of the section start in the normalized source text.
    """

    number: int
    title: str
    content: str
    char_start: int = 0


@dataclass(frozen=True, slots=True)
class Chunk:
    """A bounded, possibly overlapping slice of one chapter.

    Attributes:
        content: Trimmed chunk text sent for translation.
        is_first: Whether this is the first chunk of the chapter.
        is_last: Whether this is the final chunk of the chapter.
        index: 0-based chunk index within the chapter.
        char_start: Inclusive offset of the untrimmed span in chapter content.
        char_end: Exclusive offset of the untrimmed span in chapter content.
    """

    content: str
    is_first: bool
    is_last: bool
    index: int = 0
    char_start: int = 0
    char_end: int = 0


@dataclass(frozen=True, slots=True)
class TranslationRequest:
    """One translation service request for a single chunk."""

    source_text: str
    is_continuation: bool
    context: str
    chapter_title: str
    target_language: str


@dataclass(frozen=True, slots=True)
class ChapterTranslation:
    """Stitched translation output for one chapter.

    Attributes:
        chapter: Source chapter.
        text: Stitched translated text; also the context for the next chapter.
        chunk_count: Number of chunks translated.
        retry_count: Number of failed attempts that were retried.
    """

    chapter: Chapter
    text: str
    chunk_count: int
    retry_count: int = 0


@dataclass(frozen=True, slots=True)
class RunReport:
    """Record of one book translation run.

    Attributes:
        output_dir: Directory holding all run outputs.
        chapter_files: Written per-chapter files keyed by chapter number.
        combined_path: Combined translation file, or `None` when nothing succeeded.
        manifest_path: Run manifest JSON path.
        translated_chapters: Successfully translated chapter numbers in order.
        failed_chapters: Skipped chapter numbers in order.
        chapter_source: Segmentation strategy (`markers` or `size_fallback`).
        extra: Additional implementation-specific metadata.
    """

    output_dir: Path
    chapter_files: Mapping[int, Path]
    combined_path: Path | None
    manifest_path: Path
    translated_chapters: tuple[int, ...]
    failed_chapters: tuple[int, ...]
    chapter_source: str
    extra: Mapping[str, str] = field(default_factory=dict)
