"""Domain exceptions for pipeline, provider, and CLI diagnostics."""

from __future__ import annotations


class PipelineStageError(RuntimeError):
    """Raised when a specific pipeline stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped pipeline error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class TranslationServiceError(RuntimeError):
    """Raised when the translation service fails to return a translation.

    Only the human-readable message is relied upon by callers; provider adapters
    may attach extra metadata in subclasses.
    """


class ChapterTranslationError(RuntimeError):
    """Raised when a chapter cannot be translated because a chunk exhausted retries."""

    def __init__(self, *, chapter_number: int, chunk_index: int, detail: str) -> None:
        """Initialize chapter failure metadata."""

        super().__init__(
            f"Chapter {chapter_number} failed at chunk {chunk_index + 1}: {detail}"
        )
        self.chapter_number = chapter_number
        self.chunk_index = chunk_index
        self.detail = detail
