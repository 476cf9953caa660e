"""Chapter-level translation orchestration.

Responsibilities:
- Split one chapter into overlapping chunks and translate them in order.
- Thread the running translation context from chunk to chunk.
- Retry failed service calls and pace requests between chunks.
- Stitch chunk translations into one chapter text.
"""

from __future__ import annotations

from ..config import ChunkingOptions, PacingOptions, RetryPolicy, StitchingOptions
from ..errors import ChapterTranslationError, TranslationServiceError
from ..llm.rate_limiter import Pacer
from ..llm.retry import call_with_retry
from ..llm.translator import Translator
from ..models.datatypes import Chapter, ChapterTranslation, Chunk, TranslationRequest
from ..telemetry.logger import RunLogger
from ..text.chunking import ChunkSplitter
from ..text.stitching import ChunkStitcher


class ChapterTranslator:
    """Translate a single chapter chunk by chunk with continuity context."""

    def __init__(
        self,
        translator: Translator,
        *,
        target_language: str,
        context_chars: int = 1_500,
        chunking: ChunkingOptions | None = None,
        stitching: StitchingOptions | None = None,
        retry_policy: RetryPolicy | None = None,
        pacer: Pacer | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        """Initialize chapter translation collaborators and options."""

        self.translator = translator
        self.target_language = target_language
        self.context_chars = context_chars
        self.chunking = chunking if chunking is not None else ChunkingOptions()
        self.retry_policy = retry_policy if retry_policy is not None else RetryPolicy()
        self.pacer = pacer if pacer is not None else Pacer(PacingOptions())
        self.run_logger = run_logger
        self.splitter = ChunkSplitter(
            split_search_radius=self.chunking.split_search_radius,
            overlap_search_radius=self.chunking.overlap_search_radius,
        )
        self.stitcher = ChunkStitcher(
            stitching
            if stitching is not None
            else StitchingOptions(overlap_chars=self.chunking.overlap_chars)
        )

    def translate_chapter(
        self, chapter: Chapter, preceding_translation: str = ""
    ) -> ChapterTranslation:
        """Translate `chapter` using the tail of `preceding_translation` as context.

        Args:
            chapter: Chapter to translate.
            preceding_translation: Stitched translation of the previous successful
                chapter, or an empty string for the first one.

        Returns:
            Stitched chapter translation with chunk and retry counts.

        Raises:
            ChapterTranslationError: If any chunk exhausts its retry attempts.
        """

        chunks = self.splitter.split(
            chapter.content,
            self.chunking.max_chunk_chars,
            self.chunking.overlap_chars,
        )
        if self.run_logger is not None:
            self.run_logger.log_chapter_start(
                chapter.number, len(chapter.content), [len(chunk.content) for chunk in chunks]
            )

        context = preceding_translation
        translated_parts: list[str] = []
        retry_count = 0
        for chunk in chunks:
            request = TranslationRequest(
                source_text=chunk.content,
                is_continuation=not chunk.is_first,
                context=context[-self.context_chars :] if context else "",
                chapter_title=chapter.title,
                target_language=self.target_language,
            )
            translation, retries = self._translate_chunk(chapter, chunk, request)
            retry_count += retries
            translated_parts.append(translation)
            context = translation
            if not chunk.is_last:
                self.pacer.pause_between_chunks()

        return ChapterTranslation(
            chapter=chapter,
            text=self.stitcher.stitch(translated_parts),
            chunk_count=len(chunks),
            retry_count=retry_count,
        )

    def _translate_chunk(
        self, chapter: Chapter, chunk: Chunk, request: TranslationRequest
    ) -> tuple[str, int]:
        """Translate one chunk with retries and return text plus retry count."""

        retries = 0

        def on_retry(
            attempt: int, max_attempts: int, wait_seconds: float, error: TranslationServiceError
        ) -> None:
            nonlocal retries
            retries += 1
            if self.run_logger is not None:
                self.run_logger.log_chunk_retry(
                    chapter.number,
                    chunk.index,
                    attempt,
                    max_attempts,
                    wait_seconds,
                    type(error).__name__,
                    str(error),
                )

        try:
            translation = call_with_retry(
                lambda: self.translator.translate(request),
                self.retry_policy,
                sleeper=self.pacer.sleeper,
                on_retry=on_retry,
            )
        except TranslationServiceError as exc:
            raise ChapterTranslationError(
                chapter_number=chapter.number,
                chunk_index=chunk.index,
                detail=str(exc),
            ) from exc
        return translation, retries
