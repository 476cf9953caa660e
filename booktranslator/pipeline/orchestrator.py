"""Pipeline orchestration for Booktranslator.

Responsibilities:
- Define the stage order for one book translation run.
- Translate selected chapters sequentially, threading context between them.
- Isolate chapter failures so one bad chapter does not abort the run.
- Persist per-chapter, combined, and manifest outputs.

Key types:
- `BookTranslatorPipeline`: orchestration facade.
"""

from __future__ import annotations

from collections.abc import Callable
import os
from pathlib import Path
import time

from ..config import ProviderRuntimeConfig, RuntimeConfigSources, TranslatorConfig
from ..errors import ChapterTranslationError, PipelineStageError
from ..io.chapter_splitter import ChapterSegmenter
from ..io.pdf_text_extractor import PdfExtractionError, PdfTextExtractor
from ..io.storage import ArtifactStore
from ..llm.rate_limiter import Pacer
from ..llm.translator import Translator
from ..models.datatypes import Chapter, ChapterTranslation, ExtractedDocument, RunReport
from ..provider_factory import ProviderFactory
from ..telemetry.logger import RunLogger
from ..text.chapter_selection import format_chapter_range, select_chapter_range
from .chapter_translator import ChapterTranslator
from .telemetry import PipelineTelemetryMixin

CHAPTER_DIVIDER = "\n\n---\n\n"


class BookTranslatorPipeline(PipelineTelemetryMixin):
    """Coordinate all stages for a single translation run."""

    def __init__(
        self,
        run_logger: RunLogger | None = None,
        stage_progress_callback: Callable[[str, int, int], None] | None = None,
        chapter_progress_callback: Callable[[Chapter, int, int], None] | None = None,
        sleeper: Callable[[float], None] | None = None,
        translator: Translator | None = None,
        extractor: PdfTextExtractor | None = None,
    ) -> None:
        """Initialize runtime hooks and optional injected collaborators.

        Args:
            run_logger: Structured event logger.
            stage_progress_callback: Called as `(stage, index, total)` on stage start.
            chapter_progress_callback: Called as `(chapter, position, total)` before
                each selected chapter is translated.
            sleeper: Blocking wait used for pacing and retry backoff; defaults to
                `time.sleep`.
            translator: Translator override; the configured provider is used otherwise.
            extractor: PDF extractor override.
        """

        self._run_logger = run_logger
        self._stage_progress_callback = stage_progress_callback
        self._chapter_progress_callback = chapter_progress_callback
        self._sleeper = sleeper if sleeper is not None else time.sleep
        self._translator = translator
        self._extractor = extractor if extractor is not None else PdfTextExtractor()

    def list_chapters(self, config: TranslatorConfig) -> tuple[list[Chapter], str]:
        """Detect chapters without translating or writing outputs.

        Returns:
            Detected chapters and the segmentation strategy that produced them.
        """

        document = self._extract(config)
        return self._segment(document, config)

    def run(self, config: TranslatorConfig) -> RunReport:
        """Run the full pipeline and return a report of written outputs."""

        self._validate_config(config)
        runtime_config = self._resolve_runtime_config(config)
        translator = self._create_translator(config, runtime_config)
        store = ArtifactStore(config.output_dir)

        document = self._run_stage("extract", lambda: self._extract(config))
        chapters, chapter_source = self._run_stage(
            "segment", lambda: self._segment(document, config)
        )
        selected = self._run_stage("select", lambda: self._select(chapters, config))

        translations, failures, chapter_files = self._run_stage(
            "translate",
            lambda: self._translate_chapters(selected, translator, config, store),
        )
        combined_path = self._run_stage(
            "combine", lambda: self._combine(translations, store)
        )

        retry_count = sum(item.retry_count for item in translations)
        chapter_range = format_chapter_range(
            config.start_chapter, config.end_chapter, len(chapters)
        )
        report = RunReport(
            output_dir=config.output_dir,
            chapter_files=chapter_files,
            combined_path=combined_path,
            manifest_path=store.root / ArtifactStore.MANIFEST_FILENAME,
            translated_chapters=tuple(item.chapter.number for item in translations),
            failed_chapters=tuple(number for number, _ in failures),
            chapter_source=chapter_source,
            extra={
                "chapter_range": chapter_range,
                "detected_chapters": str(len(chapters)),
                "retry_count": str(retry_count),
            },
        )
        self._run_stage(
            "manifest",
            lambda: self._write_manifest(report, failures, config, runtime_config, store),
        )
        return report

    def _extract(self, config: TranslatorConfig) -> ExtractedDocument:
        """Extract page text from the configured PDF input."""

        try:
            return self._extractor.extract(config.input_pdf)
        except PdfExtractionError as exc:
            raise PipelineStageError(
                stage="extract",
                detail=str(exc),
                hint="Verify the input file exists and is a text-based PDF.",
            ) from exc
        except OSError as exc:
            raise PipelineStageError(
                stage="extract",
                detail=f"Failed to read PDF `{config.input_pdf}`: {exc}",
                hint="Verify the input file is readable.",
            ) from exc

    def _segment(
        self, document: ExtractedDocument, config: TranslatorConfig
    ) -> tuple[list[Chapter], str]:
        """Split document text into chapters, reporting the strategy used."""

        segmenter = ChapterSegmenter(section_chars=config.section_chars)
        return segmenter.detect(document.text)

    def _select(self, chapters: list[Chapter], config: TranslatorConfig) -> list[Chapter]:
        """Apply the configured inclusive chapter range."""

        try:
            return select_chapter_range(chapters, config.start_chapter, config.end_chapter)
        except ValueError as exc:
            raise PipelineStageError(
                stage="select",
                detail=str(exc),
                hint="Run `booktranslator list-chapters` to see available chapter indices.",
            ) from exc

    def _translate_chapters(
        self,
        chapters: list[Chapter],
        translator: Translator,
        config: TranslatorConfig,
        store: ArtifactStore,
    ) -> tuple[list[ChapterTranslation], list[tuple[int, str]], dict[int, Path]]:
        """Translate chapters in order, skipping chapters whose translation fails."""

        pacer = Pacer(config.pacing_options(), sleeper=self._sleeper)
        chapter_translator = ChapterTranslator(
            translator,
            target_language=config.target_language,
            context_chars=config.context_chars,
            chunking=config.chunking_options(),
            stitching=config.stitching_options(),
            retry_policy=config.retry_policy(),
            pacer=pacer,
            run_logger=self._run_logger,
        )

        translations: list[ChapterTranslation] = []
        failures: list[tuple[int, str]] = []
        chapter_files: dict[int, Path] = {}
        previous_text = ""
        for position, chapter in enumerate(chapters, start=1):
            if position > 1:
                pacer.pause_between_chapters()
            if self._chapter_progress_callback is not None:
                self._chapter_progress_callback(chapter, position, len(chapters))
            try:
                result = chapter_translator.translate_chapter(chapter, previous_text)
            except ChapterTranslationError as exc:
                failures.append((chapter.number, str(exc)))
                if self._run_logger is not None:
                    self._run_logger.log_chapter_skipped(
                        chapter.number, type(exc.__cause__ or exc).__name__, exc.detail
                    )
                continue

            path = self._save_output(
                lambda: store.save_chapter(chapter.number, result.text), "chapter"
            )
            chapter_files[chapter.number] = path
            translations.append(result)
            previous_text = result.text
            if self._run_logger is not None:
                self._run_logger.log_chapter_saved(chapter.number, str(path), len(result.text))

        return translations, failures, chapter_files

    def _combine(
        self, translations: list[ChapterTranslation], store: ArtifactStore
    ) -> Path | None:
        """Write the combined translation when at least one chapter succeeded."""

        if not translations:
            return None
        combined = CHAPTER_DIVIDER.join(item.text for item in translations)
        return self._save_output(
            lambda: store.save_text(Path(ArtifactStore.COMBINED_FILENAME), combined),
            "combined translation",
        )

    def _write_manifest(
        self,
        report: RunReport,
        failures: list[tuple[int, str]],
        config: TranslatorConfig,
        runtime_config: ProviderRuntimeConfig,
        store: ArtifactStore,
    ) -> Path:
        """Persist a JSON summary of the run without secrets."""

        payload: dict[str, object] = {
            "config": config.manifest_metadata(),
            "provider": runtime_config.as_manifest_metadata(),
            "chapter_source": report.chapter_source,
            "translated_chapters": list(report.translated_chapters),
            "failed_chapters": [
                {"number": number, "error": message} for number, message in failures
            ],
            "chapter_files": {
                str(number): str(path) for number, path in report.chapter_files.items()
            },
            "combined_path": None if report.combined_path is None else str(report.combined_path),
            "extra": {**report.extra, **config.extra},
        }
        return self._save_output(
            lambda: store.save_json(Path(ArtifactStore.MANIFEST_FILENAME), payload),
            "run manifest",
        )

    @staticmethod
    def _save_output(action: Callable[[], Path], label: str) -> Path:
        """Run one output write and map filesystem failures to a stage error."""

        try:
            return action()
        except OSError as exc:
            raise PipelineStageError(
                stage="write",
                detail=f"Failed to write {label}: {exc}",
                hint="Verify the output directory is writable.",
            ) from exc

    def _validate_config(self, config: TranslatorConfig) -> None:
        """Validate top-level configuration and map failures to stage-aware error."""

        try:
            config.validate()
        except ValueError as exc:
            raise PipelineStageError(
                stage="config",
                detail=str(exc),
                hint="Update translation options and rerun the command.",
            ) from exc

    def _resolve_runtime_config(self, config: TranslatorConfig) -> ProviderRuntimeConfig:
        """Resolve runtime provider settings with deterministic source precedence."""

        try:
            runtime_sources = RuntimeConfigSources(
                cli=config.runtime_sources.cli,
                secure=config.runtime_sources.secure,
                env=config.runtime_sources.env or os.environ,
            )
            return config.resolved_provider_runtime(runtime_sources)
        except ValueError as exc:
            raise PipelineStageError(
                stage="config",
                detail=str(exc),
                hint=(
                    "Set a supported provider and non-empty model in CLI, secure "
                    "storage, environment, or config defaults."
                ),
            ) from exc

    def _create_translator(
        self, config: TranslatorConfig, runtime_config: ProviderRuntimeConfig
    ) -> Translator:
        """Return the injected translator or build one for the resolved provider."""

        if self._translator is not None:
            return self._translator
        if runtime_config.api_key is None:
            raise PipelineStageError(
                stage="config",
                detail="Missing OpenAI API key.",
                hint=(
                    "Set `OPENAI_API_KEY`, pass `--api-key`, or store one with "
                    "`booktranslator credentials --set-api-key`."
                ),
            )
        try:
            return ProviderFactory.create_translator(
                runtime_config, timeout_seconds=config.request_timeout_seconds
            )
        except ValueError as exc:
            raise PipelineStageError(stage="config", detail=str(exc)) from exc
