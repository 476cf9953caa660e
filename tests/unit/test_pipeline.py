"""Unit tests for end-to-end pipeline orchestration with injected collaborators."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from booktranslator.config import TranslatorConfig
from booktranslator.errors import PipelineStageError, TranslationServiceError
from booktranslator.io.pdf_text_extractor import PdfExtractionError
from booktranslator.models.datatypes import Chapter, ExtractedDocument, TranslationRequest
from booktranslator.pipeline import BookTranslatorPipeline
from booktranslator.pipeline.orchestrator import CHAPTER_DIVIDER
from booktranslator.telemetry.logger import RunLogger


class FakeExtractor:
    """Extractor stub returning fixed single-page text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.paths: list[Path] = []

    def extract(self, pdf_path: Path) -> ExtractedDocument:
        self.paths.append(pdf_path)
        return ExtractedDocument(pages=(self.text,), page_count=1)


class FailingExtractor:
    """Extractor stub that always fails."""

    def extract(self, pdf_path: Path) -> ExtractedDocument:
        raise PdfExtractionError(f"Input PDF not found: {pdf_path}")


class ScriptedTranslator:
    """Translator fake that fails for chapters whose title contains a marker."""

    def __init__(self, failing_title: str | None = None) -> None:
        self.failing_title = failing_title
        self.requests: list[TranslationRequest] = []

    def translate(self, request: TranslationRequest) -> str:
        self.requests.append(request)
        if self.failing_title is not None and self.failing_title in request.chapter_title:
            raise TranslationServiceError("service down")
        return f"[DE] {request.source_text}"


def _config(tmp_path: Path, **overrides: object) -> TranslatorConfig:
    return TranslatorConfig(
        input_pdf=tmp_path / "book.pdf",
        output_dir=tmp_path / "out",
        **overrides,  # type: ignore[arg-type]
    )


def _pipeline(
    sample_book_text: str,
    translator: ScriptedTranslator,
    sleeps: list[float],
    **kwargs: object,
) -> BookTranslatorPipeline:
    return BookTranslatorPipeline(
        sleeper=sleeps.append,
        translator=translator,
        extractor=FakeExtractor(sample_book_text),  # type: ignore[arg-type]
        **kwargs,  # type: ignore[arg-type]
    )


def test_run_skips_failed_chapter_and_keeps_going(
    tmp_path: Path, sample_book_text: str, recorded_sleeps: list[float]
) -> None:
    """A chapter that exhausts retries is skipped while later chapters are written."""

    translator = ScriptedTranslator(failing_title="THE MIDDLE")
    log_sink = io.StringIO()
    stages: list[tuple[str, int, int]] = []
    chapters_seen: list[tuple[int, int, int]] = []
    pipeline = _pipeline(
        sample_book_text,
        translator,
        recorded_sleeps,
        run_logger=RunLogger(sink=log_sink),
        stage_progress_callback=lambda stage, index, total: stages.append((stage, index, total)),
        chapter_progress_callback=lambda chapter, position, total: chapters_seen.append(
            (chapter.number, position, total)
        ),
    )

    report = pipeline.run(_config(tmp_path))

    out_dir = tmp_path / "out"
    assert report.translated_chapters == (1, 3)
    assert report.failed_chapters == (2,)
    assert (out_dir / "chapter_01.txt").exists()
    assert not (out_dir / "chapter_02.txt").exists()
    assert (out_dir / "chapter_03.txt").exists()
    assert report.chapter_files == {
        1: out_dir / "chapter_01.txt",
        3: out_dir / "chapter_03.txt",
    }

    chapter_one = (out_dir / "chapter_01.txt").read_text(encoding="utf-8")
    chapter_three = (out_dir / "chapter_03.txt").read_text(encoding="utf-8")
    assert chapter_one.startswith("[DE] CHAPTER 1 THE BEGINNING")
    assert report.combined_path == out_dir / "combined_translation.txt"
    assert report.combined_path.read_text(encoding="utf-8") == (
        chapter_one + CHAPTER_DIVIDER + chapter_three
    )

    # chapter pause, two retry backoffs for chapter 2, chapter pause
    assert recorded_sleeps == [3.0, 5.0, 10.0, 3.0]
    assert [request.chapter_title for request in translator.requests] == [
        "THE BEGINNING",
        "THE MIDDLE",
        "THE MIDDLE",
        "THE MIDDLE",
        "THE END",
    ]
    assert translator.requests[0].context == ""
    assert translator.requests[-1].context == chapter_one
    assert all(request.is_continuation is False for request in translator.requests)

    assert [stage for stage, _, _ in stages] == [
        "extract",
        "segment",
        "select",
        "translate",
        "combine",
        "manifest",
    ]
    assert stages[0] == ("extract", 1, 6)
    assert chapters_seen == [(1, 1, 3), (2, 2, 3), (3, 3, 3)]

    log_output = log_sink.getvalue()
    assert "event=chunk_retry attempt=1/3 chapter=2 chunk=1" in log_output
    assert (
        "event=chapter_skipped chapter=2 detail=service_down error_type=TranslationServiceError"
        in log_output
    )
    assert "event=chapter_saved chapter=3" in log_output


def test_run_writes_manifest_without_secrets(
    tmp_path: Path, sample_book_text: str, recorded_sleeps: list[float]
) -> None:
    """The manifest should summarize outcomes and never contain the API key."""

    translator = ScriptedTranslator(failing_title="THE MIDDLE")
    config = _config(tmp_path, api_key="sk-secret-value-123456", extra={"edition": "first"})

    report = _pipeline(sample_book_text, translator, recorded_sleeps).run(config)

    raw_manifest = report.manifest_path.read_text(encoding="utf-8")
    manifest = json.loads(raw_manifest)
    assert "sk-secret-value-123456" not in raw_manifest
    assert manifest["chapter_source"] == "markers"
    assert manifest["translated_chapters"] == [1, 3]
    assert manifest["failed_chapters"] == [
        {"number": 2, "error": "Chapter 2 failed at chunk 1: service down"}
    ]
    assert manifest["chapter_files"]["1"].endswith("chapter_01.txt")
    assert manifest["combined_path"].endswith("combined_translation.txt")
    assert manifest["config"]["target_language"] == "German"
    assert manifest["extra"]["chapter_range"] == "1-3"
    assert manifest["extra"]["detected_chapters"] == "3"
    assert manifest["extra"]["retry_count"] == "0"
    assert manifest["extra"]["edition"] == "first"


def test_run_translates_selected_range_only(
    tmp_path: Path, sample_book_text: str, recorded_sleeps: list[float]
) -> None:
    """Only chapters inside the inclusive range are translated and written."""

    translator = ScriptedTranslator()

    report = _pipeline(sample_book_text, translator, recorded_sleeps).run(
        _config(tmp_path, start_chapter=2, end_chapter=3)
    )

    assert report.translated_chapters == (2, 3)
    assert not (tmp_path / "out" / "chapter_01.txt").exists()
    assert report.extra["chapter_range"] == "2-3"
    assert translator.requests[0].context == ""
    assert recorded_sleeps == [3.0]


def test_run_without_successful_chapters_writes_no_combined_file(
    tmp_path: Path, sample_book_text: str, recorded_sleeps: list[float]
) -> None:
    """When every chapter fails the combined file is omitted but the manifest remains."""

    translator = ScriptedTranslator(failing_title="THE")

    report = _pipeline(sample_book_text, translator, recorded_sleeps).run(
        _config(tmp_path, end_chapter=1)
    )

    assert report.translated_chapters == ()
    assert report.failed_chapters == (1,)
    assert report.combined_path is None
    assert not (tmp_path / "out" / "combined_translation.txt").exists()
    manifest = json.loads(report.manifest_path.read_text(encoding="utf-8"))
    assert manifest["combined_path"] is None


def test_run_rejects_start_beyond_detected_chapters(
    tmp_path: Path, sample_book_text: str, recorded_sleeps: list[float]
) -> None:
    """A start index past the last chapter fails at the select stage."""

    translator = ScriptedTranslator()

    with pytest.raises(PipelineStageError, match="out of available bounds") as exc_info:
        _pipeline(sample_book_text, translator, recorded_sleeps).run(
            _config(tmp_path, start_chapter=5)
        )

    assert exc_info.value.stage == "select"
    assert "list-chapters" in (exc_info.value.hint or "")
    assert translator.requests == []


def test_run_maps_extraction_failures_to_extract_stage(
    tmp_path: Path, recorded_sleeps: list[float]
) -> None:
    """Extractor failures should surface as extract-stage errors."""

    pipeline = BookTranslatorPipeline(
        sleeper=recorded_sleeps.append,
        translator=ScriptedTranslator(),
        extractor=FailingExtractor(),  # type: ignore[arg-type]
    )

    with pytest.raises(PipelineStageError, match="Input PDF not found") as exc_info:
        pipeline.run(_config(tmp_path))

    assert exc_info.value.stage == "extract"


def test_run_requires_api_key_before_extraction(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Without an injected translator a missing key fails at the config stage."""

    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    extractor = FakeExtractor("unused")
    pipeline = BookTranslatorPipeline(extractor=extractor)  # type: ignore[arg-type]

    with pytest.raises(PipelineStageError, match="Missing OpenAI API key") as exc_info:
        pipeline.run(_config(tmp_path))

    assert exc_info.value.stage == "config"
    assert extractor.paths == []


def test_run_rejects_invalid_config(tmp_path: Path, recorded_sleeps: list[float]) -> None:
    """Invalid option values should fail at the config stage."""

    pipeline = _pipeline("unused", ScriptedTranslator(), recorded_sleeps)

    with pytest.raises(PipelineStageError, match="overlap_chars") as exc_info:
        pipeline.run(_config(tmp_path, max_chunk_chars=100, overlap_chars=100))

    assert exc_info.value.stage == "config"


def test_run_maps_unwritable_output_to_write_stage(
    tmp_path: Path, sample_book_text: str, recorded_sleeps: list[float]
) -> None:
    """Output directory failures should surface as write-stage errors."""

    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    config = TranslatorConfig(input_pdf=tmp_path / "book.pdf", output_dir=blocker)

    with pytest.raises(PipelineStageError, match="Failed to write chapter") as exc_info:
        _pipeline(sample_book_text, ScriptedTranslator(), recorded_sleeps).run(config)

    assert exc_info.value.stage == "write"


def test_list_chapters_returns_detected_chapters(
    tmp_path: Path, sample_book_text: str, recorded_sleeps: list[float]
) -> None:
    """Listing should segment without translating or writing outputs."""

    translator = ScriptedTranslator()

    chapters, source = _pipeline(sample_book_text, translator, recorded_sleeps).list_chapters(
        _config(tmp_path)
    )

    assert source == "markers"
    assert all(isinstance(chapter, Chapter) for chapter in chapters)
    assert [chapter.number for chapter in chapters] == [1, 2, 3]
    assert translator.requests == []
    assert not (tmp_path / "out").exists()
