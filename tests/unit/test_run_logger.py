"""Unit tests for deterministic phase log lines."""

from __future__ import annotations

import io

from booktranslator.telemetry.logger import RunLogger


def _lines(sink: io.StringIO) -> list[str]:
    return sink.getvalue().splitlines()


def test_stage_events_are_rendered_as_phase_lines() -> None:
    """Stage lifecycle events should share one greppable line shape."""

    sink = io.StringIO()
    logger = RunLogger(sink=sink)

    logger.log_stage_start("extract")
    logger.log_stage_complete("extract")
    logger.log_stage_failure("select", "ValueError")

    assert _lines(sink) == [
        "[phase] level=INFO stage=extract event=start",
        "[phase] level=INFO stage=extract event=complete",
        "[phase] level=ERROR stage=select event=failure error_type=ValueError",
    ]


def test_chapter_events_include_sorted_context() -> None:
    """Chapter progress lines should carry sizes and sanitized values in key order."""

    sink = io.StringIO()
    logger = RunLogger(sink=sink)

    logger.log_chapter_start(2, 40_000, [25_000, 18_000])
    logger.log_chunk_retry(
        2, 1, 1, 3, 5.0, "OpenAIProviderError", "OpenAI rate limit reached (HTTP 429)."
    )
    logger.log_chapter_saved(2, "out dir/chapter_02.txt", 39_000)
    logger.log_chapter_skipped(3, "ChapterTranslationError", "service down")

    assert _lines(sink) == [
        "[phase] level=INFO stage=translate event=chapter_start "
        "chapter=2 chars=40000 chunk_sizes=25000_18000 chunks=2",
        "[phase] level=WARNING stage=translate event=chunk_retry "
        "attempt=1/3 chapter=2 chunk=2 detail=OpenAI_rate_limit_reached__HTTP_429_. "
        "error_type=OpenAIProviderError wait_seconds=5",
        "[phase] level=INFO stage=translate event=chapter_saved "
        "chapter=2 chars=39000 path=out_dir/chapter_02.txt",
        "[phase] level=ERROR stage=translate event=chapter_skipped "
        "chapter=3 detail=service_down error_type=ChapterTranslationError",
    ]


def test_failure_detail_is_compacted_and_capped() -> None:
    """Long multi-line failure messages should collapse into one bounded field."""

    sink = io.StringIO()
    logger = RunLogger(sink=sink)

    logger.log_chapter_skipped(4, "TranslationServiceError", "line one\n\n" + "x" * 300)
    logger.log_chapter_skipped(5, "TranslationServiceError")

    first, second = _lines(sink)
    detail = first.split(" detail=")[1].split(" ")[0]
    assert detail.startswith("line_one_xxx")
    assert len(detail) == 120
    assert "detail=none" in second
