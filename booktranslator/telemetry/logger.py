"""Structured run logging utilities.

Responsibilities:
- Emit concise, deterministic phase-level runtime logs through `loguru`.
- Report chapter progress, chunk sizes, and retried translation failures.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


_MAX_DETAIL_CHARS = 120


def _short_detail(message: str) -> str:
    """Collapse whitespace and cap a failure message for one log field."""

    compact = " ".join(message.split())
    return compact[:_MAX_DETAIL_CHARS]


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    return " " + " ".join(
        f"{key}={_sanitize_context_value(context[key])}" for key in sorted(context)
    )


class RunLogger:
    """Emit deterministic phase logs for CLI-observable pipeline activity."""

    def __init__(self, sink: TextIO | None = None) -> None:
        """Route loguru output to `sink` with message-only formatting."""

        self._sink = sink or sys.stdout
        _loguru_logger.remove()
        _loguru_logger.add(self._sink, format="{message}", level="INFO", colorize=False)

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        _loguru_logger.log(
            level,
            f"[phase] level={level} stage={stage} event={event}{_format_context(context)}",
        )

    def log_stage_start(self, stage: str) -> None:
        """Emit a stage-start runtime event."""

        self._emit("INFO", "start", stage)

    def log_stage_complete(self, stage: str) -> None:
        """Emit a stage-complete runtime event."""

        self._emit("INFO", "complete", stage)

    def log_stage_failure(self, stage: str, error_type: str) -> None:
        """Emit a stage-failure runtime event without sensitive payload details."""

        self._emit("ERROR", "failure", stage, error_type=error_type)

    def log_chapter_start(
        self, chapter_number: int, content_chars: int, chunk_sizes: list[int]
    ) -> None:
        """Emit chapter start with content length and planned chunk sizes."""

        self._emit(
            "INFO",
            "chapter_start",
            "translate",
            chapter=chapter_number,
            chars=content_chars,
            chunks=len(chunk_sizes),
            chunk_sizes=",".join(str(size) for size in chunk_sizes),
        )

    def log_chunk_retry(
        self,
        chapter_number: int,
        chunk_index: int,
        attempt: int,
        max_attempts: int,
        wait_seconds: float,
        error_type: str,
        detail: str = "",
    ) -> None:
        """Emit one retried chunk failure with its shortened message."""

        self._emit(
            "WARNING",
            "chunk_retry",
            "translate",
            chapter=chapter_number,
            chunk=chunk_index + 1,
            attempt=f"{attempt}/{max_attempts}",
            wait_seconds=f"{wait_seconds:g}",
            error_type=error_type,
            detail=_short_detail(detail),
        )

    def log_chapter_saved(self, chapter_number: int, path: str, chars: int) -> None:
        """Emit a saved-chapter event."""

        self._emit("INFO", "chapter_saved", "translate", chapter=chapter_number, path=path, chars=chars)

    def log_chapter_skipped(self, chapter_number: int, error_type: str, detail: str = "") -> None:
        """Emit a skipped-chapter event after retries were exhausted."""

        self._emit(
            "ERROR",
            "chapter_skipped",
            "translate",
            chapter=chapter_number,
            error_type=error_type,
            detail=_short_detail(detail),
        )
