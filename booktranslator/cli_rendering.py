"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
chapter listings, and run summaries.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import PipelineStageError
from .models.datatypes import Chapter, RunReport


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, PipelineStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_chapter_source(source: str) -> None:
    """Print the chapter segmentation strategy."""

    typer.echo(f"Chapter source: {source}")


def echo_chapter_list(chapters: list[Chapter]) -> None:
    """Print one `position. [number] title (N chars)` row per chapter."""

    for position, chapter in enumerate(chapters, start=1):
        typer.echo(
            f"{position}. [{chapter.number}] {chapter.title} ({len(chapter.content)} chars)"
        )


def echo_run_summary(report: RunReport) -> None:
    """Print written outputs and per-chapter outcomes for one run."""

    echo_chapter_source(report.chapter_source)
    typer.echo(f"Chapter range: {report.extra.get('chapter_range', 'all')}")
    for number in report.translated_chapters:
        typer.echo(f"Chapter {number}: {report.chapter_files[number]}")
    for number in report.failed_chapters:
        typer.secho(f"Chapter {number}: skipped (translation failed)", fg=typer.colors.YELLOW)
    typer.echo(
        f"Translated: {len(report.translated_chapters)}, "
        f"failed: {len(report.failed_chapters)}, "
        f"retries: {report.extra.get('retry_count', '0')}"
    )
    if report.combined_path is not None:
        typer.echo(f"Combined translation: {report.combined_path}")
    typer.echo(f"Run manifest: {report.manifest_path}")
