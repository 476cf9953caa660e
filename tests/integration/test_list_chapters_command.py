"""Integration tests for the `list-chapters` command."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from booktranslator.cli import app
from tests.book_fixtures import write_text_pdf


def test_list_chapters_prints_detected_chapters(
    sample_pdf: Path, chat_calls: list[dict[str, object]]
) -> None:
    """Detected chapters should be listed with positions usable by `--start`/`--end`."""

    result = CliRunner().invoke(app, ["list-chapters", str(sample_pdf)])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "Chapter source: markers"
    assert lines[1].startswith("1. [1] THE BEGINNING (")
    assert lines[2].startswith("2. [2] THE MIDDLE (")
    assert chat_calls == []


def test_list_chapters_falls_back_to_sections_without_markers(tmp_path: Path) -> None:
    """Books without chapter headings should be listed as size-based sections."""

    lines = [
        f"Paragraph line {index} describes the harbor and the ships in plain words."
        for index in range(1, 9)
    ]
    pdf_path = write_text_pdf(tmp_path / "plain.pdf", [lines])

    result = CliRunner().invoke(app, ["list-chapters", str(pdf_path)])

    assert result.exit_code == 0, result.output
    assert "Chapter source: size_fallback" in result.output
    assert "1. [1] Section 1 (" in result.output


def test_list_chapters_reports_missing_pdf(tmp_path: Path) -> None:
    """A missing input should fail at the extract stage."""

    result = CliRunner().invoke(app, ["list-chapters", str(tmp_path / "absent.pdf")])

    assert result.exit_code == 1
    assert "list-chapters failed at stage `extract`" in result.output
