"""Unit tests for PDF text extraction strategies and failures."""

from __future__ import annotations

from pathlib import Path
import subprocess

import pytest
from pytest import MonkeyPatch

from booktranslator.io import pdf_text_extractor
from booktranslator.io.pdf_text_extractor import PdfExtractionError, PdfTextExtractor
from tests.book_fixtures import write_sample_book_pdf, write_text_pdf


def _disable_pdftotext(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr(pdf_text_extractor, "executable_available", lambda _name: False)


def test_extract_falls_back_to_pypdf_when_pdftotext_is_missing(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """Extractor should read every page with `pypdf` when `pdftotext` is unavailable."""

    _disable_pdftotext(monkeypatch)
    pdf_path = write_sample_book_pdf(tmp_path / "book.pdf")

    document = PdfTextExtractor().extract(pdf_path)

    assert document.page_count == 2
    assert "CHAPTER 1 THE BEGINNING" in document.pages[0]
    assert "The middle line 5 carries enough words" in document.pages[1]
    assert document.text == "\n".join(document.pages)


def test_extract_splits_pdftotext_output_on_form_feeds(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """`pdftotext` output should split into pages that keep their line breaks."""

    pdf_path = tmp_path / "book.pdf"
    pdf_path.write_bytes(b"%PDF-1.4")
    calls: list[list[str]] = []

    def _fake_run(command: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        del kwargs
        calls.append(command)
        return subprocess.CompletedProcess(
            command, 0, stdout="CHAPTER 1 ONE\nFirst page.\n\fSecond page.\n\f", stderr=""
        )

    monkeypatch.setattr(pdf_text_extractor, "executable_available", lambda _name: True)
    monkeypatch.setattr(pdf_text_extractor, "resolve_executable", lambda name: name)
    monkeypatch.setattr(pdf_text_extractor.subprocess, "run", _fake_run)

    document = PdfTextExtractor().extract(pdf_path)

    assert document.pages == ("CHAPTER 1 ONE\nFirst page.\n", "Second page.\n")
    assert "First page.\n\nSecond page." in document.text
    assert calls == [["pdftotext", "-enc", "UTF-8", str(pdf_path), "-"]]


def test_extract_reports_pdftotext_failures(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """A non-zero `pdftotext` exit should surface its stderr."""

    pdf_path = tmp_path / "book.pdf"
    pdf_path.write_bytes(b"%PDF-1.4")

    monkeypatch.setattr(pdf_text_extractor, "executable_available", lambda _name: True)
    monkeypatch.setattr(
        pdf_text_extractor.subprocess,
        "run",
        lambda command, **_kwargs: subprocess.CompletedProcess(
            command, 1, stdout="", stderr="Syntax Error: Couldn't read xref table"
        ),
    )

    with pytest.raises(PdfExtractionError, match="pdftotext failed .*xref table"):
        PdfTextExtractor().extract(pdf_path)


def test_extract_rejects_missing_file(tmp_path: Path) -> None:
    """A missing input path should fail before any tool is invoked."""

    with pytest.raises(PdfExtractionError, match="Input PDF not found"):
        PdfTextExtractor().extract(tmp_path / "absent.pdf")


def test_extract_rejects_pdf_without_text(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Image-only or blank PDFs should be rejected as unsupported."""

    _disable_pdftotext(monkeypatch)
    pdf_path = write_text_pdf(tmp_path / "blank.pdf", [[]])

    with pytest.raises(PdfExtractionError, match="No extractable text"):
        PdfTextExtractor().extract(pdf_path)


def test_extract_rejects_unreadable_pdf(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Files that are not PDFs should raise an extraction error."""

    _disable_pdftotext(monkeypatch)
    pdf_path = tmp_path / "broken.pdf"
    pdf_path.write_bytes(b"this is not a pdf document at all")

    with pytest.raises(PdfExtractionError, match="pypdf could not read"):
        PdfTextExtractor().extract(pdf_path)
