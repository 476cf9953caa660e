"""PDF text extraction.

Responsibilities:
- Extract per-page plain text from text-based PDF inputs.
- Prefer poppler's `pdftotext` for layout fidelity and fall back to `pypdf`.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ..models.datatypes import ExtractedDocument
from ..runtime_tools import executable_available, resolve_executable


class PdfExtractionError(RuntimeError):
    """Raised when text extraction from PDF cannot be completed."""


class PdfTextExtractor:
    """Extractor for text-based PDFs using `pdftotext` or `pypdf`."""

    def __init__(self, prefer_pdftotext: bool = True) -> None:
        """Initialize extractor strategy preference."""

        self.prefer_pdftotext = prefer_pdftotext

    def extract(self, pdf_path: Path) -> ExtractedDocument:
        """Extract text from every page of a PDF file.

        Raises:
            PdfExtractionError: If the file is missing, unreadable, or has no text.
        """

        if not pdf_path.exists():
            raise PdfExtractionError(f"Input PDF not found: {pdf_path}")

        if self.prefer_pdftotext and executable_available("pdftotext"):
            pages = self._extract_pages_with_pdftotext(pdf_path)
        else:
            pages = self._extract_pages_with_pypdf(pdf_path)

        document = ExtractedDocument(pages=tuple(pages), page_count=len(pages))
        if not document.text.strip():
            raise PdfExtractionError(
                f"No extractable text found in PDF: {pdf_path}. "
                "Only text-based PDFs are supported."
            )
        return document

    def _extract_pages_with_pdftotext(self, pdf_path: Path) -> list[str]:
        """Run `pdftotext` once and split its output on form feeds into pages."""

        command = [resolve_executable("pdftotext"), "-enc", "UTF-8", str(pdf_path), "-"]
        try:
            result = subprocess.run(
                command,
                check=False,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise PdfExtractionError(
                "The `pdftotext` command is required but was not found."
            ) from exc

        if result.returncode != 0:
            details = result.stderr.strip() or "unknown error"
            raise PdfExtractionError(f"pdftotext failed for {pdf_path}: {details}")

        pages = result.stdout.split("\f")
        # pdftotext terminates every page, including the last, with a form feed
        if len(pages) > 1 and not pages[-1].strip():
            pages.pop()
        return pages

    def _extract_pages_with_pypdf(self, pdf_path: Path) -> list[str]:
        """Extract per-page text with `pypdf`."""

        try:
            reader = PdfReader(str(pdf_path))
            return [(page.extract_text() or "").replace("\f", "\n") for page in reader.pages]
        except PdfReadError as exc:
            raise PdfExtractionError(f"pypdf could not read {pdf_path}: {exc}") from exc
