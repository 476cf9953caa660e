"""Chapter segmentation for extracted book text.

Responsibilities:
- Convert extracted book text into ordered chapter records.
- Detect chapter, introduction, and epilogue markers and trim back matter.
- Fall back to fixed-size paragraph grouping when no markers are found.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from ..models.datatypes import EPILOGUE_NUMBER, INTRODUCTION_NUMBER, Chapter


_TITLE_TOKEN = r"[A-Z][A-Z'’,?!\-]*"


@dataclass(frozen=True, slots=True)
class _SectionStart:
    """Detected section marker position in the normalized text."""

    number: int
    title: str
    position: int


class SizeBasedSectionSplitter:
    """Group paragraphs into numbered pseudo-chapters of bounded size."""

    _PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
    _SEPARATOR = "\n\n"

    def split(self, text: str, max_chars: int = 15_000) -> list[Chapter]:
        """Split text into `Section N` chapters without breaking paragraphs.

        A single paragraph longer than `max_chars` becomes its own section.
        """

        paragraphs = [
            paragraph for paragraph in self._PARAGRAPH_SPLIT_RE.split(text) if paragraph.strip()
        ]

        sections: list[Chapter] = []
        block: list[str] = []
        block_length = 0
        block_start = 0
        search_from = 0
        for paragraph in paragraphs:
            position = text.find(paragraph, search_from)
            search_from = position + len(paragraph)
            added_length = len(paragraph) + (len(self._SEPARATOR) if block else 0)
            if block and block_length + added_length > max_chars:
                sections.append(self._section(len(sections) + 1, block, block_start))
                block = []
                block_length = 0
                added_length = len(paragraph)
            if not block:
                block_start = position
            block.append(paragraph)
            block_length += added_length

        if block:
            sections.append(self._section(len(sections) + 1, block, block_start))
        return sections

    def _section(self, number: int, paragraphs: list[str], char_start: int) -> Chapter:
        """Build one pseudo-chapter from accumulated paragraphs."""

        return Chapter(
            number=number,
            title=f"Section {number}",
            content=self._SEPARATOR.join(paragraphs),
            char_start=char_start,
        )


class ChapterSegmenter:
    """Split extracted book text into position-ordered chapter records."""

    _CHAPTER_RE = re.compile(
        r"\bCHAPTER(?:[ \t]+|[ \t]*\n[ \t]*)(?P<number>\d+)\b[:.]?"
        rf"(?:(?:[ \t]+|[ \t]*\n(?:[ \t]*\n)?[ \t]*)(?P<title>{_TITLE_TOKEN}(?:[ \t]+{_TITLE_TOKEN})*)"
        r"(?![a-zà-ÿ]))?"
    )
    _INTRODUCTION_RE = re.compile(r"^[ \t]*INTRODUCTION[ \t]*$", re.MULTILINE)
    _EPILOGUE_RE = re.compile(r"^[ \t]*EPILOGUE[ \t]*$", re.MULTILINE)
    _BACK_MATTER_RE = re.compile(
        r"^[ \t]*(?:ACKNOWLEDG(?:E)?MENTS\b|SOURCES AND BIBLIOGRAPHY\b|NOTES[ \t]*$)",
        re.MULTILINE,
    )
    _BACK_MATTER_MIN_OFFSET = 100
    _MIN_SECTION_CHARS = 100

    def __init__(
        self,
        fallback_splitter: SizeBasedSectionSplitter | None = None,
        section_chars: int = 15_000,
    ) -> None:
        """Initialize segmenter with its fixed-size fallback strategy."""

        self.fallback_splitter = (
            fallback_splitter if fallback_splitter is not None else SizeBasedSectionSplitter()
        )
        self.section_chars = section_chars

    def segment(self, text: str) -> list[Chapter]:
        """Split text into chapters ordered by their position in the source."""

        chapters, _ = self.detect(text)
        return chapters

    def detect(self, text: str) -> tuple[list[Chapter], str]:
        """Split text into chapters and report the strategy that produced them.

        Returns:
            Tuple of chapters and strategy name: `markers` when chapter,
            introduction, or epilogue markers produced content, otherwise
            `size_fallback`.
        """

        if not text or not text.strip():
            return [], "markers"

        normalized = text.replace("\r\n", "\n").replace("\r", "\n").strip()
        starts = self._section_starts(normalized)

        chapters: list[Chapter] = []
        for position, start in enumerate(starts):
            end = starts[position + 1].position if position + 1 < len(starts) else len(normalized)
            content = self._truncate_back_matter(normalized[start.position : end].strip())
            if len(content) <= self._MIN_SECTION_CHARS:
                continue
            chapters.append(
                Chapter(
                    number=start.number,
                    title=start.title,
                    content=content,
                    char_start=start.position,
                )
            )

        if not chapters:
            return self.fallback_splitter.split(normalized, self.section_chars), "size_fallback"
        return chapters, "markers"

    def _section_starts(self, text: str) -> list[_SectionStart]:
        """Collect introduction, chapter, and epilogue starts ordered by position."""

        starts: list[_SectionStart] = []
        seen_numbers: set[int] = set()
        for match in self._CHAPTER_RE.finditer(text):
            number = int(match.group("number"))
            if number in seen_numbers:
                continue
            seen_numbers.add(number)
            raw_title = match.group("title")
            title = " ".join(raw_title.split()) if raw_title else f"Chapter {number}"
            starts.append(_SectionStart(number=number, title=title, position=match.start()))

        for pattern, number, title in (
            (self._INTRODUCTION_RE, INTRODUCTION_NUMBER, "INTRODUCTION"),
            (self._EPILOGUE_RE, EPILOGUE_NUMBER, "EPILOGUE"),
        ):
            marker = pattern.search(text)
            if marker is not None:
                starts.append(_SectionStart(number=number, title=title, position=marker.start()))

        return sorted(starts, key=lambda start: start.position)

    def _truncate_back_matter(self, content: str) -> str:
        """Cut section content at the first back-matter heading past its opening."""

        marker = self._BACK_MATTER_RE.search(content, self._BACK_MATTER_MIN_OFFSET)
        if marker is None:
            return content
        return content[: marker.start()].strip()
