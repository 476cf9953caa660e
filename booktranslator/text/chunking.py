"""Chapter-to-chunk segmentation logic.

Responsibilities:
- Split chapter text into bounded chunks for translation calls.
- Repeat a sentence-aligned overlap between adjacent chunks so the provider keeps
  context across split points.
- Preserve offsets so the source spans cover the chapter without gaps.
"""

from __future__ import annotations

from ..models.datatypes import Chunk
from .boundaries import SentenceBoundaryLocator


class ChunkSplitter:
    """Divide one chapter's text into overlapping, sentence-aligned chunks."""

    def __init__(
        self,
        locator: SentenceBoundaryLocator | None = None,
        split_search_radius: int = 1_000,
        overlap_search_radius: int = 300,
    ) -> None:
        """Initialize splitter with a boundary locator and search radii."""

        self.locator = locator if locator is not None else SentenceBoundaryLocator()
        self.split_search_radius = split_search_radius
        self.overlap_search_radius = overlap_search_radius

    def split(self, content: str, max_chunk_size: int, overlap_size: int) -> list[Chunk]:
        """Split chapter content into ordered chunks.

        Args:
            content: Full chapter text.
            max_chunk_size: Target maximum chunk length in characters. A cut may
                land up to `split_search_radius` past it to reach a sentence end.
            overlap_size: Characters repeated at the start of the next chunk.

        Returns:
            Ordered chunk list; the last chunk always has `is_last` set.

        Raises:
            ValueError: If sizes are not usable.
        """

        if max_chunk_size <= 0:
            raise ValueError("`max_chunk_size` must be a positive integer.")
        if overlap_size < 0:
            raise ValueError("`overlap_size` must not be negative.")

        content_length = len(content)
        if content_length <= max_chunk_size:
            return [
                Chunk(
                    content=content,
                    is_first=True,
                    is_last=True,
                    index=0,
                    char_start=0,
                    char_end=content_length,
                )
            ]

        chunks: list[Chunk] = []
        position = 0
        while position < content_length:
            if content_length - position <= max_chunk_size:
                chunks.append(
                    Chunk(
                        content=content[position:].strip(),
                        is_first=not chunks,
                        is_last=True,
                        index=len(chunks),
                        char_start=position,
                        char_end=content_length,
                    )
                )
                break

            target_end = position + max_chunk_size
            cut_point = self.locator.locate(content, target_end, self.split_search_radius)
            if cut_point <= position or not content[position:cut_point].strip():
                cut_point = target_end

            span = content[position:cut_point]
            chunk_text = span.strip()
            chunks.append(
                Chunk(
                    content=chunk_text,
                    is_first=not chunks,
                    is_last=False,
                    index=len(chunks),
                    char_start=position,
                    char_end=cut_point,
                )
            )

            overlap = self.overlap_suffix(chunk_text, overlap_size)
            next_position = position + len(span.rstrip()) - len(overlap)
            if not overlap or len(overlap) >= len(chunk_text) or next_position <= position:
                next_position = cut_point
            position = next_position

        return chunks

    def overlap_suffix(self, chunk_text: str, overlap_size: int) -> str:
        """Return the trailing overlap of a chunk, starting on a sentence boundary."""

        if overlap_size <= 0:
            return ""
        if len(chunk_text) <= overlap_size:
            return chunk_text

        start = self.locator.locate(
            chunk_text, len(chunk_text) - overlap_size, self.overlap_search_radius
        )
        return chunk_text[start:]
