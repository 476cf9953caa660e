"""Sentence and paragraph boundary lookup.

Responsibilities:
- Find clean split offsets near a target position in natural-language text.
- Keep boundary detection pattern-based and isolated from chunking and stitching.
"""

from __future__ import annotations

import re


class SentenceBoundaryLocator:
    """Locate the best split offset near a target, preferring sentence breaks."""

    _SENTENCE_END_RE = re.compile(
        r"[.!?][\"'”’]?\s+(?=[A-ZÀ-Þ\"'“„‘«])"
    )
    _PARAGRAPH_BREAK_RE = re.compile(r"\n(?:[ \t]*\n)+")
    _WHITESPACE_FALLBACK_CHARS = 100

    def locate(self, text: str, target_position: int, search_radius: int) -> int:
        """Return the split offset closest to `target_position`.

        Candidates are offsets right after sentence-ending punctuation plus its
        trailing whitespace, and right after blank lines, inside the window
        `[target_position - search_radius, target_position + search_radius]`.
        The closest candidate at or before the target wins; when every candidate
        lies after the target the nearest one is used.

        Args:
            text: Text to search.
            target_position: Preferred split offset.
            search_radius: Characters searched on each side of the target.

        Returns:
            A split offset within `[0, len(text)]`.
        """

        text_length = len(text)
        target = min(max(target_position, 0), text_length)
        search_start = max(0, target - search_radius)
        search_end = min(text_length, target + search_radius)

        candidates = self.candidates(text, search_start, search_end)
        if not candidates:
            return self._whitespace_fallback(text, target)

        preceding = [offset for offset in candidates if offset <= target]
        if preceding:
            return max(preceding)
        return min(candidates)

    def candidates(self, text: str, search_start: int, search_end: int) -> list[int]:
        """Return sorted boundary offsets found in `text[search_start:search_end]`."""

        offsets = {
            match.end()
            for pattern in (self._SENTENCE_END_RE, self._PARAGRAPH_BREAK_RE)
            for match in pattern.finditer(text, search_start, search_end)
        }
        return sorted(offsets)

    def _whitespace_fallback(self, text: str, target: int) -> int:
        """Return the offset after the nearest preceding whitespace, or the target."""

        lower_bound = max(0, target - self._WHITESPACE_FALLBACK_CHARS)
        for index in range(min(target, len(text) - 1), lower_bound, -1):
            if text[index].isspace():
                return index + 1
        return target
