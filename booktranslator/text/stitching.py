"""Reassembly of overlapping chunk translations.

Responsibilities:
- Merge sequential chunk translations into one continuous chapter text.
- Drop text that was translated twice because the source chunks overlapped.

Overlap detection is a best-effort heuristic: when the provider words the
overlap differently in two chunks there is no exact match to find, and the
positional fallback may keep or drop a sentence too many.
"""

from __future__ import annotations

import re

from ..config import StitchingOptions


_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")
_PARAGRAPH_BREAK = "\n\n"


def split_sentences(text: str) -> list[tuple[int, str]]:
    """Split text after sentence punctuation, returning `(offset, sentence)` pairs."""

    sentences: list[tuple[int, str]] = []
    start = 0
    for match in _SENTENCE_SPLIT_RE.finditer(text):
        sentences.append((start, text[start : match.start()]))
        start = match.end()
    sentences.append((start, text[start:]))
    return sentences


class ChunkStitcher:
    """Merge ordered chunk translations, removing duplicated overlap text."""

    def __init__(self, options: StitchingOptions | None = None) -> None:
        """Initialize stitcher with tunable overlap heuristics."""

        self.options = options if options is not None else StitchingOptions()

    def stitch(self, translated_chunks: list[str]) -> str:
        """Return one continuous text from ordered chunk translations."""

        if not translated_chunks:
            return ""

        result = translated_chunks[0]
        for part in translated_chunks[1:]:
            skip_to = self._matched_overlap_end(result, part)
            if skip_to is None:
                skip_to = self._estimated_overlap_end(part)
            remainder = part[skip_to:].strip()
            if remainder:
                result = f"{result}{_PARAGRAPH_BREAK}{remainder}"
        return result

    def _tail_fingerprint(self, accumulated: str) -> str:
        """Return the last few sentences of the accumulated translation."""

        tail = accumulated[-self.options.tail_window_chars :]
        sentences = [sentence for _, sentence in split_sentences(tail)]
        return " ".join(sentences[-self.options.tail_sentences :])

    def _matched_overlap_end(self, accumulated: str, part: str) -> int | None:
        """Return the offset just past a sentence of `part` already present at the tail."""

        fingerprint = self._tail_fingerprint(accumulated)
        sentences = split_sentences(part)
        for position, (_, sentence) in enumerate(sentences[: self.options.scan_sentences]):
            if len(sentence) <= self.options.min_sentence_chars:
                continue
            if sentence[: self.options.probe_chars] not in fingerprint:
                continue
            if position + 1 < len(sentences):
                return sentences[position + 1][0]
            return len(part)
        return None

    def _estimated_overlap_end(self, part: str) -> int:
        """Estimate where the duplicated overlap ends when no sentence matched."""

        estimate = int(
            min(
                self.options.overlap_chars * self.options.overlap_growth_factor,
                len(part) * self.options.max_overlap_ratio,
            )
        )
        paragraph_break = part.find(_PARAGRAPH_BREAK, estimate)
        if paragraph_break != -1:
            return paragraph_break + len(_PARAGRAPH_BREAK)
        return estimate
