"""Chapter range selection for CLI and pipeline flows.

Responsibilities:
- Select an inclusive 1-based range of detected chapters.
- Produce deterministic range labels for logs and the run manifest.
"""

from __future__ import annotations

from typing import Sequence, TypeVar

_Item = TypeVar("_Item")


def select_chapter_range(
    chapters: Sequence[_Item], start: int = 1, end: int | None = None
) -> list[_Item]:
    """Return chapters from 1-based `start` through `end`, both inclusive.

    Args:
        chapters: Detected chapters in source order.
        start: 1-based position of the first chapter to keep.
        end: 1-based position of the last chapter to keep; `None` or a value past
            the end selects through the last chapter.

    Raises:
        ValueError: If the range is malformed or starts past the available chapters.
    """

    if start < 1:
        raise ValueError(f"Invalid start chapter `{start}`. Indices must be positive and 1-based.")
    if end is not None and end < start:
        raise ValueError(
            f"Invalid chapter range `{start}-{end}`: start must be less than or equal to end."
        )
    if not chapters:
        raise ValueError("No chapters are available for selection.")
    if start > len(chapters):
        raise ValueError(
            f"Start chapter `{start}` is out of available bounds `1-{len(chapters)}`."
        )

    stop = len(chapters) if end is None else min(end, len(chapters))
    return list(chapters[start - 1 : stop])


def format_chapter_range(start: int, end: int | None, total: int) -> str:
    """Format the effective inclusive range, e.g. `2-5` or `3`."""

    stop = total if end is None else min(end, total)
    if stop == start:
        return str(start)
    return f"{start}-{stop}"
