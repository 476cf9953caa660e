"""Unit tests for inclusive chapter range selection."""

import pytest

from booktranslator.text.chapter_selection import format_chapter_range, select_chapter_range


def test_select_chapter_range_is_inclusive_and_one_based() -> None:
    """Start and end positions should both be included."""

    chapters = ["a", "b", "c", "d", "e"]

    assert select_chapter_range(chapters) == chapters
    assert select_chapter_range(chapters, start=2, end=4) == ["b", "c", "d"]
    assert select_chapter_range(chapters, start=5) == ["e"]


def test_select_chapter_range_clamps_end_past_last_chapter() -> None:
    """An end beyond the available chapters should select through the last one."""

    assert select_chapter_range(["a", "b", "c"], start=2, end=40) == ["b", "c"]


def test_select_chapter_range_rejects_invalid_ranges() -> None:
    """Malformed and out-of-bounds ranges should fail with clear diagnostics."""

    chapters = ["a", "b", "c"]
    with pytest.raises(ValueError, match="positive and 1-based"):
        select_chapter_range(chapters, start=0)
    with pytest.raises(ValueError, match="start must be less than or equal to end"):
        select_chapter_range(chapters, start=3, end=2)
    with pytest.raises(ValueError, match="out of available bounds `1-3`"):
        select_chapter_range(chapters, start=4)
    with pytest.raises(ValueError, match="No chapters are available"):
        select_chapter_range([], start=1)


def test_format_chapter_range_reports_effective_range() -> None:
    """Labels should reflect clamping and collapse single-chapter ranges."""

    assert format_chapter_range(1, None, 5) == "1-5"
    assert format_chapter_range(2, 9, 4) == "2-4"
    assert format_chapter_range(3, 3, 5) == "3"
