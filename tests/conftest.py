"""Shared pytest fixtures for the full Booktranslator test suite."""

from __future__ import annotations

import pytest

from tests.book_fixtures import sample_book_text as build_sample_book_text


@pytest.fixture
def sample_book_text() -> str:
    """Provide book text with three marked chapters followed by back matter."""

    return build_sample_book_text()


@pytest.fixture
def recorded_sleeps() -> list[float]:
    """Collect requested wait durations instead of sleeping."""

    return []
