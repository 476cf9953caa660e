"""Fixed-pause pacing between translation calls.

Responsibilities:
- Provide the single hook that enforces pauses between chunks and chapters.
- Keep pacing independent from provider adapters and testable without waiting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from time import sleep
from typing import Callable

from ..config import PacingOptions


@dataclass(slots=True)
class Pacer:
    """Sleep-based pacing used as a simple provider rate-limit backoff."""

    options: PacingOptions = field(default_factory=PacingOptions)
    sleeper: Callable[[float], None] = sleep

    def pause_between_chunks(self) -> None:
        """Wait before the next chunk request of the same chapter."""

        self._pause(self.options.chunk_delay_seconds)

    def pause_between_chapters(self) -> None:
        """Wait before starting the next chapter."""

        self._pause(self.options.chapter_delay_seconds)

    def _pause(self, seconds: float) -> None:
        if seconds > 0.0:
            self.sleeper(seconds)
