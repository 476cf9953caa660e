"""Translation output storage.

Responsibilities:
- Write per-chapter, combined, and manifest outputs under one directory.
- Name chapter files deterministically by zero-padded chapter number.
"""

from __future__ import annotations

import json
from pathlib import Path


class ArtifactStore:
    """Filesystem-backed store for translation outputs."""

    COMBINED_FILENAME = "combined_translation.txt"
    MANIFEST_FILENAME = "run_manifest.json"

    def __init__(self, root: Path) -> None:
        """Initialize the store with a root output directory."""

        self.root = root

    @staticmethod
    def chapter_filename(chapter_number: int) -> str:
        """Return the file name for one translated chapter."""

        return f"chapter_{chapter_number:02d}.txt"

    def save_text(self, relative_path: Path, content: str) -> Path:
        """Save text content and return final path."""

        path = self.root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def save_json(self, relative_path: Path, payload: dict[str, object]) -> Path:
        """Save JSON-serializable payload and return final path."""

        path = self.root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True),
            encoding="utf-8",
        )
        return path

    def save_chapter(self, chapter_number: int, content: str) -> Path:
        """Save one translated chapter and return its path."""

        return self.save_text(Path(self.chapter_filename(chapter_number)), content)
