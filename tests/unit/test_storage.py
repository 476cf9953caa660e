"""Unit tests for translation output storage."""

import json
from pathlib import Path

from booktranslator.io.storage import ArtifactStore


def test_chapter_filename_is_zero_padded() -> None:
    """Chapter files should sort by number including reserved numbers."""

    assert ArtifactStore.chapter_filename(0) == "chapter_00.txt"
    assert ArtifactStore.chapter_filename(1) == "chapter_01.txt"
    assert ArtifactStore.chapter_filename(12) == "chapter_12.txt"
    assert ArtifactStore.chapter_filename(99) == "chapter_99.txt"


def test_artifact_store_writes_text_chapters_and_json(tmp_path: Path) -> None:
    """Outputs should be written under the root and readable back."""

    store = ArtifactStore(tmp_path / "translations")

    chapter_path = store.save_chapter(3, "Kapitel drei.")
    text_path = store.save_text(Path(ArtifactStore.COMBINED_FILENAME), "Übersetzung")
    json_path = store.save_json(Path(ArtifactStore.MANIFEST_FILENAME), {"title": "Straße"})

    assert chapter_path == tmp_path / "translations" / "chapter_03.txt"
    assert chapter_path.read_text(encoding="utf-8") == "Kapitel drei."
    assert text_path.read_text(encoding="utf-8") == "Übersetzung"
    assert "Straße" in json_path.read_text(encoding="utf-8")
    assert json.loads(json_path.read_text(encoding="utf-8")) == {"title": "Straße"}
    assert (tmp_path / "translations" / "run_manifest.json").is_file()
    assert not (tmp_path / "translations" / "chapter_04.txt").exists()
