"""Integration-test fixtures for deterministic provider, keyring, and pacing behavior."""

from __future__ import annotations

from pathlib import Path
import time

import pytest

from booktranslator.io import pdf_text_extractor
from booktranslator.llm.openai_client import OpenAIChatClient
from tests.book_fixtures import write_sample_book_pdf
from tests.cli_doubles import MOCK_TRANSLATION, InMemoryCredentialStore


@pytest.fixture(autouse=True)
def _mock_openai_chat_calls(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, object]]:
    """Mock OpenAI chat calls in integration tests to avoid network access."""

    calls: list[dict[str, object]] = []

    def _mock_chat_completion(self: OpenAIChatClient, **kwargs: object) -> str:
        """Return deterministic placeholder text for every translation request."""

        calls.append({"api_key": self.api_key, "base_url": self.base_url, **kwargs})
        return MOCK_TRANSLATION

    monkeypatch.setattr(OpenAIChatClient, "chat_completion_text", _mock_chat_completion)
    return calls


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Provide a fake API key and drop provider overrides from the host environment."""

    monkeypatch.setenv("OPENAI_API_KEY", "env-api-key")
    for name in ("OPENAI_BASE_URL", "BOOKTRANSLATOR_PROVIDER", "BOOKTRANSLATOR_MODEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(pdf_text_extractor, "executable_available", lambda _name: False)


@pytest.fixture(autouse=True)
def credential_store(monkeypatch: pytest.MonkeyPatch) -> InMemoryCredentialStore:
    """Replace OS keyring access with an in-memory store."""

    store = InMemoryCredentialStore()
    monkeypatch.setattr("booktranslator.cli.create_credential_store", lambda: store)
    return store


@pytest.fixture(autouse=True)
def slept(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record pacing and backoff waits instead of sleeping."""

    waits: list[float] = []
    monkeypatch.setattr(time, "sleep", waits.append)
    return waits


@pytest.fixture
def sample_pdf(tmp_path: Path) -> Path:
    """Write a two-chapter text PDF into the test directory."""

    return write_sample_book_pdf(tmp_path / "book.pdf")


@pytest.fixture
def chat_calls(_mock_openai_chat_calls: list[dict[str, object]]) -> list[dict[str, object]]:
    """Expose recorded chat-completion calls."""

    return _mock_openai_chat_calls
