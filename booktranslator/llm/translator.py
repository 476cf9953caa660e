"""Translation interfaces and provider integrations.

Responsibilities:
- Define a protocol for chunk translation implementations.
- Provide the OpenAI-backed translator used by the pipeline.
"""

from __future__ import annotations

from typing import Protocol

from ..models.datatypes import TranslationRequest
from .openai_client import OpenAIChatClient
from .prompts import PromptLibrary


class Translator(Protocol):
    """Protocol for translation services.

    Implementations raise `TranslationServiceError` (or a subclass) on failure.
    """

    def translate(self, request: TranslationRequest) -> str:
        """Translate one chunk request and return the translated text."""


class OpenAITranslator:
    """OpenAI-backed translator for chunk-level text translation."""

    def __init__(
        self,
        model: str = "gpt-4.1-mini",
        provider_id: str = "openai",
        api_key: str | None = None,
        api_base_url: str = "https://api.openai.com/v1",
        timeout_seconds: float = 600.0,
        client: OpenAIChatClient | None = None,
    ) -> None:
        """Initialize translator settings and OpenAI client dependencies."""

        self.model = model
        self.provider_id = provider_id
        self.client = (
            client
            if client is not None
            else OpenAIChatClient(
                api_key=api_key,
                base_url=api_base_url,
                timeout_seconds=timeout_seconds,
            )
        )
        self.prompts = PromptLibrary()

    def translate(self, request: TranslationRequest) -> str:
        """Translate one chunk with OpenAI chat-completions."""

        return self.client.chat_completion_text(
            model=self.model,
            system_prompt=self.prompts.translation_system_prompt(request.target_language),
            user_prompt=self.prompts.translate_prompt(request),
        )
