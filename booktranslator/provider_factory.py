"""Provider factory helpers for the translation stage.

Responsibilities:
- Resolve provider identifiers to concrete translator implementations.
- Keep orchestration independent from concrete provider class construction.

Notes:
- Only `openai` (and OpenAI-compatible endpoints via `api_base_url`) is implemented.
"""

from __future__ import annotations

from .config import ProviderRuntimeConfig
from .llm.translator import OpenAITranslator, Translator


class ProviderFactory:
    """Factory for provider-backed translators used by the pipeline."""

    @staticmethod
    def create_translator(
        runtime: ProviderRuntimeConfig,
        timeout_seconds: float = 600.0,
    ) -> Translator:
        """Create a translator for resolved provider runtime settings."""

        if runtime.provider == "openai":
            return OpenAITranslator(
                model=runtime.model,
                provider_id=runtime.provider,
                api_key=runtime.api_key,
                api_base_url=runtime.api_base_url,
                timeout_seconds=timeout_seconds,
            )
        raise ValueError(f"Unsupported translator provider `{runtime.provider}`.")
