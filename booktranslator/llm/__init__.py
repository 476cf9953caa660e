"""LLM-facing abstractions for translation.

This package defines the prompt library, the translator protocol with its OpenAI
implementation, retry handling, and request pacing.
"""

from .openai_client import OpenAIChatClient, OpenAIProviderError
from .prompts import PromptLibrary
from .rate_limiter import Pacer
from .retry import call_with_retry
from .translator import OpenAITranslator, Translator

__all__ = [
    "OpenAIChatClient",
    "OpenAIProviderError",
    "OpenAITranslator",
    "Pacer",
    "PromptLibrary",
    "Translator",
    "call_with_retry",
]
