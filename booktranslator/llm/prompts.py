"""Prompt template library for the translation stage.

Responsibilities:
- Centralize prompt construction for literary chunk translation.
- Embed continuity context and continuation markers deterministically.
"""

from __future__ import annotations

from ..models.datatypes import TranslationRequest


class PromptLibrary:
    """Build prompt strings for translation requests."""

    def translation_system_prompt(self, target_language: str) -> str:
        """Return deterministic system prompt for publication-quality translation."""

        return (
            "You are a senior literary translator and editor for narrative non-fiction. "
            f"Translate English source text into publication-ready {target_language} that "
            "reads like an original, not like a translation.\n"
            "Rules:\n"
            "- Preserve meaning, nuance, irony, and subtext. Never alter facts.\n"
            f"- Rebuild sentences for natural {target_language} rhythm; avoid calques.\n"
            "- Keep paragraph breaks and all formatting. Use Markdown headings "
            "(# for chapter titles, ## for subheadings).\n"
            "- Keep proper nouns and named titles unless an established translation exists.\n"
            "- Keep terminology and name spellings consistent across the text.\n"
            f"Output only the {target_language} translation with no notes or commentary."
        )

    def translate_prompt(self, request: TranslationRequest) -> str:
        """Return the user prompt for one chunk translation request."""

        sections = [f"Chapter: {request.chapter_title}"]
        if request.context:
            sections.append(
                "CONTEXT FROM PREVIOUS SECTION "
                "(for continuity - DO NOT include in your translation):\n"
                f'"""\n{request.context}\n"""'
            )
        if request.is_continuation:
            sections.append(
                "[This is a continuation of the chapter - continue translating seamlessly]"
            )
        sections.append(f'TEXT TO TRANSLATE:\n"""\n{request.source_text}\n"""')
        return "\n\n".join(sections)
