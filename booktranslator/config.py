"""Configuration model and loaders for Booktranslator.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Derive the explicit option values each pipeline component receives.
- Provide deterministic precedence resolution for provider runtime settings.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `TranslatorConfig`: normalized runtime settings for a translation run.
- `ChunkingOptions`, `StitchingOptions`, `RetryPolicy`, `PacingOptions`:
  per-component option values derived from the run config.
- `ProviderRuntimeConfig`: resolved provider/model runtime values.
- `RuntimeConfigSources`: optional value sources for precedence resolution.
- `ConfigLoader`: static construction helpers for `TranslatorConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import normalize_optional_string, parse_number


_DEFAULT_PROVIDER = "openai"
_DEFAULT_MODEL = "gpt-4.1-mini"
_DEFAULT_BASE_URL = "https://api.openai.com/v1"
_DEFAULT_TARGET_LANGUAGE = "German"
_DEFAULT_OUTPUT_DIR = Path("translations")
_SUPPORTED_PROVIDER_IDS = frozenset({"openai"})


@dataclass(frozen=True, slots=True)
class ChunkingOptions:
    """Chunk splitting options for one chapter.

    Attributes:
        max_chunk_chars: Maximum characters per chunk before boundary search.
        overlap_chars: Characters repeated from the end of one chunk into the next.
        split_search_radius: Boundary search radius around the chunk cut target.
        overlap_search_radius: Boundary search radius used to align overlap starts.
    """

    max_chunk_chars: int = 25_000
    overlap_chars: int = 3_000
    split_search_radius: int = 1_000
    overlap_search_radius: int = 300


@dataclass(frozen=True, slots=True)
class StitchingOptions:
    """Tunable heuristics used when merging overlapping chunk translations.

    The fallback coefficients are empirical; they are kept configurable rather than
    treated as exact.
    """

    overlap_chars: int = 3_000
    tail_window_chars: int = 800
    tail_sentences: int = 3
    scan_sentences: int = 10
    probe_chars: int = 40
    min_sentence_chars: int = 30
    overlap_growth_factor: float = 1.2
    max_overlap_ratio: float = 0.3


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Linear backoff policy for translation service calls.

    Attributes:
        max_attempts: Total attempts per call, including the first.
        backoff_seconds: Wait multiplier; attempt `n` failing waits `n * backoff_seconds`.
    """

    max_attempts: int = 3
    backoff_seconds: float = 5.0

    def wait_seconds(self, attempt: int) -> float:
        """Return the wait after failed 1-based `attempt`."""

        return attempt * self.backoff_seconds


@dataclass(frozen=True, slots=True)
class PacingOptions:
    """Fixed pauses used as a simple provider rate-limit backoff."""

    chunk_delay_seconds: float = 2.0
    chapter_delay_seconds: float = 3.0


@dataclass(frozen=True, slots=True)
class RuntimeConfigSources:
    """Source mappings used for deterministic runtime value precedence.

    Attributes:
        cli: Values explicitly provided by CLI arguments.
        secure: Values loaded from secure local credential storage.
        env: Values loaded from environment variables.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    secure: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ProviderRuntimeConfig:
    """Resolved runtime provider settings for one run.

    Attributes:
        provider: Provider identifier for the translation stage.
        model: Model identifier for the translation stage.
        api_base_url: Base URL of the OpenAI-compatible API.
        api_key: Optional provider API key (resolved but never persisted).
    """

    provider: str
    model: str
    api_base_url: str
    api_key: str | None = None

    def as_manifest_metadata(self) -> dict[str, str]:
        """Return non-secret runtime metadata safe to persist in the manifest."""

        return {
            "provider": self.provider,
            "model": self.model,
            "api_base_url": self.api_base_url,
        }


@dataclass(slots=True)
class TranslatorConfig:
    """Runtime configuration for one translation run.

    Attributes:
        input_pdf: Path to the source PDF.
        output_dir: Directory for per-chapter and combined translation files.
        target_language: Human-readable target language name used in prompts.
        provider: Translation provider identifier.
        model: Translation model identifier.
        api_key: Optional API key for provider calls.
        api_base_url: Base URL of the OpenAI-compatible chat-completions API.
        request_timeout_seconds: Per-request HTTP timeout.
        max_chunk_chars: Maximum chunk size in characters.
        overlap_chars: Overlap between adjacent chunks in characters.
        context_chars: Trailing context characters passed with each request.
        section_chars: Block size used when no chapter markers are found.
        max_attempts: Attempts per chunk translation call.
        retry_backoff_seconds: Linear backoff multiplier between attempts.
        chunk_delay_seconds: Pause between chunk calls within a chapter.
        chapter_delay_seconds: Pause between chapters.
        start_chapter: Inclusive 1-based index of the first chapter to translate.
        end_chapter: Inclusive 1-based index of the last chapter, or `None` for all.
        runtime_sources: Optional runtime source overrides injected by CLI.
        extra: Additional metadata recorded in the run manifest.
    """

    input_pdf: Path
    output_dir: Path = _DEFAULT_OUTPUT_DIR
    target_language: str = _DEFAULT_TARGET_LANGUAGE
    provider: str = _DEFAULT_PROVIDER
    model: str = _DEFAULT_MODEL
    api_key: str | None = None
    api_base_url: str = _DEFAULT_BASE_URL
    request_timeout_seconds: float = 600.0
    max_chunk_chars: int = 25_000
    overlap_chars: int = 3_000
    context_chars: int = 1_500
    section_chars: int = 15_000
    max_attempts: int = 3
    retry_backoff_seconds: float = 5.0
    chunk_delay_seconds: float = 2.0
    chapter_delay_seconds: float = 3.0
    start_chapter: int = 1
    end_chapter: int | None = None
    runtime_sources: RuntimeConfigSources = field(default_factory=RuntimeConfigSources)
    extra: dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """Validate runtime configuration values before pipeline execution."""

        self._validate_provider_id(self.provider)
        self._require_non_empty(self.model, "model")
        self._require_non_empty(self.target_language, "target_language")
        for name in ("max_chunk_chars", "context_chars", "section_chars", "max_attempts"):
            if getattr(self, name) <= 0:
                raise ValueError(f"`{name}` must be a positive integer.")
        if self.overlap_chars < 0:
            raise ValueError("`overlap_chars` must not be negative.")
        if self.overlap_chars >= self.max_chunk_chars:
            raise ValueError("`overlap_chars` must be smaller than `max_chunk_chars`.")
        for name in ("retry_backoff_seconds", "chunk_delay_seconds", "chapter_delay_seconds"):
            if getattr(self, name) < 0:
                raise ValueError(f"`{name}` must not be negative.")
        if self.request_timeout_seconds <= 0:
            raise ValueError("`request_timeout_seconds` must be positive.")
        if self.start_chapter < 1:
            raise ValueError("`start_chapter` must be a positive 1-based index.")
        if self.end_chapter is not None and self.end_chapter < self.start_chapter:
            raise ValueError("`end_chapter` must be greater than or equal to `start_chapter`.")

    def chunking_options(self) -> ChunkingOptions:
        """Return chunk splitting options for this run."""

        return ChunkingOptions(
            max_chunk_chars=self.max_chunk_chars,
            overlap_chars=self.overlap_chars,
        )

    def stitching_options(self) -> StitchingOptions:
        """Return chunk stitching options for this run."""

        return StitchingOptions(overlap_chars=self.overlap_chars)

    def retry_policy(self) -> RetryPolicy:
        """Return the retry policy for translation calls."""

        return RetryPolicy(
            max_attempts=self.max_attempts,
            backoff_seconds=self.retry_backoff_seconds,
        )

    def pacing_options(self) -> PacingOptions:
        """Return pauses applied between chunks and chapters."""

        return PacingOptions(
            chunk_delay_seconds=self.chunk_delay_seconds,
            chapter_delay_seconds=self.chapter_delay_seconds,
        )

    def resolved_provider_runtime(
        self, sources: RuntimeConfigSources | None = None
    ) -> ProviderRuntimeConfig:
        """Resolve provider settings with deterministic source precedence.

        Precedence for each key is:
        `cli` > `secure` > `env` > config field default.
        """

        resolved_sources = sources if sources is not None else self.runtime_sources

        provider = self._resolve_runtime_value(
            key="provider",
            env_key="BOOKTRANSLATOR_PROVIDER",
            default_value=self.provider,
            sources=resolved_sources,
        )
        model = self._resolve_runtime_value(
            key="model",
            env_key="BOOKTRANSLATOR_MODEL",
            default_value=self.model,
            sources=resolved_sources,
        )
        api_base_url = self._resolve_runtime_value(
            key="api_base_url",
            env_key="OPENAI_BASE_URL",
            default_value=self.api_base_url,
            sources=resolved_sources,
        )
        api_key = self._resolve_optional_runtime_value(
            key="api_key",
            env_key="OPENAI_API_KEY",
            default_value=self.api_key,
            sources=resolved_sources,
        )

        self._validate_provider_id(provider)
        return ProviderRuntimeConfig(
            provider=provider,
            model=model,
            api_base_url=api_base_url,
            api_key=api_key,
        )

    def manifest_metadata(self) -> dict[str, str]:
        """Return non-secret config values recorded in the run manifest."""

        return {
            "input_pdf": str(self.input_pdf),
            "target_language": self.target_language,
            "max_chunk_chars": str(self.max_chunk_chars),
            "overlap_chars": str(self.overlap_chars),
            "context_chars": str(self.context_chars),
            "max_attempts": str(self.max_attempts),
            "start_chapter": str(self.start_chapter),
            "end_chapter": "" if self.end_chapter is None else str(self.end_chapter),
        }

    def _resolve_runtime_value(
        self,
        key: str,
        env_key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str:
        """Resolve a required runtime value from sources in precedence order."""

        value = self._resolve_optional_runtime_value(key, env_key, default_value, sources)
        if value is None:
            raise ValueError(
                f"`{key}` could not be resolved from CLI, secure storage, env, or defaults."
            )
        return value

    def _resolve_optional_runtime_value(
        self,
        key: str,
        env_key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str | None:
        """Resolve an optional runtime value from sources in precedence order."""

        for mapping, lookup_key in (
            (sources.cli, key),
            (sources.secure, key),
            (sources.env, env_key),
        ):
            if lookup_key in mapping:
                value = normalize_optional_string(mapping.get(lookup_key))
                if value is not None:
                    return value
        return normalize_optional_string(default_value)

    @staticmethod
    def _validate_provider_id(provider_id: str) -> None:
        """Validate provider identifiers against currently supported providers."""

        if provider_id not in _SUPPORTED_PROVIDER_IDS:
            supported = ", ".join(sorted(_SUPPORTED_PROVIDER_IDS))
            raise ValueError(f"Unsupported `provider` value `{provider_id}`; supported: {supported}.")

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        """Validate that runtime string fields are not empty."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")


_INT_FIELDS = (
    "max_chunk_chars",
    "overlap_chars",
    "context_chars",
    "section_chars",
    "max_attempts",
    "start_chapter",
    "end_chapter",
)
_FLOAT_FIELDS = (
    "request_timeout_seconds",
    "retry_backoff_seconds",
    "chunk_delay_seconds",
    "chapter_delay_seconds",
)
_STRING_FIELDS = ("target_language", "provider", "model", "api_key", "api_base_url")


class ConfigLoader:
    """Factory methods for creating `TranslatorConfig` from external sources."""

    _REQUIRED_YAML_KEYS = frozenset({"input_pdf"})
    _SUPPORTED_YAML_KEYS = frozenset(
        {"input_pdf", "output_dir", "extra", *_INT_FIELDS, *_FLOAT_FIELDS, *_STRING_FIELDS}
    )
    _ENV_PREFIX = "BOOKTRANSLATOR_"
    _RUNTIME_ENV_KEYS = frozenset(
        {"BOOKTRANSLATOR_PROVIDER", "BOOKTRANSLATOR_MODEL", "OPENAI_API_KEY", "OPENAI_BASE_URL"}
    )

    @staticmethod
    def from_yaml(path: Path) -> TranslatorConfig:
        """Create a validated config from a YAML file."""

        raw_text = path.read_text(encoding="utf-8")
        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")

        source_label = f"YAML `{path}`"
        ConfigLoader._validate_yaml_keys(payload, source_label)
        return ConfigLoader._build_config(payload, source_label)

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> TranslatorConfig:
        """Create a validated config from `BOOKTRANSLATOR_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        prefix = ConfigLoader._ENV_PREFIX

        payload: dict[str, Any] = {}
        for key in ("input_pdf", "output_dir", *_INT_FIELDS, *_FLOAT_FIELDS, *_STRING_FIELDS):
            env_key = f"{prefix}{key.upper()}"
            if env_key in env_map:
                payload[key] = env_map[env_key]
        if "api_key" not in payload and "OPENAI_API_KEY" in env_map:
            payload["api_key"] = env_map["OPENAI_API_KEY"]
        if "api_base_url" not in payload and "OPENAI_BASE_URL" in env_map:
            payload["api_base_url"] = env_map["OPENAI_BASE_URL"]

        if normalize_optional_string(payload.get("input_pdf")) is None:
            raise ValueError(f"Environment variable `{prefix}INPUT_PDF` is required.")

        config = ConfigLoader._build_config(payload, "environment")
        config.runtime_sources = RuntimeConfigSources(
            env={
                key: value
                for key, value in env_map.items()
                if key in ConfigLoader._RUNTIME_ENV_KEYS
                and normalize_optional_string(value) is not None
            }
        )
        return config

    @staticmethod
    def _build_config(payload: Mapping[str, Any], source_label: str) -> TranslatorConfig:
        """Build a validated config from a normalized mapping payload."""

        input_pdf = normalize_optional_string(payload.get("input_pdf"))
        if input_pdf is None:
            raise ValueError(f"{source_label} requires non-empty `input_pdf`.")

        values: dict[str, Any] = {"input_pdf": Path(input_pdf)}
        output_dir = normalize_optional_string(payload.get("output_dir"))
        if output_dir is not None:
            values["output_dir"] = Path(output_dir)

        for key in _STRING_FIELDS:
            value = normalize_optional_string(payload.get(key))
            if value is not None:
                values[key] = value
        for key in _INT_FIELDS:
            value = ConfigLoader._parse_field(payload, key, source_label, integer=True)
            if value is not None:
                values[key] = value
        for key in _FLOAT_FIELDS:
            value = ConfigLoader._parse_field(payload, key, source_label, integer=False)
            if value is not None:
                values[key] = value
        values["extra"] = ConfigLoader._optional_string_map(payload, "extra", source_label)

        config = TranslatorConfig(**values)
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{source_label}: {exc}") from exc
        return config

    @staticmethod
    def _parse_field(
        payload: Mapping[str, Any], key: str, source_label: str, *, integer: bool
    ) -> int | float | None:
        """Parse one numeric payload field with a source-labelled error message."""

        if key not in payload:
            return None
        try:
            return parse_number(payload[key], key, integer=integer)
        except ValueError as exc:
            raise ValueError(f"{source_label} field {exc}") from exc

    @staticmethod
    def _validate_yaml_keys(payload: Mapping[str, Any], source_label: str) -> None:
        """Validate supported and required YAML keys."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        missing = sorted(key for key in ConfigLoader._REQUIRED_YAML_KEYS if key not in payload)
        if missing:
            key_list = ", ".join(missing)
            raise ValueError(f"{source_label} is missing required key(s): {key_list}.")

    @staticmethod
    def _optional_string_map(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> dict[str, str]:
        """Read an optional mapping with non-empty string keys and values."""

        raw = payload.get(key)
        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise ValueError(f"{source_label} field `{key}` must be a mapping/object.")

        normalized: dict[str, str] = {}
        for raw_key, raw_value in raw.items():
            key_value = normalize_optional_string(raw_key)
            value_value = normalize_optional_string(raw_value)
            if key_value is None:
                raise ValueError(f"{source_label} field `{key}` contains a blank key.")
            if value_value is None:
                raise ValueError(
                    f"{source_label} field `{key}` contains blank value for `{key_value}`."
                )
            normalized[key_value] = value_value
        return normalized
