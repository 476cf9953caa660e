"""Command-line interface for Booktranslator.

Responsibilities:
- Expose user-facing commands for translation runs and chapter inspection.
- Convert CLI arguments into `TranslatorConfig` and execute the pipeline.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from dataclasses import replace
import os
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    echo_chapter_list,
    echo_chapter_source,
    echo_run_summary,
    exit_with_command_error,
)
from .cli_runtime import prompt_for_api_key, resolve_provider_runtime_sources
from .config import ConfigLoader, RuntimeConfigSources, TranslatorConfig
from .credentials import create_credential_store
from .errors import PipelineStageError
from .models.datatypes import Chapter
from .pipeline import BookTranslatorPipeline
from .telemetry.logger import RunLogger

app = typer.Typer(
    name="booktranslator",
    no_args_is_help=True,
    help="Translate PDF books chapter by chapter with an LLM.",
)


class BuildProgressIndicator:
    """Render deterministic stage and chapter progress lines for long-running commands."""

    _SPINNER_FRAMES = "|/-\\"

    def __init__(self, command_name: str) -> None:
        """Initialize progress indicator metadata for a command invocation."""

        self._command_name = command_name

    def on_stage_start(self, stage_name: str, stage_index: int, stage_total: int) -> None:
        """Print one progress line for a stage start transition."""

        spinner = self._SPINNER_FRAMES[(stage_index - 1) % len(self._SPINNER_FRAMES)]
        typer.echo(
            f"[progress] command={self._command_name} "
            f"{spinner} {stage_index}/{stage_total} stage={stage_name}"
        )

    def on_chapter_start(self, chapter: Chapter, position: int, total: int) -> None:
        """Print one progress line before a chapter is translated."""

        typer.echo(
            f"[progress] command={self._command_name} chapter {position}/{total} "
            f"[{chapter.number}] {chapter.title} ({len(chapter.content)} chars)"
        )


def _load_yaml_config(config_path: Path | None) -> TranslatorConfig | None:
    """Load a YAML config file when requested and map failures to stage errors."""

    if config_path is None:
        return None

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except OSError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify file permissions.",
        ) from exc


def _resolve_command_base_config(
    config_file: Path | None,
    input_pdf: Path | None,
    out: Path | None,
    start: int | None,
    end: int | None,
    language: str | None,
    max_chunk_chars: int | None,
    overlap_chars: int | None,
) -> TranslatorConfig:
    """Resolve effective command config from YAML defaults and explicit CLI overrides."""

    loaded_config = _load_yaml_config(config_file)
    if loaded_config is None:
        if input_pdf is None:
            raise PipelineStageError(
                stage="config",
                detail="Input PDF path is required when `--config` is not provided.",
                hint="Pass `<input.pdf>` or use `--config <path.yaml>` with `input_pdf`.",
            )
        loaded_config = TranslatorConfig(input_pdf=input_pdf)

    overrides: dict[str, object] = {}
    for key, value in (
        ("input_pdf", input_pdf),
        ("output_dir", out),
        ("start_chapter", start),
        ("end_chapter", end),
        ("target_language", language),
        ("max_chunk_chars", max_chunk_chars),
        ("overlap_chars", overlap_chars),
    ):
        if value is not None:
            overrides[key] = value
    return replace(loaded_config, **overrides)


@app.command("translate")
def translate_command(
    input_pdf: Annotated[
        Path | None,
        typer.Argument(
            help="Path to source PDF. Required unless provided by `--config`.",
        ),
    ] = None,
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Output directory (overrides config file value)."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with run defaults."),
    ] = None,
    start: Annotated[
        int | None,
        typer.Option("--start", help="1-based index of the first chapter to translate."),
    ] = None,
    end: Annotated[
        int | None,
        typer.Option("--end", help="1-based index of the last chapter to translate (inclusive)."),
    ] = None,
    language: Annotated[
        str | None,
        typer.Option("--language", help="Target language name, e.g. `German`."),
    ] = None,
    provider: Annotated[
        str | None, typer.Option("--provider", help="Translation provider id.")
    ] = None,
    model: Annotated[
        str | None, typer.Option("--model", help="Translation model id override.")
    ] = None,
    api_base_url: Annotated[
        str | None,
        typer.Option("--api-base-url", help="OpenAI-compatible API base URL override."),
    ] = None,
    api_key: Annotated[
        str | None,
        typer.Option(
            "--api-key",
            help="Provider API key override. Prefer `--prompt-api-key` to avoid shell history.",
        ),
    ] = None,
    prompt_api_key: Annotated[
        bool,
        typer.Option(
            "--prompt-api-key",
            help="Prompt for API key with hidden input (never echoed).",
        ),
    ] = False,
    store_api_key: Annotated[
        bool,
        typer.Option(
            "--store-api-key/--no-store-api-key",
            help="Persist CLI-entered API key to secure credential storage.",
        ),
    ] = True,
    max_chunk_chars: Annotated[
        int | None,
        typer.Option("--max-chunk-chars", help="Maximum characters per translation chunk."),
    ] = None,
    overlap_chars: Annotated[
        int | None,
        typer.Option("--overlap-chars", help="Characters repeated between adjacent chunks."),
    ] = None,
) -> None:
    """Translate a PDF book chapter by chapter."""

    try:
        runtime_cli_values, runtime_secure_values = resolve_provider_runtime_sources(
            provider=provider,
            model=model,
            api_base_url=api_base_url,
            api_key=api_key,
            prompt_api_key=prompt_api_key,
            store_api_key=store_api_key,
            credential_store_factory=create_credential_store,
        )
        base_config = _resolve_command_base_config(
            config_file=config_file,
            input_pdf=input_pdf,
            out=out,
            start=start,
            end=end,
            language=language,
            max_chunk_chars=max_chunk_chars,
            overlap_chars=overlap_chars,
        )
        config = replace(
            base_config,
            runtime_sources=RuntimeConfigSources(
                cli=runtime_cli_values,
                secure=runtime_secure_values,
                env=os.environ,
            ),
        )
        progress = BuildProgressIndicator(command_name="translate")
        pipeline = BookTranslatorPipeline(
            run_logger=RunLogger(),
            stage_progress_callback=progress.on_stage_start,
            chapter_progress_callback=progress.on_chapter_start,
        )
        report = pipeline.run(config)
    except Exception as exc:
        exit_with_command_error("translate", exc)

    echo_run_summary(report)
    if report.combined_path is None:
        typer.secho(
            "translate failed: no chapter was translated successfully.",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)


@app.command("list-chapters")
def list_chapters_command(
    input_pdf: Annotated[Path, typer.Argument(help="Path to source PDF.")],
    section_chars: Annotated[
        int,
        typer.Option(
            "--section-chars",
            help="Block size used when the text has no chapter markers.",
        ),
    ] = 15_000,
) -> None:
    """List detected chapters with their 1-based positions for `--start`/`--end`."""

    try:
        config = TranslatorConfig(input_pdf=input_pdf, section_chars=section_chars)
        chapters, source = BookTranslatorPipeline().list_chapters(config)
    except Exception as exc:
        exit_with_command_error("list-chapters", exc)

    echo_chapter_source(source)
    echo_chapter_list(chapters)


@app.command("credentials")
def credentials_command(
    set_api_key: Annotated[
        bool,
        typer.Option(
            "--set-api-key",
            help="Prompt for API key with hidden input and store it securely.",
        ),
    ] = False,
    clear_api_key: Annotated[
        bool,
        typer.Option(
            "--clear-api-key",
            help="Clear stored API key from secure credential storage.",
        ),
    ] = False,
) -> None:
    """Manage the securely stored provider API key."""

    if set_api_key and clear_api_key:
        exit_with_command_error(
            "credentials",
            PipelineStageError(
                stage="credentials",
                detail="`--set-api-key` and `--clear-api-key` cannot be used together.",
                hint="Run one credentials action per command invocation.",
            ),
        )

    credential_store = create_credential_store()
    if set_api_key:
        prompted_api_key = prompt_for_api_key()
        if prompted_api_key is None:
            exit_with_command_error(
                "credentials",
                PipelineStageError(
                    stage="credentials",
                    detail="No API key entered.",
                    hint="Provide a non-empty API key when using `--set-api-key`.",
                ),
            )
        try:
            credential_store.set_api_key(prompted_api_key)
        except (RuntimeError, ValueError) as exc:
            exit_with_command_error(
                "credentials",
                PipelineStageError(
                    stage="credentials",
                    detail=f"Failed to store API key securely: {exc}",
                    hint="Install and configure a keyring backend and retry.",
                ),
            )
        typer.echo("API key stored in secure credential storage.")
        return

    if clear_api_key:
        if credential_store.clear_api_key():
            typer.echo("Stored API key cleared from secure credential storage.")
        else:
            typer.echo("No stored API key found in secure credential storage.")
        return

    availability = "available" if credential_store.is_available() else "unavailable"
    status = "present" if credential_store.get_api_key() is not None else "not set"
    typer.echo(f"Secure credential storage: {availability}")
    typer.echo(f"Stored OpenAI API key: {status}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
