"""CLI provider runtime resolution helpers.

This module isolates the API-key prompt flow, runtime source assembly, and
secure API-key persistence from the command wiring layer.
"""

from __future__ import annotations

from typing import Callable, Protocol

import typer

from .credentials import create_credential_store
from .errors import PipelineStageError
from .parsing import normalize_optional_string


class CredentialStoreProtocol(Protocol):
    """Credential store operations used by CLI runtime resolution."""

    def get_api_key(self) -> str | None:
        """Return currently stored API key, if available."""

    def set_api_key(self, api_key: str) -> None:
        """Persist API key value in secure storage."""


def prompt_for_api_key() -> str | None:
    """Ask for an API key with hidden input; blank input returns `None`."""

    return normalize_optional_string(
        typer.prompt(
            "OpenAI API key (hidden; leave blank to skip)",
            default="",
            hide_input=True,
            show_default=False,
        )
    )


def resolve_provider_runtime_sources(
    provider: str | None,
    model: str | None,
    api_base_url: str | None,
    api_key: str | None,
    prompt_api_key: bool,
    store_api_key: bool,
    credential_store_factory: Callable[[], CredentialStoreProtocol] = create_credential_store,
) -> tuple[dict[str, str], dict[str, str]]:
    """Resolve CLI and secure runtime source mappings for provider configuration.

    Returns:
        Tuple of `(cli_values, secure_values)` suitable for `RuntimeConfigSources`.

    Raises:
        PipelineStageError: If storing a newly entered API key fails.
    """

    runtime_cli_values: dict[str, str] = {}
    for key, value in (
        ("provider", provider),
        ("model", model),
        ("api_base_url", api_base_url),
        ("api_key", api_key),
    ):
        normalized = normalize_optional_string(value)
        if normalized is not None:
            runtime_cli_values[key] = normalized

    if prompt_api_key and "api_key" not in runtime_cli_values:
        prompted = prompt_for_api_key()
        if prompted is not None:
            runtime_cli_values["api_key"] = prompted

    credential_store = credential_store_factory()
    runtime_secure_values: dict[str, str] = {}
    stored_api_key = credential_store.get_api_key()
    if stored_api_key is not None:
        runtime_secure_values["api_key"] = stored_api_key

    if store_api_key and "api_key" in runtime_cli_values:
        try:
            credential_store.set_api_key(runtime_cli_values["api_key"])
        except (RuntimeError, ValueError) as exc:
            raise PipelineStageError(
                stage="credentials",
                detail=f"Failed to store API key securely: {exc}",
                hint=(
                    "Install and configure a keyring backend, or rerun with "
                    "`--no-store-api-key` for one-off usage."
                ),
            ) from exc
        typer.echo("Stored API key in secure credential storage.")

    return runtime_cli_values, runtime_secure_values
