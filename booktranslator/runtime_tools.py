"""External executable resolution for PDF tooling.

Responsibilities:
- Resolve poppler command paths (`pdftotext`) with bundled-first precedence.
- Report whether a tool is available so extraction can pick a strategy.
"""

from __future__ import annotations

from pathlib import Path
import shutil
import sys


def resolve_executable(command_name: str) -> str:
    """Resolve an executable path, preferring a bundled copy over `PATH`.

    Resolution order:
    1. `<app root>/bin/<tool>` then `<app root>/<tool>` (with a `.exe` variant).
    2. System `PATH`.
    3. The raw command name, so subprocess raises its native missing-binary error.
    """

    normalized = command_name.strip()
    if not normalized:
        return command_name

    app_root = _app_root()
    for name in (normalized, f"{normalized}.exe"):
        for candidate in (app_root / "bin" / name, app_root / name):
            if candidate.is_file():
                return str(candidate)

    return shutil.which(normalized) or normalized


def executable_available(command_name: str) -> bool:
    """Return whether `command_name` resolves to an existing executable."""

    resolved = resolve_executable(command_name)
    return Path(resolved).is_file() or shutil.which(resolved) is not None


def _app_root() -> Path:
    """Resolve application root for frozen and source-tree execution."""

    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]
