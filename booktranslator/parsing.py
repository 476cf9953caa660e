"""Shared parsing helpers for configuration and CLI value normalization."""

from __future__ import annotations


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_number(value: object, field_name: str, *, integer: bool) -> int | float | None:
    """Parse an optional numeric config value.

    Booleans are rejected even though they are `int` subclasses, so that a YAML
    `true` never silently becomes a chunk size of 1.

    Args:
        value: Raw value from YAML, environment, or CLI.
        field_name: Field name used in validation messages.
        integer: Whether the value must be an integer.

    Returns:
        Parsed number, or `None` when the value is blank.

    Raises:
        ValueError: If the value cannot be parsed as the requested number type.
    """

    kind = "an integer" if integer else "a number"
    if isinstance(value, bool):
        raise ValueError(f"`{field_name}` must be {kind}.")
    if isinstance(value, int) and integer:
        return value
    if isinstance(value, (int, float)) and not integer:
        return float(value)

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None
    try:
        return int(normalized, 10) if integer else float(normalized)
    except ValueError as exc:
        raise ValueError(f"`{field_name}` must be {kind}.") from exc
