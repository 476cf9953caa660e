"""Telemetry for translation runs.

This package emits deterministic run events for auditing.
"""

from .logger import RunLogger

__all__ = ["RunLogger"]
