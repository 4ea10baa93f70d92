"""Core configuration module for DeckSmith."""

from .config import Settings, get_settings
from .logging import setup_logging
from .tracing import setup_tracing, is_tracing_enabled, get_tracer
from .errors import (
    DeckPipelineError,
    InvalidInput,
    GenerationFailed,
    PartialGenerationDegraded,
    LayoutInvariantViolation,
    InvalidTheme,
    UnresolvedLintError,
)

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "setup_tracing",
    "is_tracing_enabled",
    "get_tracer",
    "DeckPipelineError",
    "InvalidInput",
    "GenerationFailed",
    "PartialGenerationDegraded",
    "LayoutInvariantViolation",
    "InvalidTheme",
    "UnresolvedLintError",
]
