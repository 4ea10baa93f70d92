"""Error taxonomy for the deck generation pipeline.

Every failure the pipeline reports maps to exactly one ``ErrorKind``. Stages raise
these exceptions; ``DeckBuilderService.build`` converts them to structured
``PipelineFailure`` / ``PipelineWarning`` values so callers never see a raw exception.
"""
from typing import Optional

from src.models.pipeline import ErrorKind, PipelineFailure, PipelineWarning


class DeckPipelineError(Exception):
    """Base class for all pipeline errors."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        slide_id: Optional[str] = None,
        rule_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.slide_id = slide_id
        self.rule_id = rule_id

    def to_failure(self) -> PipelineFailure:
        return PipelineFailure(
            kind=self.kind,
            message=self.message,
            slide_id=self.slide_id,
            rule_id=self.rule_id,
        )

    def to_warning(self) -> PipelineWarning:
        return PipelineWarning(
            kind=self.kind,
            message=self.message,
            slide_id=self.slide_id,
            rule_id=self.rule_id,
        )


class InvalidInput(DeckPipelineError):
    """Malformed UserInput, Theme or PipelineConfig."""
    kind = ErrorKind.INVALID_INPUT


class GenerationFailed(DeckPipelineError):
    """Every per-slide content generation task failed, or the outline could not be produced."""
    kind = ErrorKind.GENERATION_FAILED


class PartialGenerationDegraded(DeckPipelineError):
    """Some per-slide tasks failed and were replaced by placeholders."""
    kind = ErrorKind.PARTIAL_GENERATION_DEGRADED

    def __init__(self, message: str, *, failed_slide_ids: Optional[list[str]] = None):
        super().__init__(message)
        self.failed_slide_ids = failed_slide_ids or []

    def to_warning(self) -> PipelineWarning:
        warning = super().to_warning()
        return warning.model_copy(update={"slide_ids": list(self.failed_slide_ids)})


class LayoutInvariantViolation(DeckPipelineError):
    """The layout stage met a state it refuses to guess about."""
    kind = ErrorKind.LAYOUT_INVARIANT_VIOLATION


class InvalidTheme(LayoutInvariantViolation):
    """Theme grid is degenerate (no columns, negative column width, no usable area)."""


class UnresolvedLintError(DeckPipelineError):
    """Error-severity violations remained after the fix loop was exhausted."""
    kind = ErrorKind.UNRESOLVED_LINT_ERROR
