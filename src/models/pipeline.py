"""Pipeline configuration and result models."""
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .deck import Deck
from .layout import LayoutResult
from .lint import LintResult
from .theme import DEFAULT_THEME, Theme, theme_for_tone

if TYPE_CHECKING:
    from src.core.config import Settings

AspectRatio = Literal["16:9", "4:3", "16:10", "A4"]

# Canvas size in inches per aspect ratio.
ASPECT_RATIO_SIZES: dict[str, tuple[float, float]] = {
    "16:9": (13.333, 7.5),
    "4:3": (10.0, 7.5),
    "16:10": (12.0, 7.5),
    "A4": (11.69, 8.27),
}


class ErrorKind(StrEnum):
    INVALID_INPUT = "InvalidInput"
    GENERATION_FAILED = "GenerationFailed"
    PARTIAL_GENERATION_DEGRADED = "PartialGenerationDegraded"
    LAYOUT_INVARIANT_VIOLATION = "LayoutInvariantViolation"
    UNRESOLVED_LINT_ERROR = "UnresolvedLintError"


class SlideSize(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: float = Field(..., gt=0, description="Width in inches")
    height: float = Field(..., gt=0, description="Height in inches")


class PipelineConfig(BaseModel):
    """Per-request configuration. Immutable through the run."""
    model_config = ConfigDict(frozen=True)

    output_dir: Path = Path("output")
    auto_fix: bool = True
    max_lint_iterations: int = Field(default=3, ge=0)
    stop_on_lint_error: bool = False
    theme: Optional[Theme] = None
    slide_size: Optional[SlideSize] = None
    aspect_ratio: Optional[AspectRatio] = None
    outline_timeout_seconds: float = Field(default=120.0, gt=0)
    generation_timeout_seconds: float = Field(default=60.0, gt=0)
    max_concurrency: Optional[int] = Field(default=None, ge=1)
    render: bool = True
    save_spec: bool = False

    @classmethod
    def from_settings(cls, settings: "Settings", **overrides) -> "PipelineConfig":
        """Build a config from environment-backed settings."""
        values = {
            "output_dir": settings.output_dir,
            "auto_fix": settings.auto_fix,
            "max_lint_iterations": settings.max_lint_iterations,
            "stop_on_lint_error": settings.stop_on_lint_error,
            "aspect_ratio": settings.aspect_ratio,
            "outline_timeout_seconds": settings.outline_timeout_seconds,
            "generation_timeout_seconds": settings.generation_timeout_seconds,
            "max_concurrency": settings.generation_concurrency,
            "save_spec": settings.save_spec,
        }
        values.update(overrides)
        return cls(**values)

    def resolve_theme(self, tone: Optional[str] = None) -> Theme:
        """
        Resolve the read-only theme for a run.

        The explicit theme override wins over the tone preset; an explicit
        slide size wins over the aspect ratio.
        """
        if self.theme is not None:
            theme = self.theme
        elif tone is not None:
            theme = theme_for_tone(tone)
        else:
            theme = DEFAULT_THEME

        if self.slide_size is not None:
            return theme.with_canvas(self.slide_size.width, self.slide_size.height)
        if self.aspect_ratio is not None:
            width, height = ASPECT_RATIO_SIZES[self.aspect_ratio]
            return theme.with_canvas(width, height)
        return theme


class PipelineFailure(BaseModel):
    """Structured failure naming exactly one error kind."""
    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str
    slide_id: Optional[str] = None
    rule_id: Optional[str] = None


class PipelineWarning(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str
    slide_id: Optional[str] = None
    rule_id: Optional[str] = None
    slide_ids: list[str] = Field(default_factory=list)


class RenderResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    output_path: Optional[Path] = None
    error: Optional[str] = None
    slide_count: int = 0
    duration_ms: int = 0


class PipelineResult(BaseModel):
    """Outcome of one generation request."""
    model_config = ConfigDict(frozen=True)

    success: bool
    deck: Optional[Deck] = None
    layout: Optional[LayoutResult] = None
    lint: Optional[LintResult] = None
    iterations: int = 0
    layout_calls: int = 0
    warnings: list[PipelineWarning] = Field(default_factory=list)
    failure: Optional[PipelineFailure] = None
    render: Optional[RenderResult] = None
    step_timings: dict[str, int] = Field(default_factory=dict)
    duration_ms: int = 0

    def has_warning(self, kind: ErrorKind) -> bool:
        return any(w.kind == kind for w in self.warnings)
