"""Pipeline state for deck generation."""

from typing import Optional

from pydantic import BaseModel, Field, PrivateAttr

from src.models import (
    Deck,
    LayoutResult,
    LintResult,
    PipelineConfig,
    PipelineWarning,
    RenderResult,
    Theme,
    UserInput,
)
from src.services.reasoning.models import GenerationOutcome, OutlineResult

from .events import EventCallback, PipelineEventEmitter
from .constants import PipelinePhase


class PipelineState(BaseModel):
    """State that flows through every executor of the pipeline.

    Stage outputs (deck, layout, lint) are immutable snapshots; the state
    only ever swaps one snapshot for the next.
    """
    model_config = {"arbitrary_types_allowed": True}

    # Input context
    user_input: UserInput
    config: PipelineConfig
    theme: Theme

    # Stage outputs
    outline: Optional[OutlineResult] = None
    content_outcomes: list[GenerationOutcome] = Field(default_factory=list)
    design_outcomes: list[GenerationOutcome] = Field(default_factory=list)
    deck: Optional[Deck] = None
    layout: Optional[LayoutResult] = None
    lint: Optional[LintResult] = None
    render: Optional[RenderResult] = None

    # Loop tracking
    phase: PipelinePhase = PipelinePhase.OUTLINING
    iteration: int = 0
    layout_calls: int = 0
    warnings: list[PipelineWarning] = Field(default_factory=list)
    step_timings: dict[str, int] = Field(default_factory=dict)

    # Event infrastructure
    event_callback: Optional[EventCallback] = Field(default=None, exclude=True)
    _progress: Optional[PipelineEventEmitter] = PrivateAttr(default=None)
    events: list[dict] = Field(default_factory=list)

    def model_post_init(self, __context) -> None:
        self._progress = PipelineEventEmitter(self.emit_event)

    @property
    def progress(self) -> PipelineEventEmitter:
        return self._progress or PipelineEventEmitter(self.emit_event)

    def emit_event(self, event: dict) -> None:
        self.events.append(event)
        if self.event_callback:
            self.event_callback(event)

    def record_timing(self, phase: str, duration_ms: int) -> None:
        """Accumulate time spent in a phase (layout and lint run once per iteration)."""
        self.step_timings[phase] = self.step_timings.get(phase, 0) + duration_ms

    def add_warning(self, warning: PipelineWarning) -> None:
        self.warnings.append(warning)
