"""Progress event emission for the deck generation pipeline."""
from typing import Any, Callable, Optional

from .constants import PHASE_PROGRESS, PipelinePhase

EventCallback = Callable[[dict], Any]

PHASE_DESCRIPTIONS: dict[PipelinePhase, str] = {
    PipelinePhase.OUTLINING: "Planning the deck outline",
    PipelinePhase.GENERATING: "Generating slide content and design hints",
    PipelinePhase.MERGING: "Assembling the deck",
    PipelinePhase.LAYOUT: "Computing slide layout",
    PipelinePhase.LINTING: "Checking style rules",
    PipelinePhase.FIXING: "Applying auto-fix patches",
    PipelinePhase.RENDERING: "Rendering the presentation",
    PipelinePhase.DONE: "Deck complete",
    PipelinePhase.FAILED: "Deck generation failed",
}


class PipelineEventEmitter:
    """Emits progress events for pipeline observers.

    Executors call these methods instead of building event dicts inline, so
    the event vocabulary lives in one place.
    """

    def __init__(self, callback: Optional[EventCallback] = None):
        self._callback = callback

    def _emit(self, event_type: str, **data) -> None:
        if self._callback:
            self._callback({"type": event_type, **data})

    def pipeline_started(self, topic: str, slide_count: int) -> None:
        self._emit("pipeline_start", topic=topic, slide_count=slide_count, progress=0)

    def phase_started(self, phase: PipelinePhase, iteration: int = 0) -> None:
        self._emit("phase", phase=str(phase), iteration=iteration,
                   progress=PHASE_PROGRESS[phase], description=PHASE_DESCRIPTIONS[phase])

    def edge_transition(self, from_phase: str, to_phase: str, condition: str) -> None:
        self._emit("transition", from_phase=from_phase, to_phase=to_phase, condition=condition)

    def outline_completed(self, title: str, slide_count: int, duration_ms: int) -> None:
        self._emit("outline_complete", title=title, slide_count=slide_count, duration_ms=duration_ms)

    def generation_task_failed(self, index: int, task: str, reason: str) -> None:
        self._emit("generation_task_failed", index=index, task=task, reason=reason)

    def generation_completed(self, succeeded: int, failed: int, duration_ms: int) -> None:
        self._emit("generation_complete", succeeded=succeeded, failed=failed, duration_ms=duration_ms)

    def deck_merged(self, slide_count: int, placeholder_ids: list[str]) -> None:
        self._emit("deck_merged", slide_count=slide_count, placeholder_ids=placeholder_ids)

    def layout_completed(self, iteration: int, overflow_slide_ids: list[str]) -> None:
        self._emit("layout_complete", iteration=iteration, overflow_slide_ids=overflow_slide_ids)

    def lint_completed(self, iteration: int, errors: int, warnings: int, patches: int) -> None:
        self._emit("lint_completed", iteration=iteration, errors=errors, warnings=warnings, patches=patches)

    def patches_applied(self, iteration: int, patch_ids: list[str], slide_count: int) -> None:
        self._emit("patches_applied", iteration=iteration, patch_ids=patch_ids, slide_count=slide_count)

    def render_completed(self, success: bool, output_path: Optional[str], error: Optional[str]) -> None:
        self._emit("render_completed", success=success, output_path=output_path, error=error)

    def pipeline_completed(self, success: bool, slide_count: int, warnings: int, duration_ms: int) -> None:
        self._emit("pipeline_complete", success=success, slide_count=slide_count,
                   warnings=warnings, duration_ms=duration_ms, progress=100)

    def pipeline_failed(self, kind: str, message: str, phase: str) -> None:
        self._emit("pipeline_failed", kind=kind, message=message, phase=phase, progress=100)
