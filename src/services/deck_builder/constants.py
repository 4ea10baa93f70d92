"""Constants for the deck generation pipeline."""
from enum import StrEnum


class PipelinePhase(StrEnum):
    """Phases of the deck generation state machine."""
    OUTLINING = "outlining"
    GENERATING = "generating"
    MERGING = "merging"
    LAYOUT = "layout"
    LINTING = "linting"
    FIXING = "fixing"
    RENDERING = "rendering"
    DONE = "done"
    FAILED = "failed"


TERMINAL_PHASES = frozenset({PipelinePhase.DONE, PipelinePhase.FAILED})

# Every phase may also move to FAILED.
ALLOWED_TRANSITIONS: dict[PipelinePhase, frozenset[PipelinePhase]] = {
    PipelinePhase.OUTLINING: frozenset({PipelinePhase.GENERATING}),
    PipelinePhase.GENERATING: frozenset({PipelinePhase.MERGING}),
    PipelinePhase.MERGING: frozenset({PipelinePhase.LAYOUT}),
    PipelinePhase.LAYOUT: frozenset({PipelinePhase.LINTING}),
    PipelinePhase.LINTING: frozenset({PipelinePhase.FIXING, PipelinePhase.RENDERING, PipelinePhase.DONE}),
    PipelinePhase.FIXING: frozenset({PipelinePhase.LAYOUT}),
    PipelinePhase.RENDERING: frozenset({PipelinePhase.DONE}),
    PipelinePhase.DONE: frozenset(),
    PipelinePhase.FAILED: frozenset(),
}

# Progress percentage reported when a phase starts.
PHASE_PROGRESS: dict[PipelinePhase, int] = {
    PipelinePhase.OUTLINING: 5,
    PipelinePhase.GENERATING: 20,
    PipelinePhase.MERGING: 55,
    PipelinePhase.LAYOUT: 60,
    PipelinePhase.LINTING: 70,
    PipelinePhase.FIXING: 80,
    PipelinePhase.RENDERING: 90,
    PipelinePhase.DONE: 100,
    PipelinePhase.FAILED: 100,
}

# Phases whose unexpected errors count as generation failures; anything
# later is a deterministic stage and reports a layout invariant violation.
GENERATION_PHASES = frozenset({PipelinePhase.OUTLINING, PipelinePhase.GENERATING, PipelinePhase.MERGING})
