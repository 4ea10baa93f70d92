"""Base utilities for pipeline executors."""
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Generator

from ..constants import ALLOWED_TRANSITIONS, PipelinePhase
from ..state import PipelineState


class PipelineExecutor(ABC):
    """One node of the pipeline state machine.

    ``handle`` does the phase's work against the state and moves it to the
    next phase. Executors raise ``DeckPipelineError`` subclasses on failure.
    """

    phase: PipelinePhase

    @abstractmethod
    async def handle(self, state: PipelineState) -> None:
        ...


@contextmanager
def timed_operation() -> Generator[dict, None, None]:
    """Context manager for timing operations."""
    timing = {"start": time.time(), "duration_ms": 0}
    try:
        yield timing
    finally:
        timing["duration_ms"] = int((time.time() - timing["start"]) * 1000)


def has_exhausted_iterations(state: PipelineState, max_iterations: int) -> bool:
    """Check whether the fix loop has used up its iterations."""
    return state.iteration >= max_iterations


def transition_to_phase(state: PipelineState, to_phase: PipelinePhase, condition: str) -> None:
    """Move the pipeline to a new phase, refusing edges the state machine does not have."""
    if to_phase not in ALLOWED_TRANSITIONS[state.phase]:
        raise RuntimeError(f"Illegal pipeline transition {state.phase} -> {to_phase}")
    state.progress.edge_transition(from_phase=str(state.phase), to_phase=str(to_phase), condition=condition)
    state.phase = to_phase
