"""Generation executor: per-slide content and design fan-out."""

import asyncio
import logging
from typing import Awaitable, Optional

from src.core.errors import GenerationFailed
from src.services.reasoning import Err, GenerationOutcome, Ok, ReasoningGateway

from ..constants import PipelinePhase
from ..state import PipelineState
from .base import PipelineExecutor, timed_operation, transition_to_phase

logger = logging.getLogger(__name__)

TIMEOUT_REASON = "timeout"


async def settle(
    index: int,
    task: Awaitable,
    timeout: float,
    semaphore: Optional[asyncio.Semaphore] = None,
) -> GenerationOutcome:
    """Await one gateway call and fold its result into Ok or Err.

    A task never raises: failures and timeouts become ``Err`` so that one
    slide cannot cancel its siblings.
    """
    try:
        if semaphore is None:
            value = await asyncio.wait_for(task, timeout=timeout)
        else:
            async with semaphore:
                value = await asyncio.wait_for(task, timeout=timeout)
    except asyncio.TimeoutError:
        return Err(index, TIMEOUT_REASON)
    except Exception as e:
        return Err(index, str(e) or type(e).__name__)
    return Ok(index, value)


class GenerationExecutor(PipelineExecutor):
    """Runs content and design generation for every outline slide concurrently."""

    phase = PipelinePhase.GENERATING

    def __init__(self, gateway: ReasoningGateway):
        self._gateway = gateway

    async def handle(self, state: PipelineState) -> None:
        """Execute the generation phase."""
        state.progress.phase_started(self.phase)
        config = state.config
        slides = state.outline.slides
        semaphore = asyncio.Semaphore(config.max_concurrency) if config.max_concurrency else None
        timeout = config.generation_timeout_seconds
        tone = state.user_input.tone

        with timed_operation() as timing:
            content_tasks = [
                settle(i, self._gateway.generate_content(s, tone), timeout, semaphore)
                for i, s in enumerate(slides)
            ]
            design_tasks = [
                settle(i, self._gateway.generate_design(s, state.theme), timeout, semaphore)
                for i, s in enumerate(slides)
            ]
            outcomes = await asyncio.gather(*content_tasks, *design_tasks)

        state.content_outcomes = list(outcomes[:len(slides)])
        state.design_outcomes = list(outcomes[len(slides):])
        self._report(state, timing["duration_ms"])

        if not any(isinstance(o, Ok) for o in state.content_outcomes):
            raise GenerationFailed(f"Content generation failed for all {len(slides)} slides")

        transition_to_phase(state, PipelinePhase.MERGING, "generation settled")

    # =========================================================================
    # Reporting
    # =========================================================================

    def _report(self, state: PipelineState, duration_ms: int) -> None:
        for task, outcomes in (("content", state.content_outcomes), ("design", state.design_outcomes)):
            for outcome in outcomes:
                if isinstance(outcome, Err):
                    logger.warning(f"Slide {outcome.index + 1} {task} generation failed: {outcome.reason}")
                    state.progress.generation_task_failed(outcome.index, task, outcome.reason)

        succeeded = sum(1 for o in state.content_outcomes if isinstance(o, Ok))
        failed = len(state.content_outcomes) - succeeded
        logger.info(f"Generation settled: {succeeded} ok, {failed} failed ({duration_ms}ms)")
        state.progress.generation_completed(succeeded, failed, duration_ms)
