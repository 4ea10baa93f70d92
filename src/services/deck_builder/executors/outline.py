"""Outline executor: asks the reasoning gateway for the deck plan."""

import asyncio
import logging

from src.core.errors import GenerationFailed
from src.services.reasoning import ReasoningGateway

from ..constants import PipelinePhase
from ..state import PipelineState
from .base import PipelineExecutor, timed_operation, transition_to_phase

logger = logging.getLogger(__name__)


class OutlineExecutor(PipelineExecutor):
    """Produces the OutlineResult every later phase is built from."""

    phase = PipelinePhase.OUTLINING

    def __init__(self, gateway: ReasoningGateway):
        self._gateway = gateway

    async def handle(self, state: PipelineState) -> None:
        """Execute the outline phase."""
        state.progress.phase_started(self.phase)
        timeout = state.config.outline_timeout_seconds

        with timed_operation() as timing:
            try:
                outline = await asyncio.wait_for(
                    self._gateway.generate_outline(state.user_input, state.theme),
                    timeout=timeout,
                )
            except asyncio.TimeoutError:
                raise GenerationFailed(f"Outline generation timed out after {timeout:g}s")
            except GenerationFailed:
                raise
            except Exception as e:
                raise GenerationFailed(f"Outline generation failed: {e}") from e

        state.outline = outline
        logger.info(f"Outline ready: '{outline.title}' with {len(outline.slides)} slides ({timing['duration_ms']}ms)")
        state.progress.outline_completed(outline.title, len(outline.slides), timing["duration_ms"])

        transition_to_phase(state, PipelinePhase.GENERATING, "outline ready")
