"""Merge executor: assembles the deck from settled generation outcomes."""

import logging

from src.core.errors import PartialGenerationDegraded

from ..constants import PipelinePhase
from ..merge import failed_slide_ids, merge_deck
from ..state import PipelineState
from .base import PipelineExecutor, timed_operation, transition_to_phase

logger = logging.getLogger(__name__)


class MergeExecutor(PipelineExecutor):
    phase = PipelinePhase.MERGING

    async def handle(self, state: PipelineState) -> None:
        """Execute the merge phase."""
        state.progress.phase_started(self.phase)

        with timed_operation() as timing:
            state.deck = merge_deck(
                state.user_input,
                state.outline,
                state.content_outcomes,
                state.design_outcomes,
                state.theme,
            )

        placeholders = failed_slide_ids(state.outline, state.content_outcomes)
        if placeholders:
            degraded = PartialGenerationDegraded(
                f"{len(placeholders)} of {len(state.deck.slides)} slides use placeholder content",
                failed_slide_ids=placeholders,
            )
            logger.warning(degraded.message)
            state.add_warning(degraded.to_warning())

        logger.debug(f"Merge took {timing['duration_ms']}ms")
        state.progress.deck_merged(len(state.deck.slides), placeholders)
        transition_to_phase(state, PipelinePhase.LAYOUT, "deck assembled")
