"""Render executor: writes the finished deck through the configured renderer."""

import logging
from pathlib import Path

from src.core.errors import LayoutInvariantViolation
from src.models import RenderResult
from src.services.renderer import Renderer

from ..constants import PipelinePhase
from ..helpers import sanitize_filename
from ..state import PipelineState
from .base import PipelineExecutor, transition_to_phase

logger = logging.getLogger(__name__)


class RenderExecutor(PipelineExecutor):
    """Renders only a deck whose layout covers every block."""

    phase = PipelinePhase.RENDERING

    def __init__(self, renderer: Renderer):
        self._renderer = renderer

    async def handle(self, state: PipelineState) -> None:
        """Execute the render phase."""
        state.progress.phase_started(self.phase)
        deck, layout_result = state.deck, state.layout
        if layout_result is None or not layout_result.covers(deck):
            raise LayoutInvariantViolation("Refusing to render a deck with unplaced blocks")

        output_dir = Path(state.config.output_dir)
        stem = sanitize_filename(state.user_input.topic)

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            if state.config.save_spec:
                spec_path = output_dir / f"{stem}.spec.json"
                spec_path.write_text(deck.model_dump_json(indent=2), encoding="utf-8")
                logger.info(f"Saved deck document to {spec_path}")
        except OSError as e:
            result = RenderResult(success=False, error=f"Cannot write to {output_dir}: {e}")
        else:
            result = self._renderer.render(deck, layout_result, state.theme, output_dir / f"{stem}.pptx")

        state.render = result
        if result.success:
            logger.info(f"Rendered {result.slide_count} slides to {result.output_path}")
        else:
            logger.error(f"Rendering failed: {result.error}")

        state.progress.render_completed(
            result.success,
            str(result.output_path) if result.output_path else None,
            result.error,
        )
        transition_to_phase(state, PipelinePhase.DONE, "rendered" if result.success else "render failed")
