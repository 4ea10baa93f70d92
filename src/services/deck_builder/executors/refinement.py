"""Layout, lint and fix executors: the bounded auto-fix loop."""

import logging
from typing import Optional

from src.core.errors import UnresolvedLintError
from src.services.layout import layout
from src.services.style_guardian import StyleGuardian, apply_patches

from ..constants import PipelinePhase
from ..state import PipelineState
from .base import PipelineExecutor, has_exhausted_iterations, transition_to_phase

logger = logging.getLogger(__name__)


class LayoutExecutor(PipelineExecutor):
    """Lays out the current deck snapshot. Every call counts toward the loop bound."""

    phase = PipelinePhase.LAYOUT

    async def handle(self, state: PipelineState) -> None:
        state.progress.phase_started(self.phase, state.iteration)
        state.layout = layout(state.deck, state.theme)
        state.layout_calls += 1

        overflowing = [s.slide_id for s in state.layout.slides if s.has_overflow]
        if overflowing:
            logger.info(f"Layout pass {state.iteration}: overflow on {', '.join(overflowing)}")
        state.progress.layout_completed(state.iteration, overflowing)
        transition_to_phase(state, PipelinePhase.LINTING, "layout ready")


class LintExecutor(PipelineExecutor):
    """Lints the laid-out deck and decides whether another fix iteration runs."""

    phase = PipelinePhase.LINTING

    def __init__(self, guardian: StyleGuardian, render_enabled: bool):
        self._guardian = guardian
        self._render_enabled = render_enabled

    async def handle(self, state: PipelineState) -> None:
        """Execute the lint phase."""
        state.progress.phase_started(self.phase, state.iteration)
        lint = self._guardian.lint(state.deck, state.layout, state.theme)
        state.lint = lint
        state.progress.lint_completed(state.iteration, lint.error_count, lint.warning_count, len(lint.patches))

        if not lint.has_errors:
            self._finish(state, "lint clean")
            return

        stop_reason = self._stop_reason(state)
        if stop_reason is None:
            transition_to_phase(state, PipelinePhase.FIXING, "patches available")
            return

        first = lint.errors[0]
        unresolved = UnresolvedLintError(
            f"{lint.error_count} error-severity violations remain after "
            f"{state.iteration} fix iterations ({stop_reason})",
            slide_id=first.slide_id,
            rule_id=first.rule_id,
        )
        if state.config.stop_on_lint_error:
            raise unresolved

        logger.warning(unresolved.message)
        state.add_warning(unresolved.to_warning())
        self._finish(state, stop_reason)

    # =========================================================================
    # Loop Control
    # =========================================================================

    def _stop_reason(self, state: PipelineState) -> Optional[str]:
        """Why the fix loop stops with errors left, or None to keep fixing."""
        if not state.config.auto_fix:
            return "auto-fix disabled"
        if has_exhausted_iterations(state, state.config.max_lint_iterations):
            return "iterations exhausted"
        if not state.lint.patches:
            return "no applicable patches"
        return None

    def _finish(self, state: PipelineState, condition: str) -> None:
        if self._render_enabled and state.config.render:
            transition_to_phase(state, PipelinePhase.RENDERING, condition)
        else:
            transition_to_phase(state, PipelinePhase.DONE, condition)


class FixExecutor(PipelineExecutor):
    """Applies the planned patches to produce the next deck snapshot."""

    phase = PipelinePhase.FIXING

    async def handle(self, state: PipelineState) -> None:
        state.progress.phase_started(self.phase, state.iteration)
        patch_ids = [p.id for p in state.lint.patches]
        state.deck = apply_patches(state.deck, state.lint)
        state.iteration += 1

        logger.info(f"Fix iteration {state.iteration}: applied {', '.join(patch_ids)}")
        state.progress.patches_applied(state.iteration, patch_ids, len(state.deck.slides))
        transition_to_phase(state, PipelinePhase.LAYOUT, "patches applied")
