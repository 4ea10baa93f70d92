"""Main Deck Builder Service."""

import asyncio
import logging
import time
from typing import AsyncIterator, Optional, Union

from dotenv import load_dotenv
from pydantic import ValidationError

from src.core.config import get_settings
from src.core.tracing import get_tracer
from src.core.errors import (
    DeckPipelineError,
    GenerationFailed,
    InvalidInput,
    LayoutInvariantViolation,
)
from src.models import PipelineConfig, PipelineResult, UserInput
from src.services.layout import GridSystem
from src.services.reasoning import ReasoningGateway, get_reasoning_gateway
from src.services.renderer import Renderer
from src.services.style_guardian import StyleGuardian, get_style_guardian

from .constants import GENERATION_PHASES, TERMINAL_PHASES, PipelinePhase
from .events import EventCallback
from .executors import (
    FixExecutor,
    GenerationExecutor,
    LayoutExecutor,
    LintExecutor,
    MergeExecutor,
    OutlineExecutor,
    PipelineExecutor,
    RenderExecutor,
    timed_operation,
)
from .state import PipelineState

load_dotenv()

logger = logging.getLogger(__name__)


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "input"
    return f"{location}: {first['msg']}"


def _unexpected_error(phase: PipelinePhase, error: Exception) -> DeckPipelineError:
    """Map an exception no stage anticipated onto the error taxonomy."""
    message = f"Unexpected error during {phase}: {error}"
    if phase in GENERATION_PHASES:
        return GenerationFailed(message)
    return LayoutInvariantViolation(message)


class DeckBuilderService:
    """
    Turns a brief into a linted, laid-out deck.

    Runs the pipeline state machine: outline, per-slide generation fan-out,
    merge, then a bounded layout/lint/fix loop and an optional render step.
    Every request ends in a PipelineResult; callers never see a raw exception.
    """

    def __init__(
        self,
        gateway: Optional[ReasoningGateway] = None,
        config: Optional[PipelineConfig] = None,
        renderer: Optional[Renderer] = None,
        guardian: Optional[StyleGuardian] = None,
    ):
        self._gateway = gateway or get_reasoning_gateway()
        self._config = config or PipelineConfig.from_settings(get_settings())
        self._renderer = renderer
        self._guardian = guardian or get_style_guardian()

        executors: list[PipelineExecutor] = [
            OutlineExecutor(self._gateway),
            GenerationExecutor(self._gateway),
            MergeExecutor(),
            LayoutExecutor(),
            LintExecutor(self._guardian, render_enabled=renderer is not None),
            FixExecutor(),
        ]
        if renderer is not None:
            executors.append(RenderExecutor(renderer))
        self._executors = {e.phase: e for e in executors}

    @property
    def config(self) -> PipelineConfig:
        return self._config

    async def build(
        self,
        user_input: Union[UserInput, dict],
        event_callback: Optional[EventCallback] = None,
    ) -> PipelineResult:
        """
        Generate a deck for one brief.

        Args:
            user_input: Brief as a UserInput or a plain dict to validate
            event_callback: Optional callable receiving progress events

        Returns:
            PipelineResult holding the deck, layout and lint on success, or
            exactly one structured failure
        """
        start_time = time.time()

        try:
            brief = self._validate_input(user_input)
            theme = self._config.resolve_theme(brief.tone)
            GridSystem(theme)
        except DeckPipelineError as e:
            logger.error(f"Rejected deck request: {e.message}")
            return PipelineResult(
                success=False,
                failure=e.to_failure(),
                duration_ms=int((time.time() - start_time) * 1000),
            )

        state = PipelineState(
            user_input=brief,
            config=self._config,
            theme=theme,
            event_callback=event_callback,
        )
        state.progress.pipeline_started(brief.topic, brief.slide_count)
        logger.info(f"Building deck for '{brief.topic}' ({brief.slide_count} slides, {brief.tone})")

        failure: Optional[DeckPipelineError] = None
        try:
            await self._run(state)
        except DeckPipelineError as e:
            logger.exception(f"Deck generation failed during {state.phase}: {e}")
            failure = e
        except Exception as e:
            logger.exception(f"Error in deck builder: {e}")
            failure = _unexpected_error(state.phase, e)

        duration_ms = int((time.time() - start_time) * 1000)

        if failure is not None:
            failed_phase = state.phase
            state.phase = PipelinePhase.FAILED
            state.progress.pipeline_failed(str(failure.kind), failure.message, str(failed_phase))
            return self._result(state, duration_ms, failure=failure)

        state.progress.pipeline_completed(True, len(state.deck.slides), len(state.warnings), duration_ms)
        logger.info(
            f"Deck ready: {len(state.deck.slides)} slides, {state.iteration} fix iterations, "
            f"{len(state.warnings)} warnings ({duration_ms}ms)"
        )
        return self._result(state, duration_ms)

    async def build_stream(self, user_input: Union[UserInput, dict]) -> AsyncIterator[dict]:
        """Build a deck and stream its progress events, ending with a result event."""
        queue: asyncio.Queue = asyncio.Queue()
        task = asyncio.create_task(self.build(user_input, event_callback=queue.put_nowait))
        task.add_done_callback(lambda _: queue.put_nowait(None))

        while (event := await queue.get()) is not None:
            yield event

        result = task.result()
        yield {
            "type": "result",
            "success": result.success,
            "slide_count": len(result.deck.slides) if result.deck else 0,
            "output_path": str(result.render.output_path) if result.render and result.render.output_path else None,
            "failure": result.failure.model_dump(mode="json") if result.failure else None,
        }

    # =========================================================================
    # State Machine
    # =========================================================================

    async def _run(self, state: PipelineState) -> None:
        tracer = get_tracer()
        while state.phase not in TERMINAL_PHASES:
            phase = state.phase
            executor = self._executors[phase]
            with tracer.start_as_current_span(f"deck.{phase}") as span:
                span.set_attribute("deck.iteration", state.iteration)
                with timed_operation() as timing:
                    await executor.handle(state)
            state.record_timing(str(phase), timing["duration_ms"])

    @staticmethod
    def _validate_input(user_input: Union[UserInput, dict]) -> UserInput:
        if isinstance(user_input, UserInput):
            return user_input
        try:
            return UserInput.model_validate(user_input)
        except ValidationError as e:
            raise InvalidInput(_validation_message(e)) from e

    @staticmethod
    def _result(
        state: PipelineState,
        duration_ms: int,
        failure: Optional[DeckPipelineError] = None,
    ) -> PipelineResult:
        return PipelineResult(
            success=failure is None,
            deck=state.deck,
            layout=state.layout,
            lint=state.lint,
            iterations=state.iteration,
            layout_calls=state.layout_calls,
            warnings=list(state.warnings),
            failure=failure.to_failure() if failure is not None else None,
            render=state.render,
            step_timings=dict(state.step_timings),
            duration_ms=duration_ms,
        )


_deck_builder_service: Optional[DeckBuilderService] = None


def get_deck_builder_service() -> DeckBuilderService:
    """Get or create the deck builder service singleton."""
    global _deck_builder_service
    if _deck_builder_service is None:
        from src.services.renderer import PptxRenderer
        _deck_builder_service = DeckBuilderService(renderer=PptxRenderer())
    return _deck_builder_service
