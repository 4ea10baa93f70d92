"""Unit tests for deck builder service."""

import json

import pytest
from unittest.mock import Mock

from src.models import (
    DEFAULT_THEME,
    ErrorKind,
    PipelineConfig,
    SlideType,
    TextBlock,
    Theme,
    ThemeGrid,
    UserInput,
)
from src.services.deck_builder import DeckBuilderService, PipelinePhase, placeholder_blocks
from src.services.deck_builder.helpers import format_duration, sanitize_filename
from src.services.layout.constants import DENSITY_PROFILES
from src.services.reasoning import ContentResult, HeuristicReasoningGateway
from src.services.renderer import PptxRenderer
from src.services.style_guardian.rules import contrast_failures


class WordyGateway(HeuristicReasoningGateway):
    """Returns one filler-free wall of text for every content slide, so nothing but font shrinking applies."""

    def __init__(self, importance=4):
        super().__init__()
        self.importance = importance

    async def generate_content(self, outline, tone):
        if outline.type == SlideType.CONTENT:
            return ContentResult(blocks=[TextBlock(content="word " * 2000, importance=self.importance)])
        return await super().generate_content(outline, tone)


def _service(gateway=None, config=None, **kwargs):
    return DeckBuilderService(
        gateway=gateway or HeuristicReasoningGateway(),
        config=config,
        **kwargs,
    )


class TestDeckBuilderWorkflow:
    """Tests for the full pipeline with the heuristic gateway."""

    async def test_builds_ordered_deck(self, sample_input, pipeline_config):
        """Test that a clean run yields every outline slide in order with no errors left."""
        result = await _service(config=pipeline_config).build(sample_input)

        assert result.success
        assert result.failure is None
        assert result.deck.slide_ids == [f"slide-{i:02d}" for i in range(1, 11)]
        assert result.iterations <= 3
        assert result.deck.slides[0].type == SlideType.TITLE
        assert result.deck.slides[-1].type == SlideType.CLOSING
        assert not result.lint.has_errors
        assert result.layout.covers(result.deck)
        assert result.warnings == []

    async def test_accepts_dict_input(self, pipeline_config):
        result = await _service(config=pipeline_config).build({"topic": "Edge AI", "audience": "CTOs", "slide_count": 5})

        assert result.success
        assert len(result.deck.slides) == 5

    async def test_invalid_input(self, pipeline_config):
        result = await _service(config=pipeline_config).build({"topic": "  ", "audience": "CTOs"})

        assert not result.success
        assert result.failure.kind == ErrorKind.INVALID_INPUT
        assert "topic" in result.failure.message
        assert result.deck is None

    async def test_records_step_timings(self, sample_input, pipeline_config):
        result = await _service(config=pipeline_config).build(sample_input)

        for phase in ("outlining", "generating", "merging", "layout", "linting"):
            assert phase in result.step_timings

    async def test_emits_progress_events(self, sample_input, pipeline_config):
        events = []
        await _service(config=pipeline_config).build(sample_input, event_callback=events.append)
        types = [e["type"] for e in events]

        assert types[0] == "pipeline_start"
        assert types[-1] == "pipeline_complete"
        for expected in ("outline_complete", "generation_complete", "deck_merged", "layout_complete", "lint_completed"):
            assert expected in types
        transitions = [(e["from_phase"], e["to_phase"]) for e in events if e["type"] == "transition"]
        assert transitions[0] == ("outlining", "generating")
        assert transitions[-1] == ("linting", "done")

    async def test_used_color_pairs_meet_contrast(self, sample_input, pipeline_config):
        """Every text colour pair passes its threshold unless an unresolved lint error is reported."""
        result = await _service(config=pipeline_config).build(sample_input)
        theme = pipeline_config.resolve_theme(sample_input.tone)

        failures = [
            failure
            for slide in result.deck.slides
            for failure in contrast_failures(slide, theme, result.layout.for_slide(slide.id))
        ]
        assert failures == [] or result.has_warning(ErrorKind.UNRESOLVED_LINT_ERROR)


class TestGenerationFailures:
    """Tests for generation failures and degradation."""

    async def test_all_content_failed(self, sample_input, pipeline_config, flaky_gateway_factory):
        gateway = flaky_gateway_factory(fail_all_content=True)
        result = await _service(gateway, pipeline_config).build(sample_input)

        assert not result.success
        assert result.failure.kind == ErrorKind.GENERATION_FAILED
        assert result.deck is None

    async def test_outline_failure(self, sample_input, pipeline_config, flaky_gateway_factory):
        gateway = flaky_gateway_factory(fail_outline=True)
        result = await _service(gateway, pipeline_config).build(sample_input)

        assert result.failure.kind == ErrorKind.GENERATION_FAILED
        assert "outline" in result.failure.message.lower()

    async def test_failed_slide_gets_placeholder(self, sample_input, pipeline_config, flaky_gateway_factory):
        gateway = flaky_gateway_factory(failing={2})
        result = await _service(gateway, pipeline_config).build(sample_input)

        assert result.success
        assert len(result.deck.slides) == 10
        degraded = [w for w in result.warnings if w.kind == ErrorKind.PARTIAL_GENERATION_DEGRADED]
        assert len(degraded) == 1
        assert degraded[0].slide_ids == ["slide-03"]

    async def test_failed_title_slide_gets_placeholder(self, sample_input, pipeline_config, flaky_gateway_factory):
        gateway = flaky_gateway_factory(failing={0})
        result = await _service(gateway, pipeline_config).build(sample_input)

        assert result.success
        outline = await HeuristicReasoningGateway().generate_outline(sample_input, DEFAULT_THEME)
        slide = result.deck.slide_by_id("slide-01")
        assert slide.type == SlideType.TITLE
        assert len(slide.blocks) == 1
        assert slide.blocks == placeholder_blocks(outline.slides[0], "slide-01")
        assert result.has_warning(ErrorKind.PARTIAL_GENERATION_DEGRADED)

    async def test_timed_out_slide_gets_placeholder(self, sample_input, tmp_path, flaky_gateway_factory):
        """Test that one stalled slide times out without holding back or cancelling the others."""
        config = PipelineConfig(output_dir=tmp_path, generation_timeout_seconds=0.05)
        gateway = flaky_gateway_factory(stalling={3})
        result = await _service(gateway, config).build(sample_input)

        assert result.success
        assert len(result.deck.slides) == 10
        outline = await HeuristicReasoningGateway().generate_outline(sample_input, DEFAULT_THEME)
        slide = result.deck.slide_by_id("slide-04")
        assert slide.blocks == placeholder_blocks(outline.slides[3], "slide-04")
        assert result.has_warning(ErrorKind.PARTIAL_GENERATION_DEGRADED)
        assert "slide-04" in result.warnings[0].slide_ids

    async def test_bounded_concurrency(self, sample_input, tmp_path, flaky_gateway_factory):
        config = PipelineConfig(output_dir=tmp_path, max_concurrency=1)
        gateway = flaky_gateway_factory()
        result = await _service(gateway, config).build(sample_input)

        assert result.success
        assert gateway.content_calls == 10


class TestFixLoop:
    """Tests for the bounded layout/lint/fix loop."""

    async def test_loop_terminates(self, sample_input, pipeline_config):
        result = await _service(WordyGateway(), pipeline_config).build(sample_input)

        assert result.success
        assert result.layout_calls <= pipeline_config.max_lint_iterations + 1
        assert result.iterations == pipeline_config.max_lint_iterations
        assert result.has_warning(ErrorKind.UNRESOLVED_LINT_ERROR)
        assert result.lint.has_errors

    async def test_strict_mode_fails(self, sample_input, tmp_path):
        config = PipelineConfig(output_dir=tmp_path, max_lint_iterations=3, stop_on_lint_error=True)
        result = await _service(WordyGateway(), config).build(sample_input)

        assert not result.success
        assert result.failure.kind == ErrorKind.UNRESOLVED_LINT_ERROR
        assert result.failure.rule_id == "OVERFLOW_TEXT_BOX"
        assert result.failure.slide_id == "slide-03"
        assert result.deck is not None

    async def test_auto_fix_disabled(self, sample_input, tmp_path):
        config = PipelineConfig(output_dir=tmp_path, auto_fix=False)
        result = await _service(WordyGateway(), config).build(sample_input)

        assert result.layout_calls == 1
        assert result.iterations == 0
        assert result.has_warning(ErrorKind.UNRESOLVED_LINT_ERROR)

    async def test_zero_iterations(self, sample_input, tmp_path):
        config = PipelineConfig(output_dir=tmp_path, max_lint_iterations=0)
        result = await _service(WordyGateway(), config).build(sample_input)

        assert result.layout_calls == 1

    async def test_fix_shrinks_font(self, sample_input, pipeline_config):
        result = await _service(WordyGateway(), pipeline_config).build(sample_input)
        slide = result.deck.slide_by_id("slide-03")

        assert slide.constraints.font_scale == pytest.approx(0.7)

    async def test_protected_text_is_left_unresolved(self, sample_input, pipeline_config):
        result = await _service(WordyGateway(importance=5), pipeline_config).build(sample_input)
        slide = result.deck.slide_by_id("slide-03")
        wall = result.layout.for_slide("slide-03").blocks[-1]

        assert result.success
        assert result.iterations == 0
        assert result.layout_calls == 1
        assert slide.constraints.font_scale == 1.0
        assert wall.applied_font_scale == pytest.approx(DENSITY_PROFILES[slide.constraints.density][0])
        assert result.has_warning(ErrorKind.UNRESOLVED_LINT_ERROR)


class TestErrorTaxonomy:
    async def test_invalid_theme(self, sample_input, tmp_path):
        config = PipelineConfig(output_dir=tmp_path, theme=Theme(grid=ThemeGrid(columns=0)))
        result = await _service(config=config).build(sample_input)

        assert not result.success
        assert result.failure.kind == ErrorKind.LAYOUT_INVARIANT_VIOLATION
        assert result.deck is None

    async def test_unexpected_error_after_merge(self, sample_input, pipeline_config):
        guardian = Mock()
        guardian.lint.side_effect = RuntimeError("boom")
        result = await _service(config=pipeline_config, guardian=guardian).build(sample_input)

        assert result.failure.kind == ErrorKind.LAYOUT_INVARIANT_VIOLATION
        assert "boom" in result.failure.message
        assert result.deck is not None

    async def test_failure_event(self, sample_input, pipeline_config, flaky_gateway_factory):
        events = []
        gateway = flaky_gateway_factory(fail_all_content=True)
        await _service(gateway, pipeline_config).build(sample_input, event_callback=events.append)

        failed = events[-1]
        assert failed["type"] == "pipeline_failed"
        assert failed["kind"] == "GenerationFailed"
        assert failed["phase"] == PipelinePhase.GENERATING


class TestRendering:
    """Tests for the render step."""

    async def test_renders_pptx(self, sample_input, pipeline_config):
        result = await _service(config=pipeline_config, renderer=PptxRenderer()).build(sample_input)

        assert result.render.success
        assert result.render.output_path == pipeline_config.output_dir / "AI_기술_트렌드_2025.pptx"
        assert result.render.output_path.exists()
        assert result.render.slide_count == 10

    async def test_saves_deck_document(self, sample_input, tmp_path):
        config = PipelineConfig(output_dir=tmp_path, save_spec=True)
        await _service(config=config, renderer=PptxRenderer()).build(sample_input)

        spec = json.loads((tmp_path / "AI_기술_트렌드_2025.spec.json").read_text(encoding="utf-8"))
        assert len(spec["slides"]) == 10

    async def test_unwritable_output_dir_is_a_render_failure(self, sample_input, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("occupied", encoding="utf-8")
        config = PipelineConfig(output_dir=blocker, save_spec=True)
        result = await _service(config=config, renderer=PptxRenderer()).build(sample_input)

        assert result.success
        assert result.failure is None
        assert not result.render.success
        assert str(blocker) in result.render.error
        assert len(result.deck.slides) == 10

    async def test_render_disabled_by_config(self, sample_input, tmp_path):
        config = PipelineConfig(output_dir=tmp_path, render=False)
        result = await _service(config=config, renderer=PptxRenderer()).build(sample_input)

        assert result.success
        assert result.render is None
        assert list(tmp_path.iterdir()) == []

    async def test_build_stream_ends_with_result(self, sample_input, pipeline_config):
        events = [e async for e in _service(config=pipeline_config).build_stream(sample_input)]

        assert events[0]["type"] == "pipeline_start"
        assert events[-1]["type"] == "result"
        assert events[-1]["success"] is True
        assert events[-1]["slide_count"] == 10


class TestHelpers:
    def test_sanitize_filename(self):
        assert sanitize_filename("Q3 Review: Plans/Goals!") == "Q3_Review_PlansGoals"
        assert sanitize_filename("???") == "deck"

    def test_format_duration(self):
        assert format_duration(250) == "250ms"
        assert format_duration(1500) == "1.5s"


def test_user_input_clamps_slide_count():
    assert UserInput(topic="x", audience="y", slide_count=50).slide_count == 20


def test_get_deck_builder_service_is_singleton(monkeypatch):
    from src.services.deck_builder import service as service_module
    from src.services.deck_builder import get_deck_builder_service

    monkeypatch.setattr(service_module, "_deck_builder_service", None)

    first = get_deck_builder_service()

    assert get_deck_builder_service() is first
    assert isinstance(first._renderer, PptxRenderer)
