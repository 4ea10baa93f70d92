"""
Pytest configuration and fixtures.
"""
import asyncio

import pytest

from src.models import (
    DEFAULT_THEME,
    BulletItem,
    BulletListBlock,
    Deck,
    DeckMetadata,
    PipelineConfig,
    Slide,
    SlideConstraints,
    Tone,
    UserInput,
)
from src.services.reasoning import HeuristicReasoningGateway


class FlakyGateway(HeuristicReasoningGateway):
    """Heuristic gateway that fails or stalls selected per-slide content calls."""

    def __init__(self, failing=(), stalling=(), fail_all_content=False, fail_outline=False, stall_seconds=5.0):
        super().__init__()
        self.failing = set(failing)
        self.stalling = set(stalling)
        self.fail_all_content = fail_all_content
        self.fail_outline = fail_outline
        self.stall_seconds = stall_seconds
        self.content_calls = 0

    async def generate_outline(self, user_input, theme):
        if self.fail_outline:
            raise ValueError("Failed to generate presentation outline")
        return await super().generate_outline(user_input, theme)

    async def generate_content(self, outline, tone):
        self.content_calls += 1
        if self.fail_all_content or outline.index in self.failing:
            raise ValueError(f"Failed to generate content for slide {outline.index + 1}")
        if outline.index in self.stalling:
            await asyncio.sleep(self.stall_seconds)
        return await super().generate_content(outline, tone)


@pytest.fixture
def clean_environment(monkeypatch):
    """Provide a clean environment for tests."""
    env_vars = [
        "AZURE_OPENAI_API_KEY",
        "AZURE_OPENAI_ENDPOINT",
        "AZURE_OPENAI_DEPLOYMENT",
        "MAX_LINT_ITERATIONS",
        "AUTO_FIX",
        "OUTPUT_DIR",
        "TRACING_ENABLED",
    ]
    for var in env_vars:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def default_theme():
    return DEFAULT_THEME


@pytest.fixture
def sample_input():
    """The brief used across pipeline tests."""
    return UserInput(
        topic="AI 기술 트렌드 2025",
        audience="IT leaders",
        tone=Tone.PROFESSIONAL,
        slide_count=10,
    )


@pytest.fixture
def heuristic_gateway():
    return HeuristicReasoningGateway()


@pytest.fixture
def flaky_gateway_factory():
    """Build a FlakyGateway with the given failure injection."""
    return FlakyGateway


@pytest.fixture
def pipeline_config(tmp_path):
    return PipelineConfig(output_dir=tmp_path, max_lint_iterations=3)


@pytest.fixture
def make_deck():
    """Build a deck from slides with default metadata and theme."""
    def _make(*slides, theme=DEFAULT_THEME, sections=None):
        return Deck(
            metadata=DeckMetadata(title="Test Deck"),
            theme=theme,
            sections=sections or [],
            slides=list(slides),
        )
    return _make


@pytest.fixture
def crowded_slide():
    """Dense content slide with eight three-line bullets: overflows by three items."""
    importances = [5, 3, 3, 3, 1, 1, 1, 3]
    items = [
        BulletItem(text=f"Milestone {i}: " + "capacity planning and staffing " * 7, importance=importance)
        for i, importance in enumerate(importances)
    ]
    return Slide(
        id="s1",
        title="Scaling plan",
        blocks=[BulletListBlock(id="s1-b1", items=items)],
        constraints=SlideConstraints(density="dense"),
    )
