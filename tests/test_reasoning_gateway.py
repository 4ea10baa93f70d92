"""
Tests for the heuristic reasoning gateway and the gateway factory.
"""

import pytest

from src.core import Settings
from src.models import DEFAULT_THEME, SlideType, Tone, UserInput
from src.services.reasoning import HeuristicReasoningGateway, SlideOutline, get_reasoning_gateway
from src.services.reasoning.heuristic import deck_structure, extract_key_points


class TestDeckStructure:
    """Tests for the fixed deck structures."""

    def test_length_matches_count(self):
        for count in range(5, 21):
            assert len(deck_structure(count)) == count

    def test_opening_and_closing(self):
        types = deck_structure(10)

        assert types[:2] == [SlideType.TITLE, SlideType.AGENDA]
        assert types[-3:] == [SlideType.SUMMARY, SlideType.QNA, SlideType.CLOSING]

    def test_short_deck_skips_qna(self):
        assert SlideType.QNA not in deck_structure(6)


class TestExtractKeyPoints:
    def test_splits_sentences(self):
        points = extract_key_points("Edge chips got cheaper. Models got smaller!\n- Latency matters a lot")
        assert points == ["Edge chips got cheaper", "Models got smaller", "Latency matters a lot"]

    def test_drops_short_and_duplicate_points(self):
        assert extract_key_points("ok. Same point here. Same point here.") == ["Same point here"]

    def test_truncates_long_points_on_word_boundary(self):
        point = extract_key_points("word " * 40)[0]

        assert len(point) <= 80
        assert not point.endswith(" ")


class TestHeuristicGateway:
    """Tests for the deterministic gateway."""

    async def test_outline_has_requested_slide_count(self, sample_input):
        outline = await HeuristicReasoningGateway().generate_outline(sample_input, DEFAULT_THEME)

        assert len(outline.slides) == 10
        assert [s.index for s in outline.slides] == list(range(10))
        assert outline.slides[0].type == SlideType.TITLE
        assert outline.slides[0].title == sample_input.topic

    async def test_outline_is_deterministic(self, sample_input):
        gateway = HeuristicReasoningGateway()
        first = await gateway.generate_outline(sample_input, DEFAULT_THEME)
        second = await gateway.generate_outline(sample_input, DEFAULT_THEME)

        assert first == second

    async def test_source_content_feeds_hints(self):
        brief = UserInput(
            topic="Edge AI",
            audience="CTOs",
            slide_count=5,
            source_content="Edge chips got cheaper. Models got smaller.",
        )
        outline = await HeuristicReasoningGateway().generate_outline(brief, DEFAULT_THEME)
        hints = [h for s in outline.slides for h in s.content_hints]

        assert "Edge chips got cheaper" in hints

    async def test_title_slide_content_has_no_blocks(self):
        outline = SlideOutline(index=0, type=SlideType.TITLE, title="Hello", key_message="World")
        content = await HeuristicReasoningGateway().generate_content(outline, Tone.PROFESSIONAL)

        assert content.blocks == []

    async def test_chart_slide_content(self):
        outline = SlideOutline(index=4, type=SlideType.CHART, title="Growth", content_hints=["2023", "2024"])
        content = await HeuristicReasoningGateway().generate_content(outline, Tone.PROFESSIONAL)

        chart = content.blocks[0]
        assert chart.type == "chart"
        assert chart.categories == ["2023", "2024"]
        assert chart.series[0].values == [20.0, 30.0]

    async def test_two_column_content_splits_hints(self):
        outline = SlideOutline(index=5, type=SlideType.TWO_COLUMN, title="Compare", content_hints=["a1", "a2", "b1"])
        content = await HeuristicReasoningGateway().generate_content(outline, Tone.PROFESSIONAL)

        left, right = content.blocks
        assert (left.column, right.column) == ("left", "right")
        assert [i.text for i in left.items] == ["a1", "a2"]

    async def test_design_for_title_slide(self):
        outline = SlideOutline(index=0, type=SlideType.TITLE, title="Hello")
        design = await HeuristicReasoningGateway().generate_design(outline, DEFAULT_THEME)

        assert design.density == "sparse"
        assert design.background_style == "gradient"
        assert design.transition == "fade"


class TestGatewayFactory:
    def test_heuristic_without_azure(self, clean_environment):
        gateway = get_reasoning_gateway(Settings(_env_file=None))
        assert isinstance(gateway, HeuristicReasoningGateway)

    def test_azure_when_configured(self, clean_environment):
        settings = Settings(
            _env_file=None,
            azure_openai_api_key="key",
            azure_openai_endpoint="https://example.openai.azure.com",
            azure_openai_deployment="gpt-4o",
        )
        gateway = get_reasoning_gateway(settings)

        assert gateway.name == "azure"
        assert gateway.is_available
