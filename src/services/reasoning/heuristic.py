"""
Heuristic Reasoning Gateway

Deterministic, offline gateway built from fixed deck structures and
per-type content templates. Used when no model endpoint is configured and as
the test double for the pipeline: identical input always yields identical
outlines, content and design hints.
"""
import logging
import re

from src.models import (
    BackgroundStyle,
    BulletItem,
    BulletListBlock,
    ChartBlock,
    ChartSeries,
    Density,
    SlideType,
    TextBlock,
    Theme,
    Tone,
    Transition,
    UserInput,
)

from .base import ReasoningGateway
from .models import ContentResult, DesignResult, OutlineResult, SlideOutline

logger = logging.getLogger(__name__)

BODY_ASPECTS = (
    "Overview",
    "Key Drivers",
    "Current Landscape",
    "Use Cases",
    "Challenges",
    "Opportunities",
    "Case Study",
    "Roadmap",
    "Risks and Mitigations",
    "Success Metrics",
    "Best Practices",
    "Next Steps",
    "Investment Priorities",
    "Capabilities",
)

BODY_TYPE_PATTERN = (
    SlideType.CONTENT,
    SlideType.CONTENT,
    SlideType.CHART,
    SlideType.TWO_COLUMN,
    SlideType.CONTENT,
    SlideType.COMPARISON,
)

RECOMMENDED_DENSITY: dict[SlideType, Density] = {
    SlideType.TITLE: Density.SPARSE,
    SlideType.SECTION_TITLE: Density.SPARSE,
    SlideType.AGENDA: Density.NORMAL,
    SlideType.CONTENT: Density.NORMAL,
    SlideType.TWO_COLUMN: Density.NORMAL,
    SlideType.CHART: Density.SPARSE,
    SlideType.COMPARISON: Density.NORMAL,
    SlideType.SUMMARY: Density.NORMAL,
    SlideType.CLOSING: Density.SPARSE,
    SlideType.QNA: Density.SPARSE,
}

GRADIENT_TYPES = frozenset({SlideType.TITLE, SlideType.SECTION_TITLE, SlideType.CLOSING})
ACCENT_TYPES = frozenset({SlideType.TITLE, SlideType.SECTION_TITLE, SlideType.CLOSING, SlideType.SUMMARY})

TONE_SUBTITLES: dict[Tone, str] = {
    Tone.PROFESSIONAL: "Briefing for {audience}",
    Tone.CASUAL: "A quick tour for {audience}",
    Tone.ACADEMIC: "A structured review for {audience}",
    Tone.CREATIVE: "New perspectives for {audience}",
    Tone.MINIMAL: "For {audience}",
    Tone.ENERGETIC: "What's next, for {audience}",
    Tone.LUXURY: "An exclusive briefing for {audience}",
}

MAX_HINTS_PER_SLIDE = 4
MAX_POINT_CHARS = 80
MIN_POINT_CHARS = 8


def extract_key_points(source: str) -> list[str]:
    """Split raw source text into short, de-duplicated points."""
    points: list[str] = []
    for chunk in re.split(r"[\n.!?。]+", source):
        point = chunk.strip().lstrip("-*•·").strip()
        if len(point) < MIN_POINT_CHARS:
            continue
        if len(point) > MAX_POINT_CHARS:
            point = point[:MAX_POINT_CHARS].rsplit(" ", 1)[0].rstrip(",;:")
        if point not in points:
            points.append(point)
    return points


def deck_structure(slide_count: int) -> list[SlideType]:
    """Slide types for a deck: opening, a cycled body and a closing sequence."""
    opening = [SlideType.TITLE, SlideType.AGENDA]
    closing = [SlideType.SUMMARY, SlideType.QNA, SlideType.CLOSING] if slide_count >= 8 \
        else [SlideType.SUMMARY, SlideType.CLOSING]
    body_count = max(slide_count - len(opening) - len(closing), 0)
    body = [BODY_TYPE_PATTERN[i % len(BODY_TYPE_PATTERN)] for i in range(body_count)]
    return opening + body + closing


def _aspect_title(i: int) -> str:
    aspect = BODY_ASPECTS[i % len(BODY_ASPECTS)]
    round_no = i // len(BODY_ASPECTS)
    return aspect if round_no == 0 else f"{aspect} ({round_no + 1})"


def _default_hints(aspect: str, user_input: UserInput) -> list[str]:
    return [
        f"{aspect} at a glance",
        f"Impact on {user_input.audience}",
        f"Priorities to act on now",
    ]


class HeuristicReasoningGateway(ReasoningGateway):
    """Deterministic gateway: no network, no randomness."""

    name = "heuristic"

    async def generate_outline(self, user_input: UserInput, theme: Theme) -> OutlineResult:
        types = deck_structure(user_input.slide_count)
        body_indexes = [i for i, t in enumerate(types) if i >= 2 and t not in (
            SlideType.SUMMARY, SlideType.QNA, SlideType.CLOSING)]
        points = extract_key_points(user_input.source_content or "")
        subtitle = TONE_SUBTITLES[user_input.tone].format(audience=user_input.audience)

        body: dict[int, SlideOutline] = {}
        for n, index in enumerate(body_indexes):
            title = _aspect_title(n)
            assigned = points[n::len(body_indexes)][:MAX_HINTS_PER_SLIDE] if points else []
            body[index] = SlideOutline(
                index=index,
                type=types[index],
                title=title,
                key_message=f"{title}: what matters for {user_input.audience}",
                content_hints=assigned or _default_hints(title, user_input),
                section="Main",
            )

        slides = []
        for index, slide_type in enumerate(types):
            if index in body:
                slides.append(body[index])
            elif slide_type == SlideType.TITLE:
                slides.append(SlideOutline(
                    index=index, type=slide_type, title=user_input.topic,
                    key_message=subtitle, section="Introduction",
                ))
            elif slide_type == SlideType.AGENDA:
                slides.append(SlideOutline(
                    index=index, type=slide_type, title="Agenda",
                    content_hints=[body[i].title for i in body_indexes][:6] or ["Overview"],
                    section="Introduction",
                ))
            elif slide_type == SlideType.SUMMARY:
                slides.append(SlideOutline(
                    index=index, type=slide_type, title="Key Takeaways",
                    content_hints=[f"{body[i].title} shapes the plan" for i in body_indexes][:MAX_HINTS_PER_SLIDE],
                    section="Conclusion",
                ))
            elif slide_type == SlideType.QNA:
                slides.append(SlideOutline(
                    index=index, type=slide_type, title="Questions & Answers", section="Conclusion",
                ))
            else:
                slides.append(SlideOutline(
                    index=index, type=slide_type, title="Thank You",
                    key_message=user_input.topic, section="Conclusion",
                ))

        logger.info(f"Heuristic outline: {len(slides)} slides for '{user_input.topic}'")
        return OutlineResult(title=user_input.topic, subtitle=subtitle, slides=slides)

    async def generate_content(self, outline: SlideOutline, tone: Tone) -> ContentResult:
        hints = outline.content_hints
        notes = f"{outline.title}. " + " ".join(f"{h}." for h in hints) if hints else outline.title

        if outline.type in (SlideType.TITLE, SlideType.SECTION_TITLE, SlideType.CLOSING, SlideType.QNA):
            return ContentResult(notes=notes)

        if outline.type == SlideType.CHART:
            categories = [h[:24] for h in hints[:MAX_HINTS_PER_SLIDE]] or [outline.title]
            values = [float(10 * (i + 2)) for i in range(len(categories))]
            return ContentResult(
                blocks=[
                    ChartBlock(
                        title=outline.title,
                        categories=categories,
                        series=[ChartSeries(name=outline.title, values=values)],
                        importance=4,
                    ),
                    TextBlock(content="Illustrative figures", role="caption", importance=2),
                ],
                notes=notes,
            )

        if outline.type in (SlideType.TWO_COLUMN, SlideType.COMPARISON) and len(hints) >= 2:
            cut = (len(hints) + 1) // 2
            return ContentResult(
                blocks=[
                    BulletListBlock(items=[BulletItem(text=h) for h in hints[:cut]], column="left"),
                    BulletListBlock(items=[BulletItem(text=h) for h in hints[cut:]], column="right"),
                ],
                emphasize_key_message=False,
                notes=notes,
            )

        items = [
            BulletItem(text=h, importance=4 if i == 0 else 3)
            for i, h in enumerate(hints or [outline.title])
        ]
        return ContentResult(
            blocks=[BulletListBlock(items=items, importance=4 if outline.type == SlideType.AGENDA else 3)],
            emphasize_key_message=outline.type == SlideType.CONTENT and bool(outline.key_message),
            notes=notes,
        )

    async def generate_design(self, outline: SlideOutline, theme: Theme) -> DesignResult:
        title_like = outline.type in (SlideType.TITLE, SlideType.SECTION_TITLE, SlideType.CLOSING, SlideType.QNA)
        return DesignResult(
            density=RECOMMENDED_DENSITY[outline.type],
            use_accent_color=outline.type in ACCENT_TYPES,
            background_style=BackgroundStyle.GRADIENT if outline.type in GRADIENT_TYPES else BackgroundStyle.SOLID,
            transition=Transition.FADE if title_like else Transition.NONE,
        )
