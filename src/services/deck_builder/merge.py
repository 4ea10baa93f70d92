"""
Merge Stage

Assembles the outline and the settled per-slide generation outcomes into a
Deck. Slide order always follows the outline; results are matched by index,
never by completion order. Slides whose content generation failed get a
deterministic placeholder so the deck keeps its planned shape.
"""
import logging
from typing import Optional, Sequence

from src.core.errors import GenerationFailed
from src.models import (
    BulletListBlock,
    Deck,
    DeckMetadata,
    Section,
    Slide,
    SlideConstraints,
    SlideType,
    TextBlock,
    Theme,
    Transition,
    UserInput,
)
from src.models.deck import Block

from src.services.reasoning.models import (
    ContentResult,
    DesignResult,
    GenerationOutcome,
    Ok,
    OutlineResult,
    SlideOutline,
)

logger = logging.getLogger(__name__)

# Slides whose key message is their subtitle rather than a callout block.
SUBTITLE_BOUND_TYPES = frozenset({
    SlideType.TITLE,
    SlideType.SECTION_TITLE,
    SlideType.CLOSING,
    SlideType.QNA,
})


def slide_id_for(index: int) -> str:
    return f"slide-{index + 1:02d}"


def block_id_for(slide_id: str, position: int) -> str:
    return f"{slide_id}-b{position + 1}"


def placeholder_text(outline: SlideOutline) -> str:
    """Placeholder body: the content hints as one sentence, else the key message, else the title."""
    hints = [h.strip().rstrip(".") for h in outline.content_hints if h.strip()]
    if hints:
        return ", ".join(hints) + "."
    return outline.key_message or outline.title


def placeholder_blocks(outline: SlideOutline, slide_id: str) -> list[Block]:
    """One text block for every slide type, title-like slides included."""
    return [TextBlock(id=block_id_for(slide_id, 0), content=placeholder_text(outline))]


def _flatten_for_title_slide(blocks: list[Block]) -> list[Block]:
    """Title-like slides carry no bullet lists; their items collapse into one text block."""
    flattened: list[Block] = []
    for block in blocks:
        if isinstance(block, BulletListBlock):
            flattened.append(TextBlock(
                id=block.id,
                importance=block.importance,
                color=block.color,
                content=" ".join(item.text for item in block.items),
            ))
        else:
            flattened.append(block)
    return flattened


def _assign_block_ids(slide_id: str, blocks: list[Block]) -> list[Block]:
    return [
        block.model_copy(update={"id": block_id_for(slide_id, i)})
        for i, block in enumerate(blocks)
    ]


def merge_slide(
    outline: SlideOutline,
    content: Optional[ContentResult],
    design: Optional[DesignResult],
) -> Slide:
    """
    Build one slide from its outline entry and whatever generation produced.

    A missing ContentResult yields a placeholder slide with default constraints.
    A missing DesignResult keeps the content but falls back to default constraints.
    """
    slide_id = slide_id_for(outline.index)
    subtitle_bound = outline.type in SUBTITLE_BOUND_TYPES

    if content is None:
        return Slide(
            id=slide_id,
            type=outline.type,
            title=outline.title,
            subtitle=outline.key_message if subtitle_bound else None,
            key_message=outline.key_message,
            blocks=placeholder_blocks(outline, slide_id),
        )

    blocks: list[Block] = list(content.blocks)
    if subtitle_bound:
        blocks = _flatten_for_title_slide(blocks)
    elif content.emphasize_key_message and outline.key_message:
        blocks.insert(0, TextBlock(content=outline.key_message, importance=5, emphasized=True))

    constraints = SlideConstraints()
    background = None
    transition = Transition.NONE
    if design is not None:
        constraints = SlideConstraints(
            density=design.density,
            use_accent_color=design.use_accent_color,
            background_style=design.background_style,
        )
        background = design.background
        transition = design.transition

    return Slide(
        id=slide_id,
        type=outline.type,
        title=outline.title,
        subtitle=outline.key_message if subtitle_bound else None,
        key_message=outline.key_message,
        footnote=content.footnote,
        notes=content.notes,
        blocks=_assign_block_ids(slide_id, blocks),
        constraints=constraints,
        background=background,
        transition=transition,
    )


def build_sections(outline: OutlineResult) -> list[Section]:
    """Group consecutive slides sharing a section name."""
    sections: list[Section] = []
    current: Optional[str] = None
    start = 0
    for i, slide in enumerate(outline.slides):
        if slide.section != current:
            if current is not None:
                sections.append(Section(name=current, start_index=start, end_index=i - 1))
            current, start = slide.section, i
    if current is not None:
        sections.append(Section(name=current, start_index=start, end_index=len(outline.slides) - 1))
    return sections


def _values_by_index(outcomes: Sequence[GenerationOutcome]) -> dict:
    return {o.index: o.value for o in outcomes if isinstance(o, Ok)}


def merge_deck(
    user_input: UserInput,
    outline: OutlineResult,
    contents: Sequence[GenerationOutcome],
    designs: Sequence[GenerationOutcome],
    theme: Theme,
) -> Deck:
    """
    Assemble the deck.

    Args:
        user_input: Brief the deck was generated for
        outline: Planned slides, in deck order
        contents: Settled content outcomes, any order
        designs: Settled design outcomes, any order
        theme: Resolved theme for the run

    Returns:
        A deck with exactly one slide per outline entry, in outline order

    Raises:
        GenerationFailed: No content generation task succeeded
    """
    content_by_index = _values_by_index(contents)
    design_by_index = _values_by_index(designs)

    if not content_by_index:
        raise GenerationFailed("Content generation failed for every slide")

    slides = []
    for i, slide_outline in enumerate(outline.slides):
        # Outline indices are positional; normalize in case the gateway numbered them differently.
        if slide_outline.index != i:
            slide_outline = slide_outline.model_copy(update={"index": i})
        slides.append(merge_slide(slide_outline, content_by_index.get(i), design_by_index.get(i)))

    placeholders = sum(1 for i in range(len(outline.slides)) if i not in content_by_index)
    logger.info(f"Merged {len(slides)} slides ({placeholders} placeholders)")

    return Deck(
        metadata=DeckMetadata(
            title=outline.title,
            subtitle=outline.subtitle,
            author=user_input.author,
            company=user_input.company,
            language=user_input.language,
        ),
        theme=theme,
        sections=build_sections(outline),
        slides=slides,
    )


def failed_slide_ids(outline: OutlineResult, contents: Sequence[GenerationOutcome]) -> list[str]:
    """Ids of the slides that fell back to a placeholder, in deck order."""
    succeeded = set(_values_by_index(contents))
    return [slide_id_for(i) for i in range(len(outline.slides)) if i not in succeeded]
