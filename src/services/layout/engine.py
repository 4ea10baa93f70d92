"""
Layout Engine

Deterministically converts a deck's semantic content into absolute geometry
on the theme's column grid. Pure: no I/O and no mutation of its inputs.
"""
import logging
from typing import Optional

from src.models import (
    Block,
    BoundingBox,
    Deck,
    Density,
    LayoutedBlock,
    LayoutedSlide,
    LayoutResult,
    Slide,
    SlideType,
    Theme,
    block_text,
)
from src.models.deck import PROTECTED_IMPORTANCE, SPLIT_COLUMN_TYPES, TEXT_BEARING_KINDS

from .constants import (
    BLOCK_GAP_INCHES,
    COORDINATE_PRECISION,
    DENSITY_PROFILES,
    FOOTNOTE_GAP_INCHES,
    POINTS_PER_INCH,
    TEXT_DENSE_CHARS,
    TITLE_GAP_INCHES,
    TITLE_SLIDE_SUBTITLE_ANCHOR,
    TITLE_SLIDE_TITLE_ANCHOR,
)
from .estimator import block_font_size, estimate_block_size, estimate_lines, weighted_length
from .grid import GridSystem

logger = logging.getLogger(__name__)

_EPSILON = 1e-6
# Minimum content height used when capping visual blocks.
_MIN_VISUAL_AREA = 1.0


def layout(deck: Deck, theme: Theme) -> LayoutResult:
    """
    Lay out every slide of a deck.

    Args:
        deck: Deck snapshot to lay out
        theme: Theme providing the grid and type scale

    Returns:
        Geometry for every block, with overflow flags

    Raises:
        InvalidTheme: If the theme grid is degenerate
    """
    grid = GridSystem(theme)
    slides = [layout_slide(slide, theme, grid) for slide in deck.slides]
    overflowing = sum(1 for s in slides if s.has_overflow)
    logger.debug("Laid out %d slides (%d with overflow)", len(slides), overflowing)
    return LayoutResult(slides=slides)


def density_profile(slide: Slide) -> tuple[float, float]:
    """Get (applied font scale, spacing multiplier) for a slide."""
    font_scale, spacing = DENSITY_PROFILES[slide.constraints.density]
    return font_scale * slide.constraints.font_scale, spacing


def block_font_scale(slide: Slide, block: Block) -> float:
    """Applied font scale for one block. Importance-5 blocks never go below the density scale."""
    if block.importance >= PROTECTED_IMPORTANCE:
        return DENSITY_PROFILES[slide.constraints.density][0] * max(slide.constraints.font_scale, 1.0)
    return density_profile(slide)[0]


def needs_readable_margin(slide: Slide) -> bool:
    """Text-dense slides are laid out inside the larger readable margin."""
    if slide.constraints.density == Density.DENSE:
        return True
    chars = sum(weighted_length(block_text(b)) for b in slide.blocks if b.type in TEXT_BEARING_KINDS)
    return chars >= TEXT_DENSE_CHARS


def column_assignments(slide: Slide, grid: GridSystem) -> list[tuple[int, int]]:
    """
    Get the (first track, track count) span requested by each block.

    Two-column slides put every block on a side: hinted blocks on their side,
    unhinted blocks split in document order with the first half on the left.
    """
    full_width = (0, grid.columns)
    half = grid.half_columns
    if slide.type not in SPLIT_COLUMN_TYPES or half < 1:
        return [full_width] * len(slide.blocks)

    left, right = (0, half), (grid.columns - half, half)
    unhinted = [i for i, b in enumerate(slide.blocks) if b.column is None]
    left_quota = (len(unhinted) + 1) // 2
    unhinted_left = set(unhinted[:left_quota])

    spans = []
    for i, block in enumerate(slide.blocks):
        if block.column == "left" or (block.column is None and i in unhinted_left):
            spans.append(left)
        else:
            spans.append(right)
    return spans


def _box(x: float, y: float, w: float, h: float) -> BoundingBox:
    return BoundingBox(
        x=round(x, COORDINATE_PRECISION),
        y=round(y, COORDINATE_PRECISION),
        w=round(w, COORDINATE_PRECISION),
        h=round(h, COORDINATE_PRECISION),
    )


def _line_box_height(text: str, width: float, font_size: float, line_height: float) -> float:
    lines = max(1, estimate_lines(text, width, font_size))
    return lines * font_size / POINTS_PER_INCH * line_height


def layout_slide(slide: Slide, theme: Theme, grid: Optional[GridSystem] = None) -> LayoutedSlide:
    """Lay out a single slide."""
    grid = grid or GridSystem(theme)
    sizes, line_heights = theme.font_sizes, theme.line_heights
    font_scale, spacing = density_profile(slide)
    area = grid.content_area(readable=needs_readable_margin(slide))

    title_box = subtitle_box = footnote_box = None
    subtitle = slide.subtitle or (slide.key_message if slide.is_title_like else None)

    if slide.is_title_like:
        title_size = sizes.section_title if slide.type == SlideType.SECTION_TITLE else sizes.title
        title_h = _line_box_height(slide.title, area.w, title_size, line_heights.title)
        title_y = max(area.y, grid.canvas_height * TITLE_SLIDE_TITLE_ANCHOR - title_h / 2)
        title_box = _box(area.x, title_y, area.w, title_h)
        cursor = title_y + title_h + TITLE_GAP_INCHES
        if subtitle:
            sub_h = _line_box_height(subtitle, area.w, sizes.subtitle, line_heights.body)
            sub_y = max(cursor, grid.canvas_height * TITLE_SLIDE_SUBTITLE_ANCHOR - sub_h / 2)
            subtitle_box = _box(area.x, sub_y, area.w, sub_h)
            cursor = sub_y + sub_h + TITLE_GAP_INCHES
    else:
        cursor = area.y
        if slide.title:
            title_h = _line_box_height(slide.title, area.w, sizes.section_title, line_heights.title)
            title_box = _box(area.x, cursor, area.w, title_h)
            cursor += title_h + TITLE_GAP_INCHES
        if subtitle:
            sub_h = _line_box_height(subtitle, area.w, sizes.subtitle * font_scale, line_heights.body)
            subtitle_box = _box(area.x, cursor, area.w, sub_h)
            cursor += sub_h + TITLE_GAP_INCHES

    content_bottom = area.bottom
    if slide.footnote:
        footnote_h = _line_box_height(slide.footnote, area.w, sizes.footnote, line_heights.body)
        footnote_box = _box(area.x, area.bottom - footnote_h, area.w, footnote_h)
        content_bottom = area.bottom - footnote_h - FOOTNOTE_GAP_INCHES

    content_height = content_bottom - cursor
    content_area = _box(area.x, cursor, area.w, max(content_height, 0.0))
    visual_area = max(content_height, _MIN_VISUAL_AREA)

    gap = BLOCK_GAP_INCHES * spacing
    cursors: dict[int, float] = {}
    placed: list[LayoutedBlock] = []

    # Document order is the placement order; ties keep the original array order.
    for index, (block, (start, count)) in enumerate(zip(slide.blocks, column_assignments(slide, grid))):
        x, w = grid.span(area, start, count)
        scale = block_font_scale(slide, block)
        block_w, block_h = estimate_block_size(block, w, theme, scale, spacing, visual_area)
        y = cursors.get(start, cursor)
        placed.append(LayoutedBlock(
            block_id=block.id,
            block_index=index,
            box=_box(x + (w - block_w) / 2, y, block_w, block_h),
            overflow=y + block_h > content_bottom + _EPSILON,
            applied_font_scale=round(scale, COORDINATE_PRECISION),
            font_size=round(block_font_size(block, theme, scale), 2),
        ))
        cursors[start] = y + block_h + gap

    return LayoutedSlide(
        slide_id=slide.id,
        content_area=content_area,
        title_box=title_box,
        subtitle_box=subtitle_box,
        footnote_box=footnote_box,
        applied_font_scale=round(font_scale, COORDINATE_PRECISION),
        blocks=placed,
    )


def slide_fits(slide: Slide, theme: Theme) -> bool:
    """Check whether a slide's estimated content fits its content area."""
    return not layout_slide(slide, theme).has_overflow


def first_overflow_index(slide: Slide, theme: Theme) -> Optional[int]:
    """Get the index of the first block flagged as overflowing, if any."""
    for block in layout_slide(slide, theme).blocks:
        if block.overflow:
            return block.block_index
    return None


def block_heights(slide: Slide, theme: Theme) -> list[float]:
    """Estimated height of each block when laid out full width."""
    full = slide.model_copy(update={"type": SlideType.CONTENT})
    return [b.box.h for b in layout_slide(full, theme).blocks]
