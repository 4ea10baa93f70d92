"""Content size estimation shared by the layout engine and the style guardian."""
import math
import unicodedata

from src.models import (
    Block,
    BulletListBlock,
    ChartBlock,
    ImageBlock,
    TableBlock,
    TextBlock,
    Theme,
)

from .constants import (
    BULLET_INDENT_INCHES,
    LEVEL_HEIGHT_FRACTION,
    NARROW_GLYPH_EM,
    POINTS_PER_INCH,
    VISUAL_MAX_HEIGHT_RATIO,
    WIDE_GLYPH_EM,
)


def is_wide_glyph(char: str) -> bool:
    return unicodedata.east_asian_width(char) in ("W", "F")


def text_width_ems(text: str) -> float:
    """Approximate rendered width of a line of text, in ems."""
    return sum(WIDE_GLYPH_EM if is_wide_glyph(c) else NARROW_GLYPH_EM for c in text)


def weighted_length(text: str) -> float:
    """Character count in narrow-glyph units: a wide glyph counts WIDE_GLYPH_EM / NARROW_GLYPH_EM (about 1.8)."""
    return text_width_ems(text) / NARROW_GLYPH_EM


def estimate_lines(text: str, width: float, font_size: float) -> int:
    """
    Estimate how many lines ``text`` wraps to in a box ``width`` inches wide.

    Every paragraph takes at least one line; empty text takes none.
    """
    if not text.strip():
        return 0
    ems_per_line = max(width * POINTS_PER_INCH / font_size, NARROW_GLYPH_EM)
    lines = 0
    for paragraph in text.split("\n"):
        ems = text_width_ems(paragraph.strip())
        lines += max(1, math.ceil(ems / ems_per_line))
    return lines


def text_height(text: str, width: float, font_size: float, line_height: float) -> float:
    """Height in inches of wrapped text."""
    return estimate_lines(text, width, font_size) * font_size / POINTS_PER_INCH * line_height


def block_font_size(block: Block, theme: Theme, font_scale: float) -> float:
    """Resolved font size in points for a block's text."""
    sizes = theme.font_sizes
    if isinstance(block, TextBlock):
        base = {"body": sizes.body, "caption": sizes.caption, "footnote": sizes.footnote}[block.role]
    elif isinstance(block, BulletListBlock):
        base = sizes.body
    else:
        base = sizes.caption
    return base * font_scale


def estimate_block_size(
    block: Block,
    width: float,
    theme: Theme,
    font_scale: float,
    spacing: float,
    content_height: float,
) -> tuple[float, float]:
    """
    Estimate the (width, height) a block occupies when given ``width`` inches.

    Text-bearing blocks keep the full width. Visual blocks derive their height
    from their aspect ratio and shrink their width when the height is capped.
    """
    line_height = theme.line_heights.body
    font_size = block_font_size(block, theme, font_scale)

    if isinstance(block, TextBlock):
        lines = max(1, estimate_lines(block.content, width, font_size))
        return width, lines * font_size / POINTS_PER_INCH * line_height

    if isinstance(block, BulletListBlock):
        item_gap = theme.grid.baseline_unit / POINTS_PER_INCH * spacing
        height = 0.0
        for item in block.items:
            item_width = max(width - BULLET_INDENT_INCHES * (item.level + 1), width * 0.25)
            lines = max(1, estimate_lines(item.text, item_width, font_size))
            base = lines * font_size / POINTS_PER_INCH * line_height
            height += base * (1 + LEVEL_HEIGHT_FRACTION * item.level) + item_gap
        return width, height

    if isinstance(block, (ChartBlock, TableBlock, ImageBlock)):
        height = width / block.aspect_ratio
        cap = content_height * VISUAL_MAX_HEIGHT_RATIO
        if height > cap:
            return cap * block.aspect_ratio, cap
        return width, height

    raise TypeError(f"Unknown block type: {type(block).__name__}")
