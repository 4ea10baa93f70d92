"""Constants for the layout engine."""
from src.models import Density

POINTS_PER_INCH = 72.0

# Average glyph advance in ems; wide (CJK) glyphs take a full em.
NARROW_GLYPH_EM, WIDE_GLYPH_EM = 0.55, 1.0

# Density lookup: (font scale, spacing multiplier).
DENSITY_PROFILES: dict[Density, tuple[float, float]] = {
    Density.SPARSE: (1.1, 1.4),
    Density.NORMAL: (1.0, 1.0),
    Density.DENSE: (0.85, 0.7),
}

# Slides carrying at least this much text use the readable margin.
TEXT_DENSE_CHARS = 280

BLOCK_GAP_INCHES = 0.3
TITLE_GAP_INCHES = 0.2
FOOTNOTE_GAP_INCHES = 0.1

# Bullet geometry.
BULLET_INDENT_INCHES = 0.3
LEVEL_HEIGHT_FRACTION = 0.1

# Chart/table/image blocks never take more than this share of the content height.
VISUAL_MAX_HEIGHT_RATIO = 0.85

# Title-like slides: title and subtitle anchors as fractions of canvas height.
TITLE_SLIDE_TITLE_ANCHOR = 0.35
TITLE_SLIDE_SUBTITLE_ANCHOR = 0.55

# Text at or above this size counts as large text.
LARGE_TEXT_PT = 24.0

COORDINATE_PRECISION = 4
