"""Constants for the style guardian rules and auto-fix strategies."""
from src.models import Density, FixStrategy, SlideType

# Contrast thresholds (WCAG 2.x).
MIN_CONTRAST_BODY = 4.5
MIN_CONTRAST_LARGE = 3.0

# Typography.
MIN_FONT_SIZE_PT = 10.0

# Spacing.
MIN_GUTTER_INCHES = 0.15

# Density.
MAX_BULLETS_BY_DENSITY: dict[Density, int] = {
    Density.SPARSE: 3,
    Density.NORMAL: 5,
    Density.DENSE: 7,
}
RECOMMENDED_BULLETS = 3
MAX_BULLET_CHARS = 90
MAX_ACCENT_COLORS_PER_SLIDE = 2

# Auto-fix.
OVERFLOW_FIX_ORDER = (
    FixStrategy.COMPRESS_TEXT,
    FixStrategy.REDUCE_BULLETS,
    FixStrategy.TWO_COLUMN,
    FixStrategy.SPLIT_SLIDE,
    FixStrategy.SHRINK_FONT,
)
MAX_COMPRESSION_RATIO = 0.3
FONT_SCALE_STEP = 0.1
MIN_FONT_SCALE = 0.7
CONTINUATION_MARKER = " (cont.)"
TWO_COLUMN_ELIGIBLE_TYPES = frozenset({SlideType.CONTENT, SlideType.AGENDA, SlideType.SUMMARY})
