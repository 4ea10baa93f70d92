"""Document model shared by every pipeline stage."""

from .theme import (
    ColorRole,
    ThemeColors,
    ThemeFonts,
    FontSizes,
    LineHeights,
    Canvas,
    ThemeGrid,
    Theme,
    DEFAULT_THEME,
    theme_for_tone,
)
from .deck import (
    Tone,
    SlideType,
    Density,
    BackgroundStyle,
    Transition,
    BlockKind,
    UserInput,
    TextBlock,
    BulletItem,
    BulletListBlock,
    ChartSeries,
    ChartBlock,
    TableBlock,
    ImageBlock,
    Block,
    SlideConstraints,
    Slide,
    Section,
    DeckMetadata,
    Deck,
    TITLE_LIKE_TYPES,
    block_text,
)
from .layout import BoundingBox, LayoutedBlock, LayoutedSlide, LayoutResult
from .lint import Severity, RuleCategory, FixStrategy, LintViolation, LintPatch, LintResult
from .pipeline import (
    ErrorKind,
    SlideSize,
    PipelineConfig,
    PipelineFailure,
    PipelineWarning,
    RenderResult,
    PipelineResult,
)

__all__ = [
    "ColorRole",
    "ThemeColors",
    "ThemeFonts",
    "FontSizes",
    "LineHeights",
    "Canvas",
    "ThemeGrid",
    "Theme",
    "DEFAULT_THEME",
    "theme_for_tone",
    "Tone",
    "SlideType",
    "Density",
    "BackgroundStyle",
    "Transition",
    "BlockKind",
    "UserInput",
    "TextBlock",
    "BulletItem",
    "BulletListBlock",
    "ChartSeries",
    "ChartBlock",
    "TableBlock",
    "ImageBlock",
    "Block",
    "SlideConstraints",
    "Slide",
    "Section",
    "DeckMetadata",
    "Deck",
    "TITLE_LIKE_TYPES",
    "block_text",
    "BoundingBox",
    "LayoutedBlock",
    "LayoutedSlide",
    "LayoutResult",
    "Severity",
    "RuleCategory",
    "FixStrategy",
    "LintViolation",
    "LintPatch",
    "LintResult",
    "ErrorKind",
    "SlideSize",
    "PipelineConfig",
    "PipelineFailure",
    "PipelineWarning",
    "RenderResult",
    "PipelineResult",
]
