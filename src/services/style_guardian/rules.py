"""
Declarative lint rules.

Each rule is an independent check over one category and yields zero or more
violations for a slide. Rules never patch anything themselves.
"""
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from src.models import (
    BackgroundStyle,
    BulletListBlock,
    Deck,
    ImageBlock,
    LayoutedSlide,
    LayoutResult,
    LintViolation,
    RuleCategory,
    Severity,
    Slide,
    Theme,
)
from src.models.deck import SPLIT_COLUMN_TYPES, TEXT_BEARING_KINDS
from src.services.layout.constants import LARGE_TEXT_PT
from src.services.layout.estimator import weighted_length

from .constants import (
    MAX_ACCENT_COLORS_PER_SLIDE,
    MAX_BULLET_CHARS,
    MAX_BULLETS_BY_DENSITY,
    MIN_CONTRAST_BODY,
    MIN_CONTRAST_LARGE,
    MIN_FONT_SIZE_PT,
    MIN_GUTTER_INCHES,
    RECOMMENDED_BULLETS,
)
from .contrast import background_role, foreground_role, role_contrast

_EPSILON = 1e-6


@dataclass(frozen=True)
class LintContext:
    """Read-only inputs shared by every rule."""
    deck: Deck
    layout: LayoutResult
    theme: Theme

    def layouted(self, slide: Slide) -> Optional[LayoutedSlide]:
        return self.layout.for_slide(slide.id)


@dataclass(frozen=True)
class LintRule:
    rule_id: str
    category: RuleCategory
    severity: Severity
    description: str
    check: Callable[[Slide, LintContext], Iterator[tuple[Optional[str], str]]]

    def run(self, slide: Slide, ctx: LintContext) -> list[LintViolation]:
        return [
            LintViolation(
                rule_id=self.rule_id,
                category=self.category,
                severity=self.severity,
                slide_id=slide.id,
                block_id=block_id,
                message=message,
            )
            for block_id, message in self.check(slide, ctx)
        ]


def check_overflow(slide: Slide, ctx: LintContext):
    layouted = ctx.layouted(slide)
    if layouted is None:
        return
    limit = layouted.content_area.bottom
    for placed in layouted.blocks:
        if placed.overflow:
            excess = placed.box.bottom - limit
            yield placed.block_id, (
                f"Block {placed.block_index + 1} on '{slide.title}' overflows the content area "
                f"by {excess:.2f} in"
            )


def required_contrast(font_size: Optional[float]) -> float:
    if font_size is not None and font_size >= LARGE_TEXT_PT:
        return MIN_CONTRAST_LARGE
    return MIN_CONTRAST_BODY


def contrast_failures(slide: Slide, theme: Theme, layouted: Optional[LayoutedSlide]):
    """Yield (block id, ratio, threshold) for every text element below its threshold."""
    background = background_role(slide)
    headline_ratio = role_contrast(theme, foreground_role(slide), background)
    if (slide.title or slide.subtitle) and headline_ratio < MIN_CONTRAST_LARGE:
        yield None, headline_ratio, MIN_CONTRAST_LARGE

    for block in slide.blocks:
        if block.type not in TEXT_BEARING_KINDS:
            continue
        placed = layouted.for_block(block.id) if layouted else None
        threshold = required_contrast(placed.font_size if placed else None)
        ratio = role_contrast(theme, foreground_role(slide, block), background)
        if ratio < threshold:
            yield block.id, ratio, threshold


def check_contrast(slide: Slide, ctx: LintContext):
    for block_id, ratio, threshold in contrast_failures(slide, ctx.theme, ctx.layouted(slide)):
        target = "Title text" if block_id is None else "Text"
        yield block_id, (
            f"{target} contrast {ratio:.2f}:1 on a {background_role(slide)} background "
            f"is below {threshold:.1f}:1"
        )


def check_gutter(slide: Slide, ctx: LintContext):
    layouted = ctx.layouted(slide)
    if layouted is None or slide.type not in SPLIT_COLUMN_TYPES:
        return
    boxes = [b.box for b in layouted.blocks]
    narrowest = None
    for a in boxes:
        for b in boxes:
            if a.x >= b.x or a.bottom <= b.y or b.bottom <= a.y:
                continue
            gap = b.x - a.right
            if narrowest is None or gap < narrowest:
                narrowest = gap
    if narrowest is not None and narrowest < MIN_GUTTER_INCHES - _EPSILON:
        yield None, f"Columns are {narrowest:.2f} in apart, below the {MIN_GUTTER_INCHES} in minimum gutter"


def check_safe_margin(slide: Slide, ctx: LintContext):
    layouted = ctx.layouted(slide)
    if layouted is None:
        return
    grid = ctx.theme.grid
    right_limit = grid.canvas.width - grid.safe_margin
    for placed in layouted.blocks:
        if placed.box.x < grid.safe_margin - _EPSILON or placed.box.right > right_limit + _EPSILON:
            yield placed.block_id, f"Block {placed.block_index + 1} crosses the safe margin"


def check_min_font_size(slide: Slide, ctx: LintContext):
    layouted = ctx.layouted(slide)
    if layouted is None:
        return
    for block in slide.blocks:
        if block.type not in TEXT_BEARING_KINDS:
            continue
        placed = layouted.for_block(block.id)
        if placed is None or placed.font_size is None:
            continue
        if placed.font_size < MIN_FONT_SIZE_PT - _EPSILON:
            yield block.id, f"Text is set at {placed.font_size:g} pt, below the {MIN_FONT_SIZE_PT:g} pt minimum"


def _bullet_count(slide: Slide) -> int:
    return sum(len(b.items) for b in slide.blocks if isinstance(b, BulletListBlock))


def check_bullet_count(slide: Slide, ctx: LintContext):
    limit = MAX_BULLETS_BY_DENSITY[slide.constraints.density]
    count = _bullet_count(slide)
    if count > limit:
        yield None, f"{count} bullet items exceed the {limit}-item limit for {slide.constraints.density} density"


def check_recommended_bullets(slide: Slide, ctx: LintContext):
    # Above the tier limit DENSITY_MAX_BULLETS already reports it.
    count = _bullet_count(slide)
    if RECOMMENDED_BULLETS < count <= MAX_BULLETS_BY_DENSITY[slide.constraints.density]:
        yield None, f"{count} bullet items; {RECOMMENDED_BULLETS} or fewer read best"


def check_bullet_length(slide: Slide, ctx: LintContext):
    for block in slide.blocks:
        if not isinstance(block, BulletListBlock):
            continue
        long_items = [i for i, item in enumerate(block.items) if weighted_length(item.text) > MAX_BULLET_CHARS]
        if long_items:
            yield block.id, f"{len(long_items)} bullet item(s) exceed {MAX_BULLET_CHARS} characters"


def check_full_bleed_footnote(slide: Slide, ctx: LintContext):
    if slide.constraints.background_style == BackgroundStyle.IMAGE and slide.footnote:
        yield None, "Footnote on a full-bleed image background is not legible"


def check_slide_type(slide: Slide, ctx: LintContext):
    if slide.is_title_like:
        for block in slide.blocks:
            if isinstance(block, BulletListBlock):
                yield block.id, f"{slide.type} slides should not carry bullet lists"
    elif slide.type in SPLIT_COLUMN_TYPES and len(slide.blocks) < 2:
        yield None, f"{slide.type} slides need content for both columns"


def check_accent_limit(slide: Slide, ctx: LintContext):
    colors = {b.color for b in slide.blocks if b.color is not None}
    if len(colors) > MAX_ACCENT_COLORS_PER_SLIDE:
        yield None, f"{len(colors)} accent colors used; keep it to {MAX_ACCENT_COLORS_PER_SLIDE}"


def check_alt_text(slide: Slide, ctx: LintContext):
    for block in slide.blocks:
        if isinstance(block, ImageBlock) and not block.alt_text.strip():
            yield block.id, "Image has no alt text"

RULES: tuple[LintRule, ...] = (
    LintRule("OVERFLOW_TEXT_BOX", RuleCategory.OVERFLOW, Severity.ERROR,
             "Content must fit inside the content area", check_overflow),
    LintRule("COLOR_CONTRAST", RuleCategory.CONTRAST, Severity.ERROR,
             "Text must meet the WCAG contrast ratio", check_contrast),
    LintRule("SPACING_MIN_GUTTER", RuleCategory.SPACING, Severity.WARNING,
             "Side-by-side columns keep a minimum gutter", check_gutter),
    LintRule("SPACING_SAFE_MARGIN", RuleCategory.SPACING, Severity.ERROR,
             "Blocks stay inside the safe margin", check_safe_margin),
    LintRule("TYPO_MIN_FONT_SIZE", RuleCategory.TYPOGRAPHY, Severity.WARNING,
             "Text stays at or above the minimum presentation size", check_min_font_size),
    LintRule("DENSITY_MAX_BULLETS", RuleCategory.DENSITY, Severity.WARNING,
             "Bullet count stays within the density tier limit", check_bullet_count),
    LintRule("DENSITY_RECOMMENDED_BULLETS", RuleCategory.DENSITY, Severity.WARNING,
             "Bullet count stays within the recommended count", check_recommended_bullets),
    LintRule("DENSITY_BULLET_LENGTH", RuleCategory.DENSITY, Severity.WARNING,
             "Bullet items stay short", check_bullet_length),
    LintRule("CONSISTENCY_FULL_BLEED_FOOTNOTE", RuleCategory.CONSISTENCY, Severity.WARNING,
             "No footnotes over full-bleed backgrounds", check_full_bleed_footnote),
    LintRule("CONSISTENCY_SLIDE_TYPE", RuleCategory.CONSISTENCY, Severity.WARNING,
             "Blocks are representable under the slide type", check_slide_type),
    LintRule("CONSISTENCY_ACCENT_LIMIT", RuleCategory.CONSISTENCY, Severity.WARNING,
             "At most two accent colors per slide", check_accent_limit),
    LintRule("A11Y_ALT_TEXT", RuleCategory.ACCESSIBILITY, Severity.WARNING,
             "Images carry alt text", check_alt_text),
)
