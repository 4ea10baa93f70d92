"""
Auto-fix strategies.

Every strategy is a pure function of a slide that returns the replacement
slide(s), or ``None`` when it is not applicable. Size reductions always
consume lower-importance content first and never touch importance-5 blocks.
"""
import math
from typing import Optional

from src.models import (
    Block,
    BulletListBlock,
    FixStrategy,
    Slide,
    SlideType,
    TextBlock,
    Theme,
)
from src.models.deck import PROTECTED_IMPORTANCE, TEXT_BEARING_KINDS
from src.services.layout import block_heights, density_profile, first_overflow_index, slide_fits
from src.services.layout.constants import DENSITY_PROFILES

from .compression import TextCompressor
from .constants import (
    CONTINUATION_MARKER,
    FONT_SCALE_STEP,
    MIN_FONT_SCALE,
    OVERFLOW_FIX_ORDER,
    TWO_COLUMN_ELIGIBLE_TYPES,
)
from .contrast import BACKGROUND_CANDIDATES, background_role
from .rules import contrast_failures

_EPSILON = 1e-6


def _with_blocks(slide: Slide, blocks: list[Block], **updates) -> Slide:
    return slide.model_copy(update={"blocks": blocks, **updates})


def _compress_block(block: Block, compressor: TextCompressor) -> Block:
    if isinstance(block, TextBlock):
        return block.model_copy(update={"content": compressor.compress(block.content)})
    if isinstance(block, BulletListBlock):
        items = [
            item if item.importance >= PROTECTED_IMPORTANCE
            else item.model_copy(update={"text": compressor.compress(item.text)})
            for item in block.items
        ]
        return block.model_copy(update={"items": items})
    return block


def compress_text(slide: Slide, theme: Theme, compressor: TextCompressor) -> Optional[list[Slide]]:
    """Compress text of the least important blocks until the slide fits."""
    blocks = list(slide.blocks)
    order = sorted(
        (i for i, b in enumerate(blocks) if b.importance < PROTECTED_IMPORTANCE),
        key=lambda i: (blocks[i].importance, -i),
    )
    changed = False
    for i in order:
        compressed = _compress_block(blocks[i], compressor)
        if compressed == blocks[i]:
            continue
        blocks[i] = compressed
        changed = True
        if slide_fits(_with_blocks(slide, blocks), theme):
            break
    return [_with_blocks(slide, blocks)] if changed else None


def _next_bullet_to_drop(blocks: list[Block]) -> Optional[tuple[int, int]]:
    best = None
    for bi, block in enumerate(blocks):
        if not isinstance(block, BulletListBlock):
            continue
        if block.importance >= PROTECTED_IMPORTANCE or len(block.items) <= 1:
            continue
        for ii, item in enumerate(block.items):
            if item.importance >= PROTECTED_IMPORTANCE:
                continue
            # Lowest importance first; ties drop the last-most item.
            key = (block.importance, item.importance, -bi, -ii)
            if best is None or key < best[0]:
                best = (key, bi, ii)
    return None if best is None else (best[1], best[2])


def reduce_bullets(slide: Slide, theme: Theme) -> Optional[list[Slide]]:
    """Drop the lowest-importance bullet items until the slide fits."""
    blocks = list(slide.blocks)
    dropped = 0
    while not slide_fits(_with_blocks(slide, blocks), theme):
        target = _next_bullet_to_drop(blocks)
        if target is None:
            break
        bi, ii = target
        block = blocks[bi]
        blocks[bi] = block.model_copy(update={"items": block.items[:ii] + block.items[ii + 1:]})
        dropped += 1
    return [_with_blocks(slide, blocks)] if dropped else None


def _unique_block_id(base: str, blocks: list[Block]) -> str:
    taken = {b.id for b in blocks}
    candidate, n = base, 2
    while candidate in taken:
        candidate, n = f"{base}{n}", n + 1
    return candidate


def _halve_bullets(block: BulletListBlock, new_id: str) -> tuple[BulletListBlock, BulletListBlock]:
    cut = math.ceil(len(block.items) / 2)
    head = block.model_copy(update={"items": block.items[:cut]})
    tail = block.model_copy(update={"items": block.items[cut:], "id": new_id})
    return head, tail


def _balanced_cut(heights: list[float]) -> int:
    """Prefix length that best balances the two halves (smallest on ties)."""
    total = sum(heights)
    best_cut, best_diff, running = 1, math.inf, 0.0
    for cut in range(1, len(heights)):
        running += heights[cut - 1]
        diff = abs(running - (total - running))
        if diff < best_diff - _EPSILON:
            best_cut, best_diff = cut, diff
    return best_cut


def switch_to_two_column(slide: Slide, theme: Theme) -> Optional[list[Slide]]:
    """Convert a single-column slide into a two-column one."""
    if slide.type not in TWO_COLUMN_ELIGIBLE_TYPES:
        return None

    blocks = slide.blocks
    if len(blocks) >= 2:
        cut = _balanced_cut(block_heights(slide, theme))
        left = [b.model_copy(update={"column": "left"}) for b in blocks[:cut]]
        right = [b.model_copy(update={"column": "right"}) for b in blocks[cut:]]
        new_blocks = left + right
    elif len(blocks) == 1 and isinstance(blocks[0], BulletListBlock) and len(blocks[0].items) >= 2:
        head, tail = _halve_bullets(blocks[0], _unique_block_id(f"{blocks[0].id}-r", blocks))
        new_blocks = [head.model_copy(update={"column": "left"}), tail.model_copy(update={"column": "right"})]
    else:
        return None

    return [_with_blocks(slide, new_blocks, type=SlideType.TWO_COLUMN)]


def continuation_title(title: str) -> str:
    base = title[:-len(CONTINUATION_MARKER)] if title.endswith(CONTINUATION_MARKER) else title
    return f"{base}{CONTINUATION_MARKER}"


def unique_slide_id(base: str, taken: set[str]) -> str:
    candidate, n = base, 2
    while candidate in taken:
        candidate, n = f"{base}{n}", n + 1
    return candidate


def split_slide(slide: Slide, theme: Theme, taken_ids: set[str]) -> Optional[list[Slide]]:
    """Move the overflowing tail of blocks onto a new slide right after this one."""
    overflow_at = first_overflow_index(slide, theme)
    if overflow_at is None:
        return None

    blocks = slide.blocks
    if len(blocks) >= 2:
        cut = max(1, overflow_at)
        head, tail = list(blocks[:cut]), list(blocks[cut:])
    elif len(blocks) == 1 and isinstance(blocks[0], BulletListBlock) and len(blocks[0].items) >= 2:
        first, second = _halve_bullets(blocks[0], f"{blocks[0].id}-cont")
        head, tail = [first], [second]
    else:
        return None

    continuation = Slide(
        id=unique_slide_id(f"{slide.id}-cont", taken_ids),
        type=SlideType.CONTENT if slide.is_title_like else slide.type,
        title=continuation_title(slide.title),
        blocks=tail,
        constraints=slide.constraints,
        background=slide.background,
        transition=slide.transition,
    )
    return [_with_blocks(slide, head), continuation]


def shrink_font(slide: Slide, theme: Theme) -> Optional[list[Slide]]:
    """
    Lower the slide's font scale by one step, down to the minimum readable scale.

    The scale only reaches unprotected text blocks; importance-5 blocks keep
    their size, so a slide without unprotected text has nothing to shrink.
    """
    if not any(b.type in TEXT_BEARING_KINDS and b.importance < PROTECTED_IMPORTANCE for b in slide.blocks):
        return None
    applied, _ = density_profile(slide)
    if applied <= MIN_FONT_SCALE + _EPSILON:
        return None
    density_scale = DENSITY_PROFILES[slide.constraints.density][0]
    new_scale = max(slide.constraints.font_scale - FONT_SCALE_STEP, MIN_FONT_SCALE / density_scale)
    constraints = slide.constraints.model_copy(update={"font_scale": round(new_scale, 4)})
    return [slide.model_copy(update={"constraints": constraints})]


def plan_overflow_fix(
    slide: Slide,
    theme: Theme,
    compressor: TextCompressor,
    taken_ids: set[str],
) -> Optional[tuple[FixStrategy, list[Slide]]]:
    """Get the first applicable overflow fix, in the fixed priority order."""
    for strategy in OVERFLOW_FIX_ORDER:
        if strategy == FixStrategy.COMPRESS_TEXT:
            result = compress_text(slide, theme, compressor)
        elif strategy == FixStrategy.REDUCE_BULLETS:
            result = reduce_bullets(slide, theme)
        elif strategy == FixStrategy.TWO_COLUMN:
            result = switch_to_two_column(slide, theme)
        elif strategy == FixStrategy.SPLIT_SLIDE:
            result = split_slide(slide, theme, taken_ids)
        else:
            result = shrink_font(slide, theme)
        if result is not None:
            return strategy, result
    return None


def plan_contrast_fix(slide: Slide, theme: Theme) -> Optional[list[Slide]]:
    """Swap to the first candidate background every text element passes on."""
    current = background_role(slide)
    for candidate in BACKGROUND_CANDIDATES:
        if candidate == current:
            continue
        trial = slide.model_copy(update={"background": candidate})
        if next(contrast_failures(trial, theme, None), None) is None:
            return [trial]
    return None
