"""
Style Guardian

Rule-based linter over a laid-out deck, plus the auto-fix patch planner.

``lint`` runs every rule and proposes at most one patch per slide for its
error-severity violations. ``apply_patches`` substitutes patched slides into a
new deck. Neither function lays anything out or retries; the fix loop lives
in the deck builder service.
"""
import logging
from typing import Optional, Sequence

from src.models import (
    Deck,
    FixStrategy,
    LayoutResult,
    LintPatch,
    LintResult,
    LintViolation,
    RuleCategory,
    Section,
    Severity,
    Theme,
)

from .compression import FillerPhraseCompressor, TextCompressor
from .fixes import plan_contrast_fix, plan_overflow_fix
from .rules import RULES, LintContext, LintRule

logger = logging.getLogger(__name__)

PATCH_DESCRIPTIONS: dict[FixStrategy, str] = {
    FixStrategy.COMPRESS_TEXT: "Compress filler phrasing in low-importance text",
    FixStrategy.REDUCE_BULLETS: "Drop the lowest-importance bullet items",
    FixStrategy.TWO_COLUMN: "Switch to a two-column layout",
    FixStrategy.SPLIT_SLIDE: "Move overflowing blocks to a continuation slide",
    FixStrategy.SHRINK_FONT: "Reduce the font scale",
    FixStrategy.SWAP_BACKGROUND: "Switch to a background with enough contrast",
}


UNRESOLVED_SUFFIX = " (unresolved: no applicable fix)"


def patch_id(strategy: FixStrategy, slide_id: str) -> str:
    return f"{strategy}:{slide_id}"


class StyleGuardian:
    """Lints laid-out decks and plans auto-fix patches."""

    def __init__(
        self,
        compressor: Optional[TextCompressor] = None,
        rules: Sequence[LintRule] = RULES,
    ):
        self._compressor = compressor or FillerPhraseCompressor()
        self._rules = tuple(rules)

    def lint(self, deck: Deck, layout: LayoutResult, theme: Theme) -> LintResult:
        """
        Run every rule over every slide.

        Args:
            deck: Deck snapshot
            layout: Layout of that snapshot
            theme: Theme the layout was computed with

        Returns:
            Violations in slide order (rule order within a slide) and the
            candidate patches for error-severity violations
        """
        ctx = LintContext(deck=deck, layout=layout, theme=theme)
        violations: list[LintViolation] = []
        for slide in deck.slides:
            for rule in self._rules:
                violations.extend(rule.run(slide, ctx))

        patches, unresolved = self._plan_patches(deck, violations, theme)
        by_slide = {p.slide_id: p for p in patches}
        violations = [
            self._mark_unresolved(v) if (v.slide_id, v.category) in unresolved
            else self._link_patch(v, by_slide.get(v.slide_id))
            for v in violations
        ]

        result = LintResult(violations=violations, patches=patches)
        logger.info(
            "Lint: %d errors, %d warnings, %d patches",
            result.error_count, result.warning_count, len(patches),
        )
        return result

    @staticmethod
    def _link_patch(violation: LintViolation, patch: Optional[LintPatch]) -> LintViolation:
        if patch is None or violation.severity != Severity.ERROR:
            return violation
        is_contrast_fix = patch.strategy == FixStrategy.SWAP_BACKGROUND
        if violation.category == RuleCategory.OVERFLOW and not is_contrast_fix:
            return violation.model_copy(update={"suggested_patch_id": patch.id})
        if violation.category == RuleCategory.CONTRAST and is_contrast_fix:
            return violation.model_copy(update={"suggested_patch_id": patch.id})
        return violation

    @staticmethod
    def _mark_unresolved(violation: LintViolation) -> LintViolation:
        if violation.severity != Severity.ERROR:
            return violation
        return violation.model_copy(update={"message": f"{violation.message}{UNRESOLVED_SUFFIX}"})

    def _plan_patches(
        self,
        deck: Deck,
        violations: list[LintViolation],
        theme: Theme,
    ) -> tuple[list[LintPatch], set[tuple[str, RuleCategory]]]:
        """
        Plan one patch per slide; overflow fixes take precedence over contrast fixes.

        Returns the patches and the (slide id, category) pairs no fix applies to.
        """
        errors = [v for v in violations if v.severity == Severity.ERROR]
        overflow_slides = {v.slide_id for v in errors if v.category == RuleCategory.OVERFLOW}
        contrast_slides = {v.slide_id for v in errors if v.category == RuleCategory.CONTRAST}
        taken_ids = set(deck.slide_ids)

        patches: list[LintPatch] = []
        unresolved: set[tuple[str, RuleCategory]] = set()
        for slide in deck.slides:
            if slide.id in overflow_slides:
                planned = plan_overflow_fix(slide, theme, self._compressor, taken_ids)
                if planned is None:
                    logger.warning(f"No overflow fix left for slide {slide.id}")
                    unresolved.add((slide.id, RuleCategory.OVERFLOW))
                    continue
                strategy, replacement = planned
            elif slide.id in contrast_slides:
                replacement = plan_contrast_fix(slide, theme)
                if replacement is None:
                    logger.warning(f"No background with enough contrast for slide {slide.id}")
                    unresolved.add((slide.id, RuleCategory.CONTRAST))
                    continue
                strategy = FixStrategy.SWAP_BACKGROUND
            else:
                continue

            taken_ids.update(s.id for s in replacement)
            patches.append(LintPatch(
                id=patch_id(strategy, slide.id),
                strategy=strategy,
                slide_id=slide.id,
                description=PATCH_DESCRIPTIONS[strategy],
                slides=replacement,
            ))
        return patches, unresolved

    def apply_patches(self, deck: Deck, lint: LintResult) -> Deck:
        return apply_patches(deck, lint)


def _remap_sections(sections: list[Section], spans: list[tuple[int, int]]) -> list[Section]:
    remapped = []
    for section in sections:
        if section.start_index >= len(spans) or section.end_index >= len(spans):
            continue
        remapped.append(Section(
            name=section.name,
            start_index=spans[section.start_index][0],
            end_index=spans[section.end_index][1],
        ))
    return remapped


def apply_patches(deck: Deck, lint: LintResult) -> Deck:
    """
    Apply a lint result's patches to a deck.

    Pure: returns a new deck. Untouched slides are carried over unchanged;
    the first patch for a slide wins; patches for unknown slides are skipped.
    """
    by_slide: dict[str, LintPatch] = {}
    for patch in lint.patches:
        by_slide.setdefault(patch.slide_id, patch)

    known = set(deck.slide_ids)
    for stale in set(by_slide) - known:
        logger.warning(f"Skipping patch for unknown slide {stale}")

    slides = []
    spans: list[tuple[int, int]] = []
    for slide in deck.slides:
        replacement = by_slide[slide.id].slides if slide.id in by_slide else [slide]
        spans.append((len(slides), len(slides) + len(replacement) - 1))
        slides.extend(replacement)

    return Deck(
        metadata=deck.metadata,
        theme=deck.theme,
        sections=_remap_sections(deck.sections, spans),
        slides=slides,
    )


_default_guardian: Optional[StyleGuardian] = None


def get_style_guardian() -> StyleGuardian:
    """Get or create the default style guardian instance."""
    global _default_guardian
    if _default_guardian is None:
        _default_guardian = StyleGuardian()
    return _default_guardian


def lint(deck: Deck, layout: LayoutResult, theme: Theme) -> LintResult:
    """Lint with the default guardian."""
    return get_style_guardian().lint(deck, layout, theme)
