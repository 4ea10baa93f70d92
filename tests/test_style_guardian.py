"""Unit tests for the style guardian: lint rules, fix planning and patch application."""

import pytest

from src.models import (
    DEFAULT_THEME,
    BackgroundStyle,
    BulletItem,
    BulletListBlock,
    ColorRole,
    FixStrategy,
    ImageBlock,
    LintResult,
    Section,
    Severity,
    Slide,
    SlideConstraints,
    SlideType,
    TextBlock,
)
from src.services.layout import layout, layout_slide, slide_fits
from src.services.style_guardian import (
    FillerPhraseCompressor,
    StyleGuardian,
    apply_patches,
    contrast_ratio,
    relative_luminance,
)
from src.services.style_guardian.fixes import (
    compress_text,
    continuation_title,
    plan_overflow_fix,
    reduce_bullets,
    shrink_font,
    split_slide,
    switch_to_two_column,
)


def _lint(deck, guardian=None):
    guardian = guardian or StyleGuardian()
    return guardian.lint(deck, layout(deck, DEFAULT_THEME), DEFAULT_THEME)


def _long_list(count, block_id="b1", importance=3):
    items = [BulletItem(text=f"Roadmap item {i} with a longer explanation") for i in range(count)]
    return BulletListBlock(id=block_id, items=items, importance=importance)


def _rule_ids(result):
    return {v.rule_id for v in result.violations}


class RecordingCompressor:
    """Replaces any text with a short sentence and records what it was given."""

    def __init__(self):
        self.seen = []

    def compress(self, text):
        self.seen.append(text)
        return "Short."


class TestContrast:
    """Tests for WCAG contrast math."""

    def test_black_on_white(self):
        assert contrast_ratio("000000", "ffffff") == pytest.approx(21.0)

    def test_same_color(self):
        assert contrast_ratio("1791e8", "1791e8") == pytest.approx(1.0)

    def test_order_does_not_matter(self):
        assert contrast_ratio("1d1d1d", "f5f5f5") == pytest.approx(contrast_ratio("f5f5f5", "1d1d1d"))

    def test_luminance_bounds(self):
        assert relative_luminance("000000") == pytest.approx(0.0)
        assert relative_luminance("#ffffff") == pytest.approx(1.0)


class TestCompression:
    def test_removes_filler(self):
        compressor = FillerPhraseCompressor()
        text = "It is important to note that we basically need to act in order to win"
        assert compressor.compress(text) == "we need to act to win"

    def test_leaves_plain_text_alone(self):
        text = "Milestone 0: capacity planning and staffing "
        assert FillerPhraseCompressor().compress(text) == text

    def test_respects_ratio_budget(self):
        text = "(a long aside that would remove almost everything) ok"
        assert FillerPhraseCompressor(max_ratio=0.3).compress(text) == text


class TestRules:
    """Tests for the individual lint rules."""

    def test_clean_slide_has_no_errors(self, make_deck):
        deck = make_deck(Slide(id="s1", title="Fine", blocks=[_long_list(3)]))
        result = _lint(deck)

        assert not result.has_errors
        assert result.patches == []

    def test_overflow_is_error(self, make_deck):
        deck = make_deck(Slide(id="s1", title="Too much", blocks=[_long_list(30)]))
        result = _lint(deck)

        overflow = [v for v in result.violations if v.rule_id == "OVERFLOW_TEXT_BOX"]
        assert overflow
        assert overflow[0].severity == Severity.ERROR
        assert overflow[0].block_id == "b1"

    def test_low_contrast_is_error(self, make_deck):
        block = TextBlock(id="t1", content="Hard to read", color=ColorRole.BORDER)
        deck = make_deck(Slide(id="s1", title="Contrast", blocks=[block]))
        result = _lint(deck)

        contrast = [v for v in result.violations if v.rule_id == "COLOR_CONTRAST"]
        assert len(contrast) == 1
        assert contrast[0].block_id == "t1"

    def test_bullet_count_warning(self, make_deck):
        slide = Slide(
            id="s1",
            title="Many",
            blocks=[BulletListBlock(id="b1", items=[BulletItem(text=f"P{i}") for i in range(4)])],
            constraints=SlideConstraints(density="sparse"),
        )
        result = _lint(make_deck(slide))

        assert "DENSITY_MAX_BULLETS" in _rule_ids(result)
        assert not result.has_errors

    def test_recommended_bullet_count_warning(self, make_deck):
        result = _lint(make_deck(Slide(id="s1", title="Four", blocks=[_long_list(4)])))

        assert "DENSITY_RECOMMENDED_BULLETS" in _rule_ids(result)
        assert "DENSITY_MAX_BULLETS" not in _rule_ids(result)
        assert not result.has_errors

    def test_small_text_warning(self, make_deck):
        footnote = TextBlock(id="t1", content="Source: internal survey", role="footnote")
        slide = Slide(id="s1", title="Dense", blocks=[footnote], constraints=SlideConstraints(density="dense"))
        result = _lint(make_deck(slide))

        small = [v for v in result.violations if v.rule_id == "TYPO_MIN_FONT_SIZE"]
        assert [v.block_id for v in small] == ["t1"]
        assert small[0].severity == Severity.WARNING

    def test_body_text_is_not_small(self, make_deck):
        result = _lint(make_deck(Slide(id="s1", title="Fine", blocks=[_long_list(3)])))
        assert "TYPO_MIN_FONT_SIZE" not in _rule_ids(result)

    def test_image_without_alt_text(self, make_deck):
        blocks = [ImageBlock(id="i1"), ImageBlock(id="i2", alt_text="Team photo")]
        result = _lint(make_deck(Slide(id="s1", title="Photos", blocks=blocks)))

        missing = [v for v in result.violations if v.rule_id == "A11Y_ALT_TEXT"]
        assert [v.block_id for v in missing] == ["i1"]

    def test_long_bullet_warning(self, make_deck):
        block = BulletListBlock(id="b1", items=[BulletItem(text="x" * 120)])
        result = _lint(make_deck(Slide(id="s1", title="Long", blocks=[block])))

        assert "DENSITY_BULLET_LENGTH" in _rule_ids(result)

    def test_footnote_on_full_bleed(self, make_deck):
        slide = Slide(
            id="s1",
            title="Photo",
            footnote="Photo credit",
            constraints=SlideConstraints(background_style=BackgroundStyle.IMAGE),
        )
        assert "CONSISTENCY_FULL_BLEED_FOOTNOTE" in _rule_ids(_lint(make_deck(slide)))

    def test_bullets_on_title_slide(self, make_deck):
        slide = Slide(id="s1", type=SlideType.TITLE, title="Hello", blocks=[_long_list(2)])
        assert "CONSISTENCY_SLIDE_TYPE" in _rule_ids(_lint(make_deck(slide)))

    def test_accent_limit(self, make_deck):
        blocks = [
            TextBlock(id=f"t{i}", content="x", color=role)
            for i, role in enumerate([ColorRole.PRIMARY_DARK, ColorRole.SURFACE_FOREGROUND, ColorRole.MUTED_FOREGROUND])
        ]
        assert "CONSISTENCY_ACCENT_LIMIT" in _rule_ids(_lint(make_deck(Slide(id="s1", title="Colors", blocks=blocks))))

    def test_violations_follow_slide_order(self, make_deck):
        deck = make_deck(
            Slide(id="s1", title="A", blocks=[_long_list(30)]),
            Slide(id="s2", title="B", blocks=[_long_list(30)]),
        )
        slide_ids = [v.slide_id for v in _lint(deck).violations]

        assert slide_ids == sorted(slide_ids)


class TestAutoFix:
    """Tests for the ordered overflow fixes."""

    def test_crowded_slide_drops_lowest_importance_items(self, make_deck, crowded_slide):
        deck = make_deck(crowded_slide)
        result = _lint(deck)

        assert len(result.patches) == 1
        patch = result.patches[0]
        assert patch.strategy == FixStrategy.REDUCE_BULLETS
        assert patch.id == "reduce_bullets:s1"

        texts = [item.text for item in patch.slides[0].blocks[0].items]
        original = [item.text for item in crowded_slide.blocks[0].items]
        assert texts == [original[i] for i in (0, 1, 2, 3, 7)]
        assert slide_fits(patch.slides[0], DEFAULT_THEME)

    def test_overflow_violation_links_patch(self, make_deck, crowded_slide):
        result = _lint(make_deck(crowded_slide))
        overflow = next(v for v in result.errors if v.rule_id == "OVERFLOW_TEXT_BOX")

        assert overflow.suggested_patch_id == "reduce_bullets:s1"
        assert result.patch_by_id("reduce_bullets:s1") is not None

    def test_compress_runs_before_reduce(self):
        items = [
            BulletItem(text="It is important to note that we basically need to act " * 2 + f"now {i}")
            for i in range(9)
        ]
        slide = Slide(id="s1", title="Filler", blocks=[BulletListBlock(id="b1", items=items)])

        assert compress_text(slide, DEFAULT_THEME, FillerPhraseCompressor()) is not None

    def test_compress_consumes_lower_importance_first(self):
        compressor = RecordingCompressor()
        low = TextBlock(id="low", content="filler " * 1500, importance=2)
        high = TextBlock(id="high", content="Keep this line as written", importance=4)
        slide = Slide(id="s1", title="Priority", blocks=[high, low])

        compressed = compress_text(slide, DEFAULT_THEME, compressor)[0]

        assert compressor.seen == [low.content]
        assert compressed.block_by_id("low").content == "Short."
        assert compressed.block_by_id("high") == high

    def test_importance_five_items_survive(self, crowded_slide):
        reduced = reduce_bullets(crowded_slide, DEFAULT_THEME)[0]
        assert reduced.blocks[0].items[0].importance == 5

    def test_protected_block_is_not_reduced(self):
        slide = Slide(id="s1", title="Keep", blocks=[_long_list(30, importance=5)])
        assert reduce_bullets(slide, DEFAULT_THEME) is None

    def test_two_column_halves_single_list(self):
        slide = Slide(id="s1", title="Wide", blocks=[_long_list(10)])
        converted = switch_to_two_column(slide, DEFAULT_THEME)[0]

        assert converted.type == SlideType.TWO_COLUMN
        left, right = converted.blocks
        assert (left.column, right.column) == ("left", "right")
        assert len(left.items) == 5 and len(right.items) == 5
        assert left.id == "b1" and right.id != "b1"

    def test_two_column_ineligible_type(self):
        slide = Slide(id="s1", type=SlideType.CHART, title="Chart", blocks=[_long_list(10)])
        assert switch_to_two_column(slide, DEFAULT_THEME) is None

    def test_split_adds_one_continuation_slide(self):
        slide = Slide(id="s1", title="Plan", blocks=[_long_list(30)])
        head, tail = split_slide(slide, DEFAULT_THEME, {"s1"})

        assert head.id == "s1"
        assert tail.id == "s1-cont"
        assert tail.title == "Plan (cont.)"
        assert len(head.blocks[0].items) + len(tail.blocks[0].items) == 30

    def test_split_avoids_taken_ids(self):
        slide = Slide(id="s1", title="Plan", blocks=[_long_list(30)])
        _, tail = split_slide(slide, DEFAULT_THEME, {"s1", "s1-cont"})
        assert tail.id == "s1-cont2"

    def test_continuation_title_is_not_stacked(self):
        assert continuation_title("Plan (cont.)") == "Plan (cont.)"

    def test_shrink_font_steps_down_to_minimum(self):
        slide = Slide(id="s1", title="Small", blocks=[_long_list(3)])
        scales = []
        while (shrunk := shrink_font(slide, DEFAULT_THEME)) is not None:
            slide = shrunk[0]
            scales.append(slide.constraints.font_scale)

        assert scales == pytest.approx([0.9, 0.8, 0.7])

    def test_shrink_font_respects_density_scale(self):
        slide = Slide(
            id="s1",
            title="Dense",
            blocks=[_long_list(3)],
            constraints=SlideConstraints(density="dense", font_scale=0.9),
        )
        shrunk = shrink_font(slide, DEFAULT_THEME)[0]

        assert shrunk.constraints.font_scale == pytest.approx(0.7 / 0.85, abs=1e-4)
        assert shrink_font(shrunk, DEFAULT_THEME) is None

    def test_protected_text_is_never_shrunk(self):
        wall = TextBlock(id="t1", content="word " * 2000, importance=5)
        slide = Slide(id="s1", title="Keep", blocks=[wall])

        assert shrink_font(slide, DEFAULT_THEME) is None
        assert plan_overflow_fix(slide, DEFAULT_THEME, FillerPhraseCompressor(), {"s1"}) is None

    def test_shrink_leaves_protected_block_size(self):
        blocks = [
            TextBlock(id="key", content="The one message to remember", importance=5),
            TextBlock(id="body", content="word " * 400, importance=2),
        ]
        slide = Slide(id="s1", title="Mixed", blocks=blocks)
        before = layout_slide(slide, DEFAULT_THEME)
        after = layout_slide(shrink_font(slide, DEFAULT_THEME)[0], DEFAULT_THEME)

        assert after.for_block("key").font_size == before.for_block("key").font_size
        assert after.for_block("key").applied_font_scale == pytest.approx(1.0)
        assert after.for_block("body").font_size < before.for_block("body").font_size
        assert after.for_block("body").applied_font_scale == pytest.approx(0.9)

    def test_unresolved_overflow_is_marked(self, make_deck):
        wall = TextBlock(id="t1", content="word " * 2000, importance=5)
        result = _lint(make_deck(Slide(id="s1", title="Keep", blocks=[wall])))

        overflow = next(v for v in result.errors if v.rule_id == "OVERFLOW_TEXT_BOX")
        assert result.patches == []
        assert overflow.suggested_patch_id is None
        assert overflow.message.endswith("(unresolved: no applicable fix)")

    def test_contrast_fix_swaps_background(self, make_deck):
        block = TextBlock(id="t1", content="Hard to read", color=ColorRole.BORDER)
        result = _lint(make_deck(Slide(id="s1", title="Contrast", blocks=[block])))

        patch = result.patches[0]
        assert patch.strategy == FixStrategy.SWAP_BACKGROUND
        assert patch.slides[0].background == ColorRole.SURFACE_FOREGROUND
        assert result.errors[0].suggested_patch_id == "swap_background:s1"

    def test_one_patch_per_slide_overflow_first(self, make_deck):
        blocks = [_long_list(30), TextBlock(id="t1", content="Hard to read", color=ColorRole.BORDER)]
        result = _lint(make_deck(Slide(id="s1", title="Both", blocks=blocks)))

        assert len(result.patches) == 1
        assert result.patches[0].strategy != FixStrategy.SWAP_BACKGROUND
        contrast = next(v for v in result.errors if v.rule_id == "COLOR_CONTRAST")
        assert contrast.suggested_patch_id is None


class TestApplyPatches:
    """Tests for patch application."""

    def test_untouched_slides_are_kept(self, make_deck, crowded_slide):
        other = Slide(id="s2", title="Other", blocks=[_long_list(2, block_id="s2-b1")])
        deck = make_deck(crowded_slide, other)
        patched = apply_patches(deck, _lint(deck))

        assert patched.slide_ids == ["s1", "s2"]
        assert patched.slides[1] == other
        assert patched is not deck
        assert len(deck.slides[0].blocks[0].items) == 8

    def test_split_inserts_continuation_after_source(self, make_deck):
        slide = Slide(id="s1", title="Plan", blocks=[_long_list(30)])
        deck = make_deck(slide, Slide(id="s2", title="Next"))
        replacement = split_slide(slide, DEFAULT_THEME, set(deck.slide_ids))
        lint_result = LintResult(patches=[{
            "id": "split_slide:s1",
            "strategy": FixStrategy.SPLIT_SLIDE,
            "slide_id": "s1",
            "description": "split",
            "slides": replacement,
        }])

        patched = apply_patches(deck, lint_result)
        assert patched.slide_ids == ["s1", "s1-cont", "s2"]

    def test_sections_are_remapped(self, make_deck):
        slide = Slide(id="s1", title="Plan", blocks=[_long_list(30)])
        deck = make_deck(
            Slide(id="s0", title="Intro"),
            slide,
            Slide(id="s2", title="Next"),
            sections=[Section(name="A", start_index=0, end_index=1), Section(name="B", start_index=2, end_index=2)],
        )
        replacement = split_slide(slide, DEFAULT_THEME, set(deck.slide_ids))
        lint_result = LintResult(patches=[{
            "id": "split_slide:s1",
            "strategy": FixStrategy.SPLIT_SLIDE,
            "slide_id": "s1",
            "description": "split",
            "slides": replacement,
        }])

        sections = apply_patches(deck, lint_result).sections
        assert [(s.name, s.start_index, s.end_index) for s in sections] == [("A", 0, 2), ("B", 3, 3)]

    def test_unknown_slide_patch_is_skipped(self, make_deck):
        deck = make_deck(Slide(id="s1", title="Only"))
        lint_result = LintResult(patches=[{
            "id": "shrink_font:ghost",
            "strategy": FixStrategy.SHRINK_FONT,
            "slide_id": "ghost",
            "description": "shrink",
            "slides": [Slide(id="ghost", title="Ghost")],
        }])

        assert apply_patches(deck, lint_result).slide_ids == ["s1"]
