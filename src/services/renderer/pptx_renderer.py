"""
PowerPoint Renderer

Writes a laid-out deck to .pptx with python-pptx. Every shape is placed at
the bounding box computed by the layout engine; colors come from the theme's
color roles so the rendered contrast matches what the style guardian checked.
"""
import logging
import time
from pathlib import Path
from typing import Optional

from pptx import Presentation
from pptx.chart.data import CategoryChartData
from pptx.dml.color import RGBColor
from pptx.enum.chart import XL_CHART_TYPE, XL_LEGEND_POSITION
from pptx.enum.shapes import MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.util import Inches, Pt

from src.models import (
    BackgroundStyle,
    BoundingBox,
    BulletListBlock,
    ChartBlock,
    ColorRole,
    Deck,
    ImageBlock,
    LayoutedSlide,
    LayoutResult,
    RenderResult,
    Slide,
    TableBlock,
    TextBlock,
    Theme,
)
from src.services.style_guardian.contrast import background_role, foreground_role

from .base import Renderer

logger = logging.getLogger(__name__)

BLANK_LAYOUT_INDEX = 6
BULLET_GLYPH = "•"
GRADIENT_ANGLE = 90

CHART_TYPES = {
    "bar": XL_CHART_TYPE.COLUMN_CLUSTERED,
    "line": XL_CHART_TYPE.LINE_MARKERS,
    "pie": XL_CHART_TYPE.PIE,
    "doughnut": XL_CHART_TYPE.DOUGHNUT,
    "area": XL_CHART_TYPE.AREA,
}

# Gradient backgrounds run from the base role to its lighter sibling.
GRADIENT_END: dict[ColorRole, ColorRole] = {
    ColorRole.PRIMARY_DARK: ColorRole.PRIMARY,
    ColorRole.PRIMARY: ColorRole.PRIMARY_LIGHT,
    ColorRole.SURFACE: ColorRole.MUTED,
    ColorRole.MUTED: ColorRole.SECONDARY,
}


def _rgb(theme: Theme, role: ColorRole) -> RGBColor:
    return RGBColor.from_string(theme.colors.resolve(role).upper())


def _emu_box(box: BoundingBox) -> tuple:
    return Inches(box.x), Inches(box.y), Inches(box.w), Inches(box.h)


class PptxRenderer(Renderer):
    """Renders decks to PowerPoint files."""

    name = "pptx"

    def render(self, deck: Deck, layout: LayoutResult, theme: Theme, output_path: Path) -> RenderResult:
        start_time = time.time()
        output_path = Path(output_path)
        try:
            prs = Presentation()
            prs.slide_width = Inches(theme.grid.canvas.width)
            prs.slide_height = Inches(theme.grid.canvas.height)
            prs.core_properties.title = deck.metadata.title
            if deck.metadata.author:
                prs.core_properties.author = deck.metadata.author

            for slide in deck.slides:
                layouted = layout.for_slide(slide.id)
                if layouted is None:
                    raise ValueError(f"No layout for slide {slide.id}")
                self._render_slide(prs, slide, layouted, theme)

            output_path.parent.mkdir(parents=True, exist_ok=True)
            prs.save(str(output_path))
        except Exception as e:
            logger.exception(f"Failed to render deck to {output_path}: {e}")
            return RenderResult(
                success=False,
                error=str(e),
                duration_ms=int((time.time() - start_time) * 1000),
            )

        return RenderResult(
            success=True,
            output_path=output_path,
            slide_count=len(deck.slides),
            duration_ms=int((time.time() - start_time) * 1000),
        )

    # =========================================================================
    # Slides
    # =========================================================================

    def _render_slide(self, prs, slide: Slide, layouted: LayoutedSlide, theme: Theme) -> None:
        pptx_slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT_INDEX])
        self._fill_background(pptx_slide, slide, theme)

        foreground = foreground_role(slide)
        scale = layouted.applied_font_scale
        if layouted.title_box is not None and slide.title:
            size = theme.font_sizes.title if slide.is_title_like else theme.font_sizes.section_title * scale
            self._add_text(
                pptx_slide, layouted.title_box, slide.title, theme,
                size=size, role=foreground, font=theme.fonts.display, bold=True,
                align=PP_ALIGN.CENTER if slide.is_title_like else None,
            )

        subtitle = slide.subtitle or (slide.key_message if slide.is_title_like else None)
        if layouted.subtitle_box is not None and subtitle:
            size = theme.font_sizes.subtitle if slide.is_title_like else theme.font_sizes.subtitle * scale
            self._add_text(
                pptx_slide, layouted.subtitle_box, subtitle, theme,
                size=size, role=foreground, font=theme.fonts.content,
                align=PP_ALIGN.CENTER if slide.is_title_like else None,
            )

        for placed in layouted.blocks:
            block = slide.blocks[placed.block_index]
            size = placed.font_size or theme.font_sizes.body * placed.applied_font_scale
            role = foreground_role(slide, block)
            if isinstance(block, TextBlock):
                self._add_text(
                    pptx_slide, placed.box, block.content, theme,
                    size=size, role=role, font=theme.fonts.content, bold=block.emphasized,
                )
            elif isinstance(block, BulletListBlock):
                self._add_bullets(pptx_slide, placed.box, block, theme, size=size, role=role)
            elif isinstance(block, ChartBlock):
                self._add_chart(pptx_slide, placed.box, block, theme)
            elif isinstance(block, TableBlock):
                self._add_table(pptx_slide, placed.box, block, theme, size=size)
            elif isinstance(block, ImageBlock):
                self._add_image(pptx_slide, placed.box, block, theme)

        if layouted.footnote_box is not None and slide.footnote:
            self._add_text(
                pptx_slide, layouted.footnote_box, slide.footnote, theme,
                size=theme.font_sizes.footnote, role=foreground, font=theme.fonts.content,
            )

        if slide.notes:
            pptx_slide.notes_slide.notes_text_frame.text = slide.notes

    def _fill_background(self, pptx_slide, slide: Slide, theme: Theme) -> None:
        role = background_role(slide)
        fill = pptx_slide.background.fill
        end_role = GRADIENT_END.get(role)
        if slide.constraints.background_style == BackgroundStyle.GRADIENT and end_role is not None:
            fill.gradient()
            fill.gradient_angle = GRADIENT_ANGLE
            stops = fill.gradient_stops
            stops[0].color.rgb = _rgb(theme, role)
            stops[-1].color.rgb = _rgb(theme, end_role)
        else:
            fill.solid()
            fill.fore_color.rgb = _rgb(theme, role)

    # =========================================================================
    # Blocks
    # =========================================================================

    def _add_text(
        self,
        pptx_slide,
        box: BoundingBox,
        text: str,
        theme: Theme,
        size: float,
        role: ColorRole,
        font: str,
        bold: bool = False,
        align: Optional[int] = None,
    ) -> None:
        textbox = pptx_slide.shapes.add_textbox(*_emu_box(box))
        tf = textbox.text_frame
        tf.word_wrap = True
        tf.vertical_anchor = MSO_ANCHOR.TOP
        for i, line in enumerate(text.split("\n")):
            p = tf.paragraphs[0] if i == 0 else tf.add_paragraph()
            p.text = line
            p.font.name = font
            p.font.size = Pt(size)
            p.font.bold = bold
            p.font.color.rgb = _rgb(theme, role)
            if align is not None:
                p.alignment = align

    def _add_bullets(
        self,
        pptx_slide,
        box: BoundingBox,
        block: BulletListBlock,
        theme: Theme,
        size: float,
        role: ColorRole,
    ) -> None:
        textbox = pptx_slide.shapes.add_textbox(*_emu_box(box))
        tf = textbox.text_frame
        tf.word_wrap = True
        for i, item in enumerate(block.items):
            p = tf.paragraphs[0] if i == 0 else tf.add_paragraph()
            p.text = f"{BULLET_GLYPH} {item.text}"
            p.level = item.level
            p.font.name = theme.fonts.content
            p.font.size = Pt(size)
            p.font.bold = item.importance == 5
            p.font.color.rgb = _rgb(theme, role)

    def _add_chart(self, pptx_slide, box: BoundingBox, block: ChartBlock, theme: Theme) -> None:
        if not block.categories or not block.series:
            self._add_placeholder(pptx_slide, box, block.title or "Chart", theme)
            return

        chart_data = CategoryChartData()
        chart_data.categories = block.categories
        width = len(block.categories)
        for series in block.series:
            values = (list(series.values) + [0.0] * width)[:width]
            chart_data.add_series(series.name, values)

        chart = pptx_slide.shapes.add_chart(
            CHART_TYPES[block.chart_type], *_emu_box(box), chart_data
        ).chart
        if block.title:
            chart.has_title = True
            chart.chart_title.text_frame.text = block.title
        chart.has_legend = len(block.series) > 1 or block.chart_type in ("pie", "doughnut")
        if chart.has_legend:
            chart.legend.position = XL_LEGEND_POSITION.BOTTOM
            chart.legend.include_in_layout = False

    def _add_table(self, pptx_slide, box: BoundingBox, block: TableBlock, theme: Theme, size: float) -> None:
        rows = ([block.headers] if block.headers else []) + block.rows
        cols = max((len(r) for r in rows), default=0)
        if not rows or cols == 0:
            self._add_placeholder(pptx_slide, box, "Table", theme)
            return

        table = pptx_slide.shapes.add_table(len(rows), cols, *_emu_box(box)).table
        for r, row in enumerate(rows):
            for c in range(cols):
                cell = table.cell(r, c)
                cell.text = row[c] if c < len(row) else ""
                for p in cell.text_frame.paragraphs:
                    p.font.size = Pt(size)
                    p.font.name = theme.fonts.content

    def _add_image(self, pptx_slide, box: BoundingBox, block: ImageBlock, theme: Theme) -> None:
        source = Path(block.source) if block.source else None
        if source is not None and source.is_file():
            pptx_slide.shapes.add_picture(str(source), *_emu_box(box))
            return
        self._add_placeholder(pptx_slide, box, block.alt_text or "Image", theme)

    def _add_placeholder(self, pptx_slide, box: BoundingBox, label: str, theme: Theme) -> None:
        shape = pptx_slide.shapes.add_shape(MSO_SHAPE.RECTANGLE, *_emu_box(box))
        shape.fill.solid()
        shape.fill.fore_color.rgb = _rgb(theme, ColorRole.MUTED)
        shape.line.color.rgb = _rgb(theme, ColorRole.BORDER)
        tf = shape.text_frame
        tf.word_wrap = True
        p = tf.paragraphs[0]
        p.text = label
        p.alignment = PP_ALIGN.CENTER
        p.font.size = Pt(theme.font_sizes.caption)
        p.font.name = theme.fonts.content
        p.font.color.rgb = _rgb(theme, ColorRole.MUTED_FOREGROUND)
