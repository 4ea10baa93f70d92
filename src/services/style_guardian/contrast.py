"""Color role resolution and WCAG contrast math."""
from typing import Optional

from src.models import Block, ColorRole, Slide, Theme

# Background used when a slide does not override it.
TITLE_LIKE_BACKGROUND = ColorRole.PRIMARY_DARK
CONTENT_BACKGROUND = ColorRole.SURFACE

# Default text color for each background role.
FOREGROUND_FOR_BACKGROUND: dict[ColorRole, ColorRole] = {
    ColorRole.PRIMARY: ColorRole.SURFACE,
    ColorRole.PRIMARY_DARK: ColorRole.SURFACE,
    ColorRole.PRIMARY_LIGHT: ColorRole.SURFACE_FOREGROUND,
    ColorRole.SECONDARY: ColorRole.SURFACE_FOREGROUND,
    ColorRole.SURFACE: ColorRole.SURFACE_FOREGROUND,
    ColorRole.SURFACE_FOREGROUND: ColorRole.SURFACE,
    ColorRole.MUTED: ColorRole.SURFACE_FOREGROUND,
    ColorRole.MUTED_FOREGROUND: ColorRole.SURFACE,
    ColorRole.ACCENT: ColorRole.SURFACE_FOREGROUND,
    ColorRole.BORDER: ColorRole.SURFACE_FOREGROUND,
}

# Background roles tried, in order, when a slide fails the contrast check.
BACKGROUND_CANDIDATES = (
    ColorRole.SURFACE,
    ColorRole.SURFACE_FOREGROUND,
    ColorRole.PRIMARY_DARK,
    ColorRole.MUTED,
    ColorRole.SECONDARY,
)


def _channel(value: int) -> float:
    c = value / 255
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(hex_color: str) -> float:
    """WCAG relative luminance of an RRGGBB token."""
    hex_color = hex_color.lstrip("#")
    r, g, b = (int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    return 0.2126 * _channel(r) + 0.7152 * _channel(g) + 0.0722 * _channel(b)


def contrast_ratio(foreground: str, background: str) -> float:
    """Contrast ratio between two colors, from 1.0 to 21.0."""
    lighter, darker = sorted(
        (relative_luminance(foreground), relative_luminance(background)),
        reverse=True,
    )
    return (lighter + 0.05) / (darker + 0.05)


def background_role(slide: Slide) -> ColorRole:
    if slide.background is not None:
        return slide.background
    return TITLE_LIKE_BACKGROUND if slide.is_title_like else CONTENT_BACKGROUND


def foreground_role(slide: Slide, block: Optional[Block] = None) -> ColorRole:
    if block is not None and block.color is not None:
        return block.color
    return FOREGROUND_FOR_BACKGROUND[background_role(slide)]


def role_contrast(theme: Theme, foreground: ColorRole, background: ColorRole) -> float:
    return contrast_ratio(theme.colors.resolve(foreground), theme.colors.resolve(background))
