"""Theme models: color roles, font roles, type scale and the layout grid."""
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SafeFont = Literal[
    "Arial",
    "Helvetica",
    "Times New Roman",
    "Georgia",
    "Verdana",
    "Trebuchet MS",
    "Courier New",
    "Impact",
    "Comic Sans MS",
    "Tahoma",
]


class ColorRole(StrEnum):
    """Named color slots a slide or block may reference."""
    PRIMARY = "primary"
    PRIMARY_LIGHT = "primary_light"
    PRIMARY_DARK = "primary_dark"
    SECONDARY = "secondary"
    SURFACE = "surface"
    SURFACE_FOREGROUND = "surface_foreground"
    MUTED = "muted"
    MUTED_FOREGROUND = "muted_foreground"
    ACCENT = "accent"
    BORDER = "border"


class ThemeColors(BaseModel):
    """Hex color tokens (RRGGBB, no leading '#') per role."""
    model_config = ConfigDict(frozen=True)

    primary: str = "1791e8"
    primary_light: str = "4ba8ed"
    primary_dark: str = "1273ba"
    secondary: str = "f5f5f5"
    surface: str = "ffffff"
    surface_foreground: str = "1d1d1d"
    muted: str = "f5f5f5"
    muted_foreground: str = "737373"
    accent: str = "f5f5f5"
    border: str = "c8c8c8"

    @field_validator("*", mode="before")
    @classmethod
    def normalize_hex(cls, v: str) -> str:
        value = str(v).strip().lstrip("#").lower()
        if len(value) != 6 or any(c not in "0123456789abcdef" for c in value):
            raise ValueError(f"Invalid hex color token: {v!r}")
        return value

    def resolve(self, role: ColorRole) -> str:
        """Get the hex token for a color role."""
        return getattr(self, role.value)


class ThemeFonts(BaseModel):
    model_config = ConfigDict(frozen=True)

    display: SafeFont = "Arial"
    content: SafeFont = "Arial"
    mono: SafeFont = "Courier New"

    @property
    def families(self) -> set[str]:
        return {self.display, self.content, self.mono}


class FontSizes(BaseModel):
    """Font size in points per text role."""
    model_config = ConfigDict(frozen=True)

    title: float = Field(default=44, gt=0)
    section_title: float = Field(default=34, gt=0)
    subtitle: float = Field(default=24, gt=0)
    body: float = Field(default=20, gt=0)
    caption: float = Field(default=12, gt=0)
    footnote: float = Field(default=10, gt=0)


class LineHeights(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: float = Field(default=1.1, gt=0)
    body: float = Field(default=1.3, gt=0)


class Canvas(BaseModel):
    """Physical slide size in inches."""
    model_config = ConfigDict(frozen=True)

    width: float = 13.333
    height: float = 7.5


class ThemeGrid(BaseModel):
    """
    Layout grid definition.

    Geometry is deliberately not validated here: the layout engine owns the
    check and reports a degenerate grid as ``InvalidTheme``.
    """
    model_config = ConfigDict(frozen=True)

    canvas: Canvas = Field(default_factory=Canvas)
    safe_margin: float = 0.5
    readable_margin: float = 0.7
    columns: int = 12
    gutter: float = 0.2
    baseline_unit: float = Field(default=8, description="Baseline unit in points")


class Theme(BaseModel):
    """Color/font/grid configuration shared by all slides in a deck."""
    model_config = ConfigDict(frozen=True)

    name: str = "default"
    colors: ThemeColors = Field(default_factory=ThemeColors)
    fonts: ThemeFonts = Field(default_factory=ThemeFonts)
    font_sizes: FontSizes = Field(default_factory=FontSizes)
    line_heights: LineHeights = Field(default_factory=LineHeights)
    grid: ThemeGrid = Field(default_factory=ThemeGrid)

    def with_canvas(self, width: float, height: float) -> "Theme":
        """Return a copy of the theme sized for a different canvas."""
        grid = self.grid.model_copy(update={"canvas": Canvas(width=width, height=height)})
        return self.model_copy(update={"grid": grid})


DEFAULT_THEME = Theme()

# One palette per tone; fonts and grid stay at their defaults.
TONE_PALETTES: dict[str, dict[str, str]] = {
    "professional": {},
    "casual": {
        "primary": "f97316",
        "primary_light": "fb923c",
        "primary_dark": "c2410c",
        "accent": "fef3c7",
    },
    "academic": {
        "primary": "1e3a5f",
        "primary_light": "3b5b85",
        "primary_dark": "132740",
        "surface_foreground": "111827",
    },
    "creative": {
        "primary": "7c3aed",
        "primary_light": "a78bfa",
        "primary_dark": "5b21b6",
        "accent": "fce7f3",
    },
    "minimal": {
        "primary": "404040",
        "primary_light": "737373",
        "primary_dark": "262626",
        "accent": "fafafa",
    },
    "energetic": {
        "primary": "dc2626",
        "primary_light": "f87171",
        "primary_dark": "991b1b",
        "accent": "fef9c3",
    },
    "luxury": {
        "primary": "1c1917",
        "primary_light": "44403c",
        "primary_dark": "0c0a09",
        "accent": "fef3c7",
    },
}

TONE_FONTS: dict[str, dict[str, str]] = {
    "academic": {"display": "Georgia", "content": "Georgia"},
    "luxury": {"display": "Times New Roman", "content": "Georgia"},
    "creative": {"display": "Trebuchet MS", "content": "Verdana"},
}


def theme_for_tone(tone: str) -> Theme:
    """Get the preset theme for a presentation tone."""
    tone = str(tone)
    colors = DEFAULT_THEME.colors.model_copy(update=TONE_PALETTES.get(tone, {}))
    fonts = DEFAULT_THEME.fonts.model_copy(update=TONE_FONTS.get(tone, {}))
    return DEFAULT_THEME.model_copy(update={"name": tone, "colors": colors, "fonts": fonts})
