"""Layout engine: (Deck, Theme) -> LayoutResult."""

from .engine import (
    layout,
    layout_slide,
    slide_fits,
    first_overflow_index,
    block_heights,
    density_profile,
)
from .grid import GridSystem

__all__ = [
    "layout",
    "layout_slide",
    "slide_fits",
    "first_overflow_index",
    "block_heights",
    "density_profile",
    "GridSystem",
]
