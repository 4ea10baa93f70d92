"""Layout result models: derived geometry for every block of a deck."""
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from .deck import Deck


class BoundingBox(BaseModel):
    """Rectangle in inches, origin at the top-left of the canvas."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h


class LayoutedBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    block_id: str
    block_index: int = Field(..., ge=0)
    box: BoundingBox
    overflow: bool = False
    applied_font_scale: float = 1.0
    font_size: Optional[float] = Field(default=None, description="Resolved body font size in points")


class LayoutedSlide(BaseModel):
    model_config = ConfigDict(frozen=True)

    slide_id: str
    content_area: BoundingBox
    title_box: Optional[BoundingBox] = None
    subtitle_box: Optional[BoundingBox] = None
    footnote_box: Optional[BoundingBox] = None
    applied_font_scale: float = 1.0
    blocks: list[LayoutedBlock] = Field(default_factory=list)

    @property
    def has_overflow(self) -> bool:
        return any(b.overflow for b in self.blocks)

    def for_block(self, block_id: str) -> Optional[LayoutedBlock]:
        return next((b for b in self.blocks if b.block_id == block_id), None)


class LayoutResult(BaseModel):
    """
    Geometry for a whole deck.

    Pure derived data: always recomputable from (Deck, Theme) and never
    treated as the source of truth.
    """
    model_config = ConfigDict(frozen=True)

    slides: list[LayoutedSlide] = Field(default_factory=list)

    @property
    def has_overflow(self) -> bool:
        return any(s.has_overflow for s in self.slides)

    def for_slide(self, slide_id: str) -> Optional[LayoutedSlide]:
        return next((s for s in self.slides if s.slide_id == slide_id), None)

    def covers(self, deck: "Deck") -> bool:
        """Check that every block of the deck has a bounding box."""
        for slide in deck.slides:
            layouted = self.for_slide(slide.id)
            if layouted is None:
                return False
            placed = {b.block_id for b in layouted.blocks}
            if any(block.id not in placed for block in slide.blocks):
                return False
        return True
