"""Deck document models: user input, slides and content blocks."""
from datetime import datetime, timezone
from enum import StrEnum
from typing import Annotated, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .theme import ColorRole, Theme, DEFAULT_THEME

MIN_SLIDE_COUNT, MAX_SLIDE_COUNT = 5, 20


class Tone(StrEnum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    ACADEMIC = "academic"
    CREATIVE = "creative"
    MINIMAL = "minimal"
    ENERGETIC = "energetic"
    LUXURY = "luxury"


class SlideType(StrEnum):
    TITLE = "title"
    SECTION_TITLE = "sectionTitle"
    CONTENT = "content"
    TWO_COLUMN = "twoColumn"
    AGENDA = "agenda"
    CHART = "chart"
    COMPARISON = "comparison"
    CLOSING = "closing"
    QNA = "qna"
    SUMMARY = "summary"


# Slides that show a centred title instead of a content area.
TITLE_LIKE_TYPES = frozenset({SlideType.TITLE, SlideType.SECTION_TITLE, SlideType.CLOSING, SlideType.QNA})
SPLIT_COLUMN_TYPES = frozenset({SlideType.TWO_COLUMN, SlideType.COMPARISON})


class Density(StrEnum):
    SPARSE = "sparse"
    NORMAL = "normal"
    DENSE = "dense"


class BackgroundStyle(StrEnum):
    SOLID = "solid"
    GRADIENT = "gradient"
    IMAGE = "image"


class Transition(StrEnum):
    NONE = "none"
    FADE = "fade"
    SLIDE = "slide"
    ZOOM = "zoom"


class BlockKind(StrEnum):
    TEXT = "text"
    BULLET_LIST = "bulletList"
    CHART = "chart"
    TABLE = "table"
    IMAGE = "image"


class UserInput(BaseModel):
    """The user's brief. Immutable once accepted."""
    model_config = ConfigDict(frozen=True)

    topic: str = Field(..., min_length=1, description="Presentation topic")
    audience: str = Field(..., min_length=1, description="Target audience")
    tone: Tone = Field(default=Tone.PROFESSIONAL, description="Presentation tone")
    slide_count: int = Field(default=10, description="Requested number of slides")
    source_content: Optional[str] = Field(default=None, description="Optional raw source text")
    language: Literal["ko", "en", "ja", "zh"] = "en"
    author: Optional[str] = None
    company: Optional[str] = None

    @field_validator("topic", "audience")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("slide_count")
    @classmethod
    def clamp_slide_count(cls, v: int) -> int:
        return max(MIN_SLIDE_COUNT, min(MAX_SLIDE_COUNT, v))


def _new_block_id() -> str:
    return f"blk-{uuid4().hex[:8]}"


class BlockBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_block_id)
    importance: int = Field(default=3, ge=1, le=5, description="5 = must not be dropped or shrunk")
    column: Optional[Literal["left", "right"]] = Field(
        default=None,
        description="Column hint for two-column slides"
    )
    color: Optional[ColorRole] = Field(default=None, description="Foreground color override")


class TextBlock(BlockBase):
    type: Literal["text"] = "text"
    content: str
    role: Literal["body", "caption", "footnote"] = "body"
    emphasized: bool = False


class BulletItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    level: int = Field(default=0, ge=0, le=4)
    importance: int = Field(default=3, ge=1, le=5)


class BulletListBlock(BlockBase):
    type: Literal["bulletList"] = "bulletList"
    items: list[BulletItem] = Field(..., min_length=1)


class ChartSeries(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    values: list[float]


class ChartBlock(BlockBase):
    type: Literal["chart"] = "chart"
    chart_type: Literal["bar", "line", "pie", "doughnut", "area"] = "bar"
    title: Optional[str] = None
    categories: list[str] = Field(default_factory=list)
    series: list[ChartSeries] = Field(default_factory=list)
    aspect_ratio: float = Field(default=16 / 9, gt=0)


class TableBlock(BlockBase):
    type: Literal["table"] = "table"
    headers: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)
    aspect_ratio: float = Field(default=2.0, gt=0)


class ImageBlock(BlockBase):
    type: Literal["image"] = "image"
    source: Optional[str] = Field(default=None, description="Local path or URL of the image")
    alt_text: str = ""
    aspect_ratio: float = Field(default=4 / 3, gt=0)


Block = Annotated[
    Union[TextBlock, BulletListBlock, ChartBlock, TableBlock, ImageBlock],
    Field(discriminator="type"),
]

# Blocks whose text is measured and contrast-checked.
TEXT_BEARING_KINDS = frozenset({BlockKind.TEXT, BlockKind.BULLET_LIST})
# Blocks and items at this importance are never dropped or shrunk.
PROTECTED_IMPORTANCE = 5


def block_text(block: Block) -> str:
    """Get all human-readable text carried by a block."""
    if isinstance(block, TextBlock):
        return block.content
    if isinstance(block, BulletListBlock):
        return "\n".join(item.text for item in block.items)
    if isinstance(block, ChartBlock):
        return block.title or ""
    if isinstance(block, TableBlock):
        return "\n".join([" ".join(block.headers)] + [" ".join(row) for row in block.rows])
    if isinstance(block, ImageBlock):
        return block.alt_text
    raise TypeError(f"Unknown block type: {type(block).__name__}")


class SlideConstraints(BaseModel):
    model_config = ConfigDict(frozen=True)

    density: Density = Density.NORMAL
    use_accent_color: bool = False
    background_style: BackgroundStyle = BackgroundStyle.SOLID
    font_scale: float = Field(default=1.0, gt=0, le=2.0, description="Font scale on top of the density scale")


class Slide(BaseModel):
    """One page-level unit with a fixed type and ordered content blocks."""
    model_config = ConfigDict(frozen=True)

    id: str
    type: SlideType = SlideType.CONTENT
    title: str = ""
    subtitle: Optional[str] = None
    key_message: Optional[str] = None
    footnote: Optional[str] = None
    notes: Optional[str] = None
    blocks: list[Block] = Field(default_factory=list)
    constraints: SlideConstraints = Field(default_factory=SlideConstraints)
    background: Optional[ColorRole] = None
    transition: Transition = Transition.NONE

    @property
    def is_title_like(self) -> bool:
        return self.type in TITLE_LIKE_TYPES

    def block_by_id(self, block_id: str) -> Optional[Block]:
        return next((b for b in self.blocks if b.id == block_id), None)


class Section(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    start_index: int = Field(..., ge=0)
    end_index: int = Field(..., ge=0)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeckMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    subtitle: Optional[str] = None
    author: Optional[str] = None
    company: Optional[str] = None
    version: str = "1.0.0"
    language: Literal["ko", "en", "ja", "zh"] = "en"
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Deck(BaseModel):
    """The full structured presentation document."""
    model_config = ConfigDict(frozen=True)

    metadata: DeckMetadata
    theme: Theme = DEFAULT_THEME
    sections: list[Section] = Field(default_factory=list)
    slides: list[Slide] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_slide_ids(self) -> "Deck":
        seen: set[str] = set()
        for slide in self.slides:
            if slide.id in seen:
                raise ValueError(f"Duplicate slide id: {slide.id}")
            seen.add(slide.id)
        return self

    @property
    def slide_ids(self) -> list[str]:
        return [s.id for s in self.slides]

    def slide_by_id(self, slide_id: str) -> Optional[Slide]:
        return next((s for s in self.slides if s.id == slide_id), None)
