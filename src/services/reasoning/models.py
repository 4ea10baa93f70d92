"""Result models exchanged with the reasoning gateway."""
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from src.models import (
    BackgroundStyle,
    Block,
    BulletItem,
    ColorRole,
    Density,
    SlideType,
    Transition,
)


class SlideOutline(BaseModel):
    """One planned slide: what it is and what it should say."""
    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="Position in the deck (0-based)")
    type: SlideType = SlideType.CONTENT
    title: str
    key_message: Optional[str] = None
    content_hints: list[str] = Field(default_factory=list)
    section: Optional[str] = None


class OutlineResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    subtitle: Optional[str] = None
    slides: list[SlideOutline] = Field(..., min_length=1)


class ContentResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    blocks: list[Block] = Field(default_factory=list)
    emphasize_key_message: bool = False
    notes: Optional[str] = None
    footnote: Optional[str] = None


class DesignResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    density: Density = Density.NORMAL
    use_accent_color: bool = False
    background_style: BackgroundStyle = BackgroundStyle.SOLID
    background: Optional[ColorRole] = None
    transition: Transition = Transition.NONE


@dataclass(frozen=True)
class Ok:
    """A settled generation task that produced a value."""
    index: int
    value: Any


@dataclass(frozen=True)
class Err:
    """A settled generation task that failed or timed out."""
    index: int
    reason: str


GenerationOutcome = Union[Ok, Err]


# Structured-output payloads for the agent-framework gateway.

class OutlineSlidePayload(BaseModel):
    type: SlideType = Field(..., description="Slide type")
    title: str = Field(..., description="Slide title")
    key_message: str = Field(default="", description="One-sentence takeaway")
    content_hints: list[str] = Field(default_factory=list, description="Points the slide should cover")
    section: str = Field(default="", description="Section the slide belongs to")


class OutlinePayload(BaseModel):
    title: str = Field(..., description="Presentation title")
    subtitle: str = Field(default="", description="Presentation subtitle")
    slides: list[OutlineSlidePayload] = Field(..., description="Ordered slides")


class BulletPayload(BaseModel):
    text: str
    level: int = Field(default=0, ge=0, le=4)
    importance: int = Field(default=3, ge=1, le=5)


class ContentPayload(BaseModel):
    emphasize_key_message: bool = Field(default=False, description="Show the key message as a callout")
    paragraphs: list[str] = Field(default_factory=list, description="Body paragraphs")
    bullets: list[BulletPayload] = Field(default_factory=list, description="Bullet items")
    notes: str = Field(default="", description="Speaker notes")
    footnote: str = Field(default="", description="Source or footnote text")

    def bullet_items(self) -> list[BulletItem]:
        return [BulletItem(text=b.text, level=b.level, importance=b.importance) for b in self.bullets]


class DesignPayload(BaseModel):
    density: Density = Density.NORMAL
    use_accent_color: bool = False
    background_style: BackgroundStyle = BackgroundStyle.SOLID
    transition: Transition = Transition.NONE
