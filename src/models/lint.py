"""Lint result models: violations and auto-fix patches."""
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .deck import Slide


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class RuleCategory(StrEnum):
    OVERFLOW = "overflow"
    CONTRAST = "contrast"
    SPACING = "spacing"
    DENSITY = "density"
    TYPOGRAPHY = "typography"
    CONSISTENCY = "consistency"
    ACCESSIBILITY = "accessibility"


class FixStrategy(StrEnum):
    """Overflow fixes in the fixed order they are tried, plus the contrast fix."""
    COMPRESS_TEXT = "compress_text"
    REDUCE_BULLETS = "reduce_bullets"
    TWO_COLUMN = "two_column"
    SPLIT_SLIDE = "split_slide"
    SHRINK_FONT = "shrink_font"
    SWAP_BACKGROUND = "swap_background"


class LintViolation(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule_id: str
    category: RuleCategory
    severity: Severity
    slide_id: str
    block_id: Optional[str] = None
    message: str
    suggested_patch_id: Optional[str] = None


class LintPatch(BaseModel):
    """
    A named, pure transformation of one slide.

    ``slides`` is the replacement for ``slide_id``: a single slide for in-place
    fixes, two slides when the slide is split.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    strategy: FixStrategy
    slide_id: str
    description: str
    slides: list[Slide] = Field(..., min_length=1)


class LintResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    violations: list[LintViolation] = Field(default_factory=list)
    patches: list[LintPatch] = Field(default_factory=list)

    @property
    def errors(self) -> list[LintViolation]:
        return [v for v in self.violations if v.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[LintViolation]:
        return [v for v in self.violations if v.severity == Severity.WARNING]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def patch_by_id(self, patch_id: str) -> Optional[LintPatch]:
        return next((p for p in self.patches if p.id == patch_id), None)
