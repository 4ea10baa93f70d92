"""Style guardian: lint rules, auto-fix planning and patch application."""

from .compression import FillerPhraseCompressor, TextCompressor
from .contrast import contrast_ratio, relative_luminance
from .guardian import StyleGuardian, apply_patches, get_style_guardian, lint
from .rules import RULES, LintRule

__all__ = [
    "FillerPhraseCompressor",
    "TextCompressor",
    "contrast_ratio",
    "relative_luminance",
    "StyleGuardian",
    "apply_patches",
    "get_style_guardian",
    "lint",
    "RULES",
    "LintRule",
]
