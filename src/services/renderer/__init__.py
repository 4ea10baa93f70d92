"""Renderers: laid-out deck -> presentation file."""

from .base import Renderer
from .pptx_renderer import PptxRenderer

__all__ = ["Renderer", "PptxRenderer"]
