"""Renderer interface."""
from abc import ABC, abstractmethod
from pathlib import Path

from src.models import Deck, LayoutResult, RenderResult, Theme


class Renderer(ABC):
    """
    Turns a laid-out deck into a presentation file.

    Renderers place shapes exactly at the computed boxes and never lay out
    on their own. I/O problems are reported in the RenderResult rather than
    raised.
    """

    name: str = "renderer"

    @abstractmethod
    def render(self, deck: Deck, layout: LayoutResult, theme: Theme, output_path: Path) -> RenderResult:
        ...
