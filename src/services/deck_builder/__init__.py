"""Deck builder: the pipeline orchestrator and merge stage."""

from .constants import PipelinePhase
from .events import PipelineEventEmitter
from .merge import merge_deck, placeholder_blocks
from .service import DeckBuilderService, get_deck_builder_service
from .state import PipelineState

__all__ = [
    "PipelinePhase",
    "PipelineEventEmitter",
    "merge_deck",
    "placeholder_blocks",
    "DeckBuilderService",
    "get_deck_builder_service",
    "PipelineState",
]
