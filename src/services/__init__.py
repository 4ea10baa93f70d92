"""Service layer for DeckSmith."""

from .deck_builder import DeckBuilderService, get_deck_builder_service

__all__ = [
    "DeckBuilderService",
    "get_deck_builder_service",
]
