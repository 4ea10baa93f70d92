"""DeckSmith: brief in, laid-out and style-checked deck out."""

__version__ = "0.1.0"
