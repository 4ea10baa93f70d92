"""Helper utilities for deck building."""
import re

MAX_FILENAME_LENGTH = 100
DEFAULT_FILENAME = "deck"


def sanitize_filename(name: str) -> str:
    """Turn a topic into a safe file stem: word characters, hyphens and underscores only."""
    cleaned = re.sub(r"[^\w\s-]", "", name, flags=re.UNICODE)
    cleaned = re.sub(r"\s+", "_", cleaned.strip())
    return cleaned[:MAX_FILENAME_LENGTH] or DEFAULT_FILENAME


def format_duration(duration_ms: int) -> str:
    """Format a duration for log lines and CLI summaries."""
    if duration_ms < 1000:
        return f"{duration_ms}ms"
    return f"{duration_ms / 1000:.1f}s"
