"""Prompt building helpers for the reasoning agents."""
from src.models import Theme, Tone, UserInput

from .models import SlideOutline

SOURCE_PREVIEW_LENGTH = 4000


def truncate(text: str, max_length: int) -> str:
    """Truncate text with ellipsis if it exceeds max_length."""
    return text[:max_length] + "..." if len(text) > max_length else text


def build_outline_prompt(user_input: UserInput) -> str:
    """Build the user prompt for outline generation."""
    source = ""
    if user_input.source_content:
        source = f"""

SOURCE MATERIAL:
{truncate(user_input.source_content, SOURCE_PREVIEW_LENGTH)}"""

    return f"""Create a presentation outline.

Topic: {user_input.topic}
Audience: {user_input.audience}
Tone: {user_input.tone}
Language: {user_input.language}
Slide count: exactly {user_input.slide_count}{source}"""


def build_content_prompt(outline: SlideOutline, tone: Tone) -> str:
    """Build the user prompt for one slide's content."""
    hints = "\n".join(f"- {h}" for h in outline.content_hints) or "- (none)"
    return f"""Write the content for slide {outline.index + 1}.

Type: {outline.type}
Title: {outline.title}
Key message: {outline.key_message or "(none)"}
Tone: {tone}

CONTENT HINTS:
{hints}"""


def build_design_prompt(outline: SlideOutline, theme: Theme) -> str:
    """Build the user prompt for one slide's design hints."""
    return f"""Choose design hints for slide {outline.index + 1}.

Type: {outline.type}
Title: {outline.title}
Number of content hints: {len(outline.content_hints)}
Theme: {theme.name} (display font {theme.fonts.display}, content font {theme.fonts.content})"""
