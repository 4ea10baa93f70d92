"""
Azure OpenAI Reasoning Gateway

Drafts outlines, slide content and design hints with three Microsoft Agent
Framework agents backed by an Azure OpenAI deployment. Every call uses a
structured response format and raises when the model returns nothing usable.
"""
import logging
from typing import Optional

from agent_framework import ChatMessage, Role
from agent_framework.azure import AzureOpenAIChatClient
from azure.identity import DefaultAzureCredential

from src.core.config import Settings, get_settings
from src.models import BulletListBlock, TextBlock, Theme, Tone, UserInput

from .base import ReasoningGateway
from .helpers import build_content_prompt, build_design_prompt, build_outline_prompt
from .models import (
    ContentPayload,
    ContentResult,
    DesignPayload,
    DesignResult,
    OutlinePayload,
    OutlineResult,
    SlideOutline,
)
from .prompts import (
    CONTENT_AGENT_INSTRUCTIONS,
    DESIGN_AGENT_INSTRUCTIONS,
    OUTLINE_AGENT_INSTRUCTIONS,
)

logger = logging.getLogger(__name__)


def outline_from_payload(payload: OutlinePayload, slide_count: int) -> OutlineResult:
    """Convert the outline agent's payload, keeping at most ``slide_count`` slides."""
    if len(payload.slides) != slide_count:
        logger.warning(f"Outline agent returned {len(payload.slides)} slides, expected {slide_count}")
    slides = [
        SlideOutline(
            index=i,
            type=s.type,
            title=s.title,
            key_message=s.key_message or None,
            content_hints=s.content_hints,
            section=s.section or None,
        )
        for i, s in enumerate(payload.slides[:slide_count])
    ]
    return OutlineResult(title=payload.title, subtitle=payload.subtitle or None, slides=slides)


def content_from_payload(payload: ContentPayload) -> ContentResult:
    """Convert the content agent's payload into blocks."""
    blocks = [TextBlock(content=p) for p in payload.paragraphs if p.strip()]
    items = payload.bullet_items()
    if items:
        blocks.append(BulletListBlock(items=items))
    return ContentResult(
        blocks=blocks,
        emphasize_key_message=payload.emphasize_key_message,
        notes=payload.notes or None,
        footnote=payload.footnote or None,
    )


def design_from_payload(payload: DesignPayload) -> DesignResult:
    return DesignResult(
        density=payload.density,
        use_accent_color=payload.use_accent_color,
        background_style=payload.background_style,
        transition=payload.transition,
    )


class AzureReasoningGateway(ReasoningGateway):
    """
    Reasoning gateway backed by Azure OpenAI through Microsoft Agent Framework.

    The chat client and agents are created lazily on first use.
    """

    name = "azure"

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._chat_client: Optional[AzureOpenAIChatClient] = None
        self._outline_agent = None
        self._content_agent = None
        self._design_agent = None

    @property
    def is_available(self) -> bool:
        return self._settings.has_azure_openai

    def _ensure_client(self) -> None:
        """Ensure the chat client and agents are initialized."""
        if self._chat_client is not None:
            return
        if not self.is_available:
            raise ValueError("Azure OpenAI is not configured")

        credential = DefaultAzureCredential()
        self._chat_client = AzureOpenAIChatClient(
            credential=credential,
            endpoint=self._settings.azure_openai_endpoint or "",
            deployment_name=self._settings.azure_openai_deployment,
            api_version=self._settings.azure_openai_api_version,
        )
        self._outline_agent = self._chat_client.create_agent(
            name="OutlineAgent",
            instructions=OUTLINE_AGENT_INSTRUCTIONS,
        )
        self._content_agent = self._chat_client.create_agent(
            name="ContentAgent",
            instructions=CONTENT_AGENT_INSTRUCTIONS,
        )
        self._design_agent = self._chat_client.create_agent(
            name="DesignAgent",
            instructions=DESIGN_AGENT_INSTRUCTIONS,
        )

    async def generate_outline(self, user_input: UserInput, theme: Theme) -> OutlineResult:
        self._ensure_client()
        response = await self._outline_agent.run(
            [ChatMessage(role=Role.USER, text=build_outline_prompt(user_input))],
            response_format=OutlinePayload,
        )
        if response.value:
            return outline_from_payload(response.value, user_input.slide_count)

        raise ValueError("Failed to generate presentation outline")

    async def generate_content(self, outline: SlideOutline, tone: Tone) -> ContentResult:
        self._ensure_client()
        response = await self._content_agent.run(
            [ChatMessage(role=Role.USER, text=build_content_prompt(outline, tone))],
            response_format=ContentPayload,
        )
        if response.value:
            return content_from_payload(response.value)

        raise ValueError(f"Failed to generate content for slide {outline.index + 1}")

    async def generate_design(self, outline: SlideOutline, theme: Theme) -> DesignResult:
        self._ensure_client()
        response = await self._design_agent.run(
            [ChatMessage(role=Role.USER, text=build_design_prompt(outline, theme))],
            response_format=DesignPayload,
        )
        if response.value:
            return design_from_payload(response.value)

        raise ValueError(f"Failed to generate design hints for slide {outline.index + 1}")
