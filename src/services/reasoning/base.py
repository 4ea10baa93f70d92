"""Reasoning gateway interface and factory."""
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from src.models import Theme, Tone, UserInput

from .models import ContentResult, DesignResult, OutlineResult, SlideOutline

if TYPE_CHECKING:
    from src.core.config import Settings

logger = logging.getLogger(__name__)


class ReasoningGateway(ABC):
    """
    Turns a brief into outline, content and design suggestions.

    Every call may fail or time out; callers must handle both.
    """

    name: str = "gateway"

    @abstractmethod
    async def generate_outline(self, user_input: UserInput, theme: Theme) -> OutlineResult:
        ...

    @abstractmethod
    async def generate_content(self, outline: SlideOutline, tone: Tone) -> ContentResult:
        ...

    @abstractmethod
    async def generate_design(self, outline: SlideOutline, theme: Theme) -> DesignResult:
        ...


def get_reasoning_gateway(settings: Optional["Settings"] = None) -> ReasoningGateway:
    """
    Create the gateway for the configured provider.

    Azure OpenAI when it is configured, the offline heuristic gateway otherwise.
    """
    if settings is None:
        from src.core.config import get_settings
        settings = get_settings()

    if settings.reasoning_provider == "azure":
        from .azure import AzureReasoningGateway
        logger.info("Using Azure OpenAI reasoning gateway")
        return AzureReasoningGateway(settings)

    from .heuristic import HeuristicReasoningGateway
    logger.info("Azure OpenAI not configured, using heuristic reasoning gateway")
    return HeuristicReasoningGateway()
