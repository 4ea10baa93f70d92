"""Reasoning gateway: outline, content and design suggestions."""

from .base import ReasoningGateway, get_reasoning_gateway
from .heuristic import HeuristicReasoningGateway
from .models import (
    SlideOutline,
    OutlineResult,
    ContentResult,
    DesignResult,
    Ok,
    Err,
    GenerationOutcome,
)

__all__ = [
    "ReasoningGateway",
    "get_reasoning_gateway",
    "HeuristicReasoningGateway",
    "SlideOutline",
    "OutlineResult",
    "ContentResult",
    "DesignResult",
    "Ok",
    "Err",
    "GenerationOutcome",
]
