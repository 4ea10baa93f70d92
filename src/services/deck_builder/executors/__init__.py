"""Pipeline executors, one per state machine phase."""

from .base import PipelineExecutor, timed_operation, transition_to_phase
from .generation import GenerationExecutor, settle
from .merge import MergeExecutor
from .outline import OutlineExecutor
from .refinement import FixExecutor, LayoutExecutor, LintExecutor
from .render import RenderExecutor

__all__ = [
    "PipelineExecutor",
    "timed_operation",
    "transition_to_phase",
    "OutlineExecutor",
    "GenerationExecutor",
    "settle",
    "MergeExecutor",
    "LayoutExecutor",
    "LintExecutor",
    "FixExecutor",
    "RenderExecutor",
]
