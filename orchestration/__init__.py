"""
Orchestration layer for the comparison run.

State machine-based orchestration with explicit state transitions.
"""

from .states import PipelineState
from .context import PipelineContext
from .state_machine import StateMachine

__all__ = [
    "PipelineState",
    "PipelineContext",
    "StateMachine",
]
