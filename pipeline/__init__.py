"""
Pipeline execution.

High-level executor that wires services into the state machine.
"""

from .executor import PipelineExecutor

__all__ = ["PipelineExecutor"]
