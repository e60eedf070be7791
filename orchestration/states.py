"""
Pipeline states.

Explicit state enumeration for the pipeline state machine.
"""

from enum import Enum, auto


class PipelineState(Enum):
    """
    All possible states in the comparison run.

    States represent discrete phases of the run with clear entry/exit
    conditions and transitions.
    """

    # Initial state
    IDLE = auto()

    # Locate data files of both datasets
    DISCOVERING = auto()

    # Fill histograms of both datasets
    AGGREGATING = auto()

    # Scale histograms by 1 / event count
    NORMALIZING = auto()

    # Write comparison documents
    REPORTING = auto()

    # Terminal states
    COMPLETED = auto()
    FAILED = auto()

    def is_terminal(self) -> bool:
        """Check if this is a terminal state."""
        return self in (PipelineState.COMPLETED, PipelineState.FAILED)

    def __str__(self) -> str:
        """String representation of state."""
        return self.name


# Valid state transitions
VALID_TRANSITIONS = {
    PipelineState.IDLE: {
        PipelineState.DISCOVERING,
        PipelineState.FAILED,
    },
    PipelineState.DISCOVERING: {
        PipelineState.AGGREGATING,
        PipelineState.FAILED,
    },
    PipelineState.AGGREGATING: {
        PipelineState.NORMALIZING,
        PipelineState.FAILED,
    },
    PipelineState.NORMALIZING: {
        PipelineState.REPORTING,
        PipelineState.FAILED,
    },
    PipelineState.REPORTING: {
        PipelineState.COMPLETED,
        PipelineState.FAILED,
    },
    PipelineState.COMPLETED: set(),  # Terminal
    PipelineState.FAILED: set(),     # Terminal
}

# Happy-path order of the phases
NEXT_STATE = {
    PipelineState.IDLE: PipelineState.DISCOVERING,
    PipelineState.DISCOVERING: PipelineState.AGGREGATING,
    PipelineState.AGGREGATING: PipelineState.NORMALIZING,
    PipelineState.NORMALIZING: PipelineState.REPORTING,
    PipelineState.REPORTING: PipelineState.COMPLETED,
}


def is_valid_transition(from_state: PipelineState, to_state: PipelineState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is valid
    """
    return to_state in VALID_TRANSITIONS.get(from_state, set())
