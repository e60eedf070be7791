"""
State machine for pipeline execution.

Orchestrates state transitions and handler execution.
"""

import logging
from typing import Dict

from .context import PipelineContext
from .states import NEXT_STATE, PipelineState, is_valid_transition
from .handlers.base import StateHandler


class StateMachine:
    """
    State machine for orchestrating a comparison run.

    Manages state transitions and delegates work to state handlers.
    """

    def __init__(self, handlers: Dict[PipelineState, StateHandler]):
        """
        Initialize state machine.

        Args:
            handlers: Dict mapping states to their handlers
        """
        self.handlers = handlers
        self.logger = logging.getLogger(self.__class__.__name__)

        # Validate that all non-terminal states have handlers
        self._validate_handlers()

    def _validate_handlers(self):
        """Validate that all necessary handlers are provided."""
        required_states = {
            PipelineState.DISCOVERING,
            PipelineState.AGGREGATING,
            PipelineState.NORMALIZING,
            PipelineState.REPORTING,
        }

        missing = required_states - set(self.handlers.keys())
        if missing:
            self.logger.warning(
                f"Missing handlers for states: {sorted(str(s) for s in missing)}"
            )

    def run(self, initial_context: PipelineContext) -> PipelineContext:
        """
        Run the state machine until a terminal state is reached.

        Args:
            initial_context: Initial pipeline context

        Returns:
            Final pipeline context
        """
        context = initial_context
        iteration = 0
        max_iterations = len(NEXT_STATE) + 1

        self.logger.info("=" * 60)
        self.logger.info("Starting comparison run")
        self.logger.info("=" * 60)

        while not context.is_terminal and iteration < max_iterations:
            iteration += 1

            try:
                context = self._execute_state(context)
            except Exception as e:
                self.logger.error(f"Error in state {context.current_state}: {e}", exc_info=True)
                context = context.with_error(
                    message=f"Error in {context.current_state}: {str(e)}",
                    details={
                        "iteration": iteration,
                        "state": str(context.current_state),
                        "error_type": type(e).__name__,
                    }
                )
                break

        if not context.is_terminal:
            self.logger.error("State machine exceeded maximum iterations")
            context = context.with_error(
                message="Run exceeded maximum iterations",
                details={"iterations": iteration}
            )

        self._log_final_state(context)
        return context

    def _execute_state(self, context: PipelineContext) -> PipelineContext:
        """
        Execute the current state's handler.

        Args:
            context: Current pipeline context

        Returns:
            Updated pipeline context
        """
        current_state = context.current_state

        self.logger.info(f"Current state: {current_state}")

        handler = self.handlers.get(current_state)

        if handler is None:
            if current_state != PipelineState.IDLE:
                self.logger.warning(f"No handler for state {current_state}, skipping to next")
            return context.with_state(NEXT_STATE[current_state])

        updated_context, next_state = handler.handle(context)

        if not is_valid_transition(current_state, next_state):
            self.logger.error(
                f"Invalid transition: {current_state} → {next_state}"
            )
            return context.with_error(
                message=f"Invalid state transition: {current_state} → {next_state}"
            )

        self.logger.info(f"Transition: {current_state} → {next_state}")
        return updated_context.with_state(next_state)

    def _log_final_state(self, context: PipelineContext):
        """Log final pipeline state."""
        self.logger.info("=" * 60)

        if context.is_successful:
            self.logger.info("✓ Comparison completed successfully")
        else:
            self.logger.error(f"✗ Comparison failed: {context.error_message}")

        self.logger.info(f"Final state: {context.current_state}")
        self.logger.info(f"Elapsed time: {context.elapsed_time:.1f}s")

        self.logger.info("=" * 60)
