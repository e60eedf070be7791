"""
NormalizationHandler - Handles normalization state.
"""

from orchestration.context import PipelineContext
from orchestration.states import PipelineState
from .base import StateHandler
from services.aggregation.normalizer import Normalizer


class NormalizationHandler(StateHandler):
    """
    Handler for NORMALIZING state.

    Each dataset is scaled by its own event count.
    """

    def __init__(self, normalizer: Normalizer):
        super().__init__()
        self.normalizer = normalizer

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        self._log_state_entry(context)

        normalized = {
            name: self.normalizer.normalize(result)
            for name, result in context.results.items()
        }

        updated_context = context.with_results(normalized)
        next_state = self._determine_next_state(updated_context)

        self._log_state_exit(context, next_state)
        return updated_context, next_state
