"""
AggregationHandler - Handles histogram filling state.

Runs the dataset aggregator over each dataset independently.
"""

from datetime import datetime

from orchestration.context import PipelineContext
from orchestration.states import PipelineState
from .base import StateHandler
from services.aggregation.dataset_aggregator import DatasetAggregator


class AggregationHandler(StateHandler):
    """
    Handler for AGGREGATING state.

    The two datasets share nothing during aggregation; each produces its
    own DatasetResult.
    """

    def __init__(self, dataset_aggregator: DatasetAggregator):
        """
        Initialize handler.

        Args:
            dataset_aggregator: Service that fills one dataset's histograms
        """
        super().__init__()
        self.aggregator = dataset_aggregator

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        self._log_state_entry(context)

        start = datetime.now()
        results = {}
        for dataset in context.config.datasets:
            files = context.files.get(dataset.name, ())
            results[dataset.name] = self.aggregator.aggregate(dataset, files)

        elapsed = (datetime.now() - start).total_seconds()
        self.logger.info(f"Aggregation complete in {elapsed:.1f}s")

        updated_context = (
            context.with_results(results)
            .with_custom_data("aggregation_time_sec", elapsed)
        )
        next_state = self._determine_next_state(updated_context)

        self._log_state_exit(context, next_state)
        return updated_context, next_state
