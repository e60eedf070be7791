"""
PipelineExecutor - High-level comparison orchestrator.

Wires together all services and executes the state machine.
"""

import logging

from domain.config import ComparisonConfig
from orchestration import PipelineState, PipelineContext, StateMachine
from orchestration.handlers import (
    DiscoveryHandler,
    AggregationHandler,
    NormalizationHandler,
    ReportHandler,
)
from services.discovery.file_discovery import FileDiscovery
from services.aggregation.dataset_aggregator import DatasetAggregator
from services.aggregation.normalizer import Normalizer
from services.analysis.pdf_renderer import PdfRenderer
from services.analysis.report_builder import ComparisonReportBuilder


class PipelineExecutor:
    """
    High-level comparison executor.

    Responsible for:
    1. Creating all services with dependency injection
    2. Building the state machine with handlers
    3. Running the comparison
    4. Returning results
    """

    def __init__(self, config: ComparisonConfig, renderer=None):
        """
        Initialize executor.

        Args:
            config: Validated comparison configuration
            renderer: Rendering collaborator; a PdfRenderer by default
        """
        self.config = config
        self.renderer = renderer
        self.logger = logging.getLogger(self.__class__.__name__)
        self.state_machine = self._build_state_machine()

    def run(self) -> PipelineContext:
        """Execute the comparison and return final context."""
        self.logger.info("Initializing comparison run")
        initial_context = self._create_initial_context()
        final_context = self.state_machine.run(initial_context)
        self._log_results(final_context)
        return final_context

    def _create_initial_context(self) -> PipelineContext:
        for dataset in self.config.datasets:
            self.logger.info(f"Dataset '{dataset.name}' ({dataset.label}): {dataset.input_dir}")
        return PipelineContext(config=self.config, current_state=PipelineState.IDLE)

    def _build_state_machine(self) -> StateMachine:
        self.logger.info("Building state machine with services")
        services = self._create_services()
        handlers = self._create_handlers(services)
        return StateMachine(handlers)

    def _create_services(self) -> dict:
        cfg = self.config
        renderer = self.renderer or PdfRenderer(page_size=cfg.output.page_size_inches)
        return {
            'file_discovery': FileDiscovery(extensions=cfg.input.extensions),
            'dataset_aggregator': DatasetAggregator(
                input_config=cfg.input,
                binning=cfg.binning,
                progress_divisions=cfg.output.progress_divisions,
            ),
            'normalizer': Normalizer(),
            'report_builder': ComparisonReportBuilder(
                renderer=renderer,
                output_config=cfg.output,
            ),
        }

    def _create_handlers(self, services: dict) -> dict:
        return {
            PipelineState.DISCOVERING: DiscoveryHandler(services['file_discovery']),
            PipelineState.AGGREGATING: AggregationHandler(services['dataset_aggregator']),
            PipelineState.NORMALIZING: NormalizationHandler(services['normalizer']),
            PipelineState.REPORTING: ReportHandler(services['report_builder']),
        }

    def _log_results(self, context: PipelineContext):
        self.logger.info("=" * 60)
        self.logger.info("Comparison Summary")
        self.logger.info("=" * 60)

        summary = context.get_summary()
        for key, value in summary.items():
            self.logger.info(f"{key:30s}: {value}")

        self.logger.info("=" * 60)
