"""
ReportHandler - Handles the document writing state.

Writes the three comparison documents and, optionally, the JSON summary.
"""

import os

from orchestration.context import PipelineContext
from orchestration.states import PipelineState
from .base import StateHandler
from services.analysis.report_builder import ComparisonReportBuilder
from services.analysis.summary import write_summary


class ReportHandler(StateHandler):
    """
    Handler for REPORTING state.
    """

    def __init__(self, report_builder: ComparisonReportBuilder):
        """
        Initialize handler.

        Args:
            report_builder: Builder that drives the renderer
        """
        super().__init__()
        self.report_builder = report_builder

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        self._log_state_entry(context)

        config = context.config
        old = context.results[config.old.name]
        new = context.results[config.new.name]

        documents = self.report_builder.build(old, new)
        for doc in documents:
            self.logger.info(f"  - {doc.path} ({doc.page_count} pages)")

        summary_path = None
        if config.output.summary_filename:
            summary_path = write_summary(
                os.path.join(config.output.output_dir, config.output.summary_filename),
                old, new, documents,
            )

        updated_context = context.with_documents(documents, summary_path)
        next_state = self._determine_next_state(updated_context)

        self._log_state_exit(context, next_state)
        return updated_context, next_state
