"""
DiscoveryHandler - Handles file discovery state.

Locates the data files of both datasets.
"""

from orchestration.context import PipelineContext
from orchestration.states import PipelineState
from .base import StateHandler
from services.discovery.file_discovery import FileDiscovery
from domain.errors import EmptyDatasetError


class DiscoveryHandler(StateHandler):
    """
    Handler for DISCOVERING state.

    A dataset without a single data file is an empty dataset and ends
    the run before anything is read.
    """

    def __init__(self, file_discovery: FileDiscovery):
        """
        Initialize handler.

        Args:
            file_discovery: File discovery service
        """
        super().__init__()
        self.file_discovery = file_discovery

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        self._log_state_entry(context)

        files = {}
        for dataset in context.config.datasets:
            found = self.file_discovery.discover(dataset.input_dir)
            if not found:
                raise EmptyDatasetError(
                    f"Dataset '{dataset.name}' has no data files under {dataset.input_dir}"
                )
            self.logger.info(f"Dataset '{dataset.name}' ({dataset.label}): {len(found)} files")
            files[dataset.name] = found

        updated_context = context.with_files(files)
        next_state = self._determine_next_state(updated_context)

        self._log_state_exit(context, next_state)
        return updated_context, next_state
