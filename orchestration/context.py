"""
Pipeline context.

Immutable context object passed between state handlers.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Any
from datetime import datetime

from domain.config import ComparisonConfig
from domain.results import DatasetResult
from .states import PipelineState


@dataclass(frozen=True)
class PipelineContext:
    """
    Immutable context for a comparison run.

    Contains all state needed for the run.
    Each state handler returns a new context with updated fields.
    """

    # Configuration
    config: ComparisonConfig

    # Current state
    current_state: PipelineState

    # Execution metadata
    start_time: datetime = field(default_factory=datetime.now)

    # Data accumulated during the run, keyed by dataset name
    files: dict[str, tuple[str, ...]] = field(default_factory=dict)
    results: dict[str, DatasetResult] = field(default_factory=dict)
    documents: tuple = field(default_factory=tuple)
    summary_path: Optional[str] = None

    # Error tracking
    error_message: Optional[str] = None
    error_details: Optional[dict] = None

    # Custom data (for extension)
    custom_data: dict[str, Any] = field(default_factory=dict)

    def with_state(self, new_state: PipelineState) -> 'PipelineContext':
        """
        Return new context with updated state.

        Args:
            new_state: New pipeline state

        Returns:
            New PipelineContext with updated state
        """
        return replace(self, current_state=new_state)

    def with_files(self, files: dict[str, list[str]]) -> 'PipelineContext':
        """
        Return new context with discovered files.

        Args:
            files: Dataset name to data file paths

        Returns:
            New PipelineContext with files
        """
        return replace(self, files={name: tuple(paths) for name, paths in files.items()})

    def with_results(self, results: dict[str, DatasetResult]) -> 'PipelineContext':
        """
        Return new context with dataset results.

        Args:
            results: Dataset name to aggregated (or normalized) result

        Returns:
            New PipelineContext with results
        """
        return replace(self, results=dict(results))

    def with_documents(self, documents, summary_path: Optional[str] = None) -> 'PipelineContext':
        """
        Return new context with written documents.

        Args:
            documents: ReportDocument objects in writing order
            summary_path: Path of the JSON summary, if one was written

        Returns:
            New PipelineContext with documents
        """
        return replace(self, documents=tuple(documents), summary_path=summary_path)

    def with_error(self, message: str, details: Optional[dict] = None) -> 'PipelineContext':
        """
        Return new context with error information.

        Args:
            message: Error message
            details: Optional error details dict

        Returns:
            New PipelineContext with error information
        """
        return replace(
            self,
            current_state=PipelineState.FAILED,
            error_message=message,
            error_details=details or {}
        )

    def with_custom_data(self, key: str, value: Any) -> 'PipelineContext':
        """
        Return new context with custom data.

        Args:
            key: Data key
            value: Data value

        Returns:
            New PipelineContext with custom data
        """
        new_custom = self.custom_data.copy()
        new_custom[key] = value
        return replace(self, custom_data=new_custom)

    @property
    def elapsed_time(self) -> float:
        """Get elapsed time in seconds."""
        return (datetime.now() - self.start_time).total_seconds()

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self.current_state.is_terminal()

    @property
    def is_successful(self) -> bool:
        """Check if the run completed successfully."""
        return self.current_state == PipelineState.COMPLETED

    @property
    def has_error(self) -> bool:
        """Check if the run failed."""
        return self.current_state == PipelineState.FAILED

    def get_summary(self) -> dict:
        """
        Get summary of the run.

        Returns:
            Dict with execution summary
        """
        return {
            "state": str(self.current_state),
            "elapsed_time_sec": self.elapsed_time,
            "start_time": self.start_time.isoformat(),
            "files_count": {name: len(paths) for name, paths in self.files.items()},
            "event_count": {name: r.event_count for name, r in self.results.items()},
            "documents": [doc.path for doc in self.documents],
            "has_error": self.has_error,
            "error_message": self.error_message,
            "is_successful": self.is_successful,
        }
