"""
Normalizer - Rescale histograms to a per-event average.

Each dataset is normalized against its own total event count, once,
after every fill has happened.
"""

import logging

from domain.errors import EmptyDatasetError
from domain.histograms import Histogram1D
from domain.results import DatasetResult


def normalize(histogram: Histogram1D, event_count: int):
    """
    Scale ``histogram`` by 1 / ``event_count``.

    Raises:
        EmptyDatasetError: If ``event_count`` is not positive
    """
    if event_count <= 0:
        raise EmptyDatasetError(
            f"Cannot normalize '{histogram.name}' by an event count of {event_count}"
        )
    histogram.scale(1.0 / event_count)


class Normalizer:
    """Applies per-dataset event-count normalization to every 1-D histogram."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def normalize(self, result: DatasetResult) -> DatasetResult:
        """
        Normalize all 1-D histograms of ``result`` by its event count.

        The profile holds cell means and is left as is.

        Returns:
            The same result flagged as normalized

        Raises:
            EmptyDatasetError: If the dataset has no events
            RuntimeError: If the result was already normalized
        """
        if result.normalized:
            raise RuntimeError(f"Dataset '{result.name}' is already normalized")
        if result.event_count <= 0:
            raise EmptyDatasetError(f"Dataset '{result.name}' has no events to normalize by")

        count = 0
        for histogram in result.histograms_1d():
            normalize(histogram, result.event_count)
            count += 1

        self.logger.info(
            f"Normalized {count} histograms of '{result.name}' by 1/{result.event_count}"
        )
        return result.with_normalized()
