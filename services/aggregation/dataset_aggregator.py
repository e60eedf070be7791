"""
DatasetAggregator - Turn one dataset's files into a DatasetResult.

Opens the energy-sum and calo-tower streams over the same files, checks
that they describe the same events, and drives both aggregators over
their streams.
"""

import logging
from typing import Sequence

from domain.config import BinningConfig, DatasetConfig, InputConfig
from domain.errors import ConfigurationError, EmptyDatasetError
from domain.results import DatasetResult
from services.parsing.event_stream import CaloTowerStream, EnergySumStream
from .aggregators import CaloTowerAggregator, EnergySumAggregator
from .progress import ProgressLogger


class DatasetAggregator:
    """
    Builds the complete, not yet normalized, histogram set of a dataset.
    """

    def __init__(self, input_config: InputConfig, binning: BinningConfig, progress_divisions: int = 20):
        """
        Initialize aggregator.

        Args:
            input_config: Table and column names
            binning: Histogram binnings
            progress_divisions: How many progress lines to log per stream
        """
        self.input_config = input_config
        self.binning = binning
        self.progress_divisions = progress_divisions
        self.logger = logging.getLogger(self.__class__.__name__)

    def open_streams(self, files: Sequence[str]) -> tuple[EnergySumStream, CaloTowerStream]:
        """
        Open both tables over ``files``.

        Raises:
            EmptyDatasetError: If there are no files or no readable files
            ConfigurationError: If a table/column is missing everywhere or
                the two tables disagree on the number of events
        """
        if not files:
            raise EmptyDatasetError("No data files to read")

        cfg = self.input_config
        energy_stream = EnergySumStream(
            cfg.energy_sum_tree,
            files,
            column=cfg.energy_sum_column,
            step_size=cfg.step_size,
            show_progress=cfg.show_progress_bar,
        )
        calo_stream = CaloTowerStream(
            cfg.calo_tower_tree,
            files,
            count_column=cfg.tower_count_column,
            energy_column=cfg.tower_energy_column,
            eta_column=cfg.tower_eta_column,
            phi_column=cfg.tower_phi_column,
            step_size=cfg.step_size,
            show_progress=cfg.show_progress_bar,
        )

        if energy_stream.num_entries != calo_stream.num_entries:
            raise ConfigurationError(
                f"'{cfg.energy_sum_tree}' has {energy_stream.num_entries} events but "
                f"'{cfg.calo_tower_tree}' has {calo_stream.num_entries}"
            )
        return energy_stream, calo_stream

    def aggregate(self, dataset: DatasetConfig, files: Sequence[str]) -> DatasetResult:
        """
        Aggregate every histogram of ``dataset``.

        Args:
            dataset: Dataset being aggregated
            files: Its discovered data files

        Returns:
            DatasetResult with raw (unnormalized) contents

        Raises:
            EmptyDatasetError: If the dataset holds no events
        """
        self.logger.info(f"Aggregating dataset '{dataset.name}' from {len(files)} files")
        energy_stream, calo_stream = self.open_streams(files)

        event_count = energy_stream.num_entries
        if event_count == 0:
            raise EmptyDatasetError(f"Dataset '{dataset.name}' contains no events")

        energy = EnergySumAggregator(dataset.name, self.binning.energy_sum)
        progress = self._progress(event_count, f"{dataset.name} energy sums")
        for batch in energy_stream.iter_batches():
            energy.add_batch(energy_stream.sums(batch))
            progress.advance(len(batch))

        calo = CaloTowerAggregator(dataset.name, self.binning)
        progress = self._progress(event_count, f"{dataset.name} calo towers")
        for batch in calo_stream.iter_batches():
            calo.add_batch(*calo_stream.tower_arrays(batch))
            progress.advance(len(batch))

        self.logger.info(
            f"Dataset '{dataset.name}': {energy.events} energy-sum events, "
            f"{calo.events} calo-tower events, {calo.profile.entries} towers"
        )

        return DatasetResult(
            name=dataset.name,
            label=dataset.label,
            event_count=event_count,
            file_count=len(energy_stream.source_files),
            energy_sums=energy.histograms,
            calo_wide=calo.wide,
            calo_zoom=calo.zoom,
            profile=calo.profile,
        )

    def _progress(self, total: int, label: str) -> ProgressLogger:
        return ProgressLogger(total, self.progress_divisions, label=label, logger=self.logger)
