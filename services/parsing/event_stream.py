"""
Event stream readers - Single responsibility: Stream one table across files.

An EventStream presents a named tree, spread over many ROOT files, as one
forward-only sequence of events. The set of usable files and the total
entry count are fixed at construction; column problems surface there and
never mid-iteration.
"""

import logging
from typing import Iterator, Sequence

import awkward as ak
import numpy as np
import uproot
from tqdm import tqdm

from domain.errors import ConfigurationError, EmptyDatasetError
from domain.events import CaloTowerRecord, EnergySumRecord


class EventStream:
    """
    Forward-only reader over one named tree in a list of files.

    Files that cannot be opened, or that lack the tree or a requested
    column, are skipped with a warning. If no file can serve the table
    a ConfigurationError is raised; if no file could be opened at all
    an EmptyDatasetError is raised.
    """

    def __init__(
        self,
        table_name: str,
        files: Sequence[str],
        columns: Sequence[str],
        step_size: str = "50 MB",
        show_progress: bool = False,
    ):
        """
        Initialize the stream and validate every file's schema.

        Args:
            table_name: Tree path inside each file (e.g. "dir/Tree")
            files: Ordered list of file paths
            columns: Branch names every usable file must provide
            step_size: uproot step size for chunked reads
            show_progress: Whether to show a per-file progress bar
        """
        if not columns:
            raise ValueError("columns cannot be empty")

        self.table_name = table_name
        self.files = tuple(files)
        self.columns = tuple(columns)
        self.step_size = step_size
        self.show_progress = show_progress
        self.logger = logging.getLogger(self.__class__.__name__)

        self._sources = self._attach_files()
        self._num_entries = sum(n for _, n in self._sources)
        self._consumed = False

        self.logger.info(
            f"{self.table_name}: {self._num_entries} entries in "
            f"{len(self._sources)}/{len(self.files)} files"
        )

    def _attach_files(self) -> tuple[tuple[str, int], ...]:
        """Open each file once, keeping those that provide the table and columns."""
        sources = []
        opened = 0
        missing_columns: set[str] = set()

        for path in self.files:
            try:
                with uproot.open(path) as root_file:
                    opened += 1
                    try:
                        tree = root_file[self.table_name]
                    except KeyError:
                        self.logger.warning(f"Table '{self.table_name}' not found in {path}, skipping")
                        continue

                    missing = self._missing_columns(tree)
                    if missing:
                        missing_columns.update(missing)
                        self.logger.warning(
                            f"Columns {missing} missing from '{self.table_name}' in {path}, skipping"
                        )
                        continue

                    sources.append((path, int(tree.num_entries)))
            except (OSError, ValueError) as e:
                self.logger.warning(f"Failed to open file {path}: {e}")

        if opened == 0:
            raise EmptyDatasetError(
                f"No readable data files for '{self.table_name}' ({len(self.files)} candidates)"
            )
        if not sources:
            detail = f" (missing columns: {sorted(missing_columns)})" if missing_columns else ""
            raise ConfigurationError(
                f"Table '{self.table_name}' with columns {list(self.columns)} "
                f"not found in any of {opened} files{detail}"
            )
        return tuple(sources)

    def _missing_columns(self, tree) -> list[str]:
        """Requested columns absent from the tree, by full path or leaf name."""
        available = set(tree.keys())
        available |= {key.rsplit("/", 1)[-1] for key in available}
        return [column for column in self.columns if column not in available]

    @property
    def num_entries(self) -> int:
        """Total entries over every usable file."""
        return self._num_entries

    @property
    def source_files(self) -> tuple[str, ...]:
        """Files that provide the table, in reading order."""
        return tuple(path for path, _ in self._sources)

    def __len__(self) -> int:
        return self._num_entries

    def iter_batches(self) -> Iterator[ak.Array]:
        """
        Yield consecutive chunks of events as awkward record arrays.

        Crosses file boundaries transparently. Single pass only.

        Yields:
            Awkward arrays with one field per requested column
        """
        self._mark_consumed()

        sources = tqdm(
            self._sources,
            desc=self.table_name,
            unit="file",
            disable=not self.show_progress,
        )
        for path, n_entries in sources:
            if n_entries == 0:
                continue
            with uproot.open(path) as root_file:
                tree = root_file[self.table_name]
                for batch in tree.iterate(
                    list(self.columns),
                    step_size=self.step_size,
                    library="ak",
                ):
                    yield batch

    def __iter__(self) -> Iterator:
        """Yield one record per event, in file order."""
        for batch in self.iter_batches():
            yield from self._records(batch)

    def _records(self, batch: ak.Array) -> Iterator:
        """Turn a chunk into per-event records."""
        for row in batch.to_list():
            yield row

    def _mark_consumed(self):
        if self._consumed:
            raise RuntimeError(
                f"Stream over '{self.table_name}' was already consumed; build a new one to re-scan"
            )
        self._consumed = True


class EnergySumStream(EventStream):
    """Energy-sum table: one fixed-order array of sums per event."""

    def __init__(self, table_name: str, files: Sequence[str], column: str = "sumEt", **kwargs):
        self.column = column
        super().__init__(table_name, files, [column], **kwargs)

    def _records(self, batch: ak.Array) -> Iterator[EnergySumRecord]:
        for values in ak.to_list(batch[self.column]):
            yield EnergySumRecord.from_sequence(values)

    def sums(self, batch: ak.Array) -> ak.Array:
        """Per-event energy-sum arrays of a chunk."""
        return batch[self.column]


class CaloTowerStream(EventStream):
    """Calo-tower table: tower count plus parallel energy/eta/phi arrays."""

    def __init__(
        self,
        table_name: str,
        files: Sequence[str],
        count_column: str = "nHCALTP",
        energy_column: str = "hcalTPet",
        eta_column: str = "hcalTPieta",
        phi_column: str = "hcalTPiphi",
        **kwargs,
    ):
        self.count_column = count_column
        self.energy_column = energy_column
        self.eta_column = eta_column
        self.phi_column = phi_column
        super().__init__(
            table_name,
            files,
            [count_column, energy_column, eta_column, phi_column],
            **kwargs,
        )

    def _records(self, batch: ak.Array) -> Iterator[CaloTowerRecord]:
        counts = ak.to_list(batch[self.count_column])
        energies = ak.to_list(batch[self.energy_column])
        etas = ak.to_list(batch[self.eta_column])
        phis = ak.to_list(batch[self.phi_column])
        for count, energy, eta, phi in zip(counts, energies, etas, phis):
            yield CaloTowerRecord(
                tower_count=int(count),
                energy=tuple(float(e) for e in energy),
                eta=tuple(int(e) for e in eta),
                phi=tuple(int(p) for p in phi),
            )

    def tower_arrays(self, batch: ak.Array) -> tuple[np.ndarray, ak.Array, ak.Array, ak.Array]:
        """
        Split a chunk into (counts, energy, eta, phi).

        Raises:
            ValueError: If the tower arrays are out of lockstep with the count
        """
        counts = ak.to_numpy(batch[self.count_column]).astype(np.int64)
        energy = ak.values_astype(batch[self.energy_column], np.float64)
        eta = batch[self.eta_column]
        phi = batch[self.phi_column]

        for name, array in (("energy", energy), ("eta", eta), ("phi", phi)):
            lengths = ak.to_numpy(ak.num(array, axis=1))
            if not np.array_equal(lengths, counts):
                bad = int(np.flatnonzero(lengths != counts)[0])
                raise ValueError(
                    f"Tower {name} array out of lockstep with {self.count_column} "
                    f"({lengths[bad]} != {counts[bad]}) in '{self.table_name}'"
                )
        return counts, energy, eta, phi
