"""
Aggregators - Fill per-dataset histograms from event streams.

EnergySumAggregator fills one fresh histogram per energy-sum quantity.
CaloTowerAggregator sums tower energy per region for every event, fills
the wide and zoomed 1-D sets with identical per-event values and feeds
every tower into the eta/phi profile.

Both accept either single records (add_event) or whole awkward chunks
(add_batch); the two paths fill identical contents.
"""

import logging

import awkward as ak
import numpy as np

from domain.config import Binning, BinningConfig
from domain.events import (
    CALO_QUANTITIES,
    ENERGY_SUM_NAMES,
    REGION_QUANTITIES,
    TOWER_COUNT,
    CaloTowerRecord,
    EnergySumRecord,
)
from domain.histograms import Histogram1D, Profile2D
from domain.regions import Region, classify, region_masks


def _make_histogram(name: str, binning: Binning, title: str = "") -> Histogram1D:
    return Histogram1D(name, binning.nbins, binning.low, binning.high, title=title)


class EnergySumAggregator:
    """
    Fills one histogram per energy-sum quantity.

    Every quantity owns an independent histogram, so there is no reset
    between quantities.
    """

    def __init__(self, dataset_name: str, binning: Binning):
        self.dataset_name = dataset_name
        self.histograms: dict[str, Histogram1D] = {
            quantity: _make_histogram(f"{dataset_name}EnergySum_{quantity}", binning, title=quantity)
            for quantity in ENERGY_SUM_NAMES.values()
        }
        self.events = 0

    def add_event(self, record: EnergySumRecord):
        """Fill every quantity present in one event."""
        for quantity in ENERGY_SUM_NAMES.values():
            value = record[quantity]
            if value is not None:
                self.histograms[quantity].fill(value)
        self.events += 1

    def add_batch(self, sums: ak.Array):
        """
        Fill every quantity from a chunk of per-event sum arrays.

        Args:
            sums: Jagged (or regular) array, one list of sums per event
        """
        lengths = ak.num(sums, axis=1)
        for index, quantity in ENERGY_SUM_NAMES.items():
            present = sums[lengths > index]
            if len(present) == 0:
                continue
            self.histograms[quantity].fill(ak.to_numpy(present[:, index]).astype(np.float64))
        self.events += len(sums)


class CaloTowerAggregator:
    """
    Fills calo-tower histograms for one dataset.

    Per event: tower count plus barrel/endcap/forward energy sums go into
    both the wide and the zoomed sets. Per tower: energy goes into the
    eta/phi profile. An event without towers fills zeros into the region
    sums and leaves the profile untouched.
    """

    def __init__(self, dataset_name: str, binning: BinningConfig):
        self.dataset_name = dataset_name
        self.wide: dict[str, Histogram1D] = {
            quantity: _make_histogram(f"{dataset_name}Calo_{quantity}", binning.calo_wide[quantity], title=quantity)
            for quantity in CALO_QUANTITIES
        }
        self.zoom: dict[str, Histogram1D] = {
            quantity: _make_histogram(f"{dataset_name}Calo_{quantity}_zoom", binning.calo_zoom[quantity], title=quantity)
            for quantity in CALO_QUANTITIES
        }
        self.profile = Profile2D(
            f"{dataset_name}CaloEtaPhi",
            binning.profile_eta.nbins, binning.profile_eta.low, binning.profile_eta.high,
            binning.profile_phi.nbins, binning.profile_phi.low, binning.profile_phi.high,
        )
        self.events = 0
        self.logger = logging.getLogger(self.__class__.__name__)

    def add_event(self, record: CaloTowerRecord) -> dict[Region, float]:
        """
        Aggregate one event.

        Returns:
            The event's per-region energy sums
        """
        region_sums = {region: 0.0 for region in Region}
        for energy, eta, _ in record.towers():
            region_sums[classify(eta)] += energy

        if record.tower_count > 0:
            self.profile.fill(record.eta, record.phi, record.energy)

        values = {TOWER_COUNT: record.tower_count}
        for region, total in region_sums.items():
            values[REGION_QUANTITIES[region]] = total
        self._fill(values)
        self.events += 1
        return region_sums

    def add_batch(self, counts: np.ndarray, energy: ak.Array, eta: ak.Array, phi: ak.Array):
        """
        Aggregate a chunk of events given as parallel jagged arrays.

        Args:
            counts: Tower count per event
            energy: Tower energies per event
            eta: Tower eta indices per event
            phi: Tower phi indices per event
        """
        values = {TOWER_COUNT: np.asarray(counts, dtype=np.float64)}
        for region, mask in region_masks(eta).items():
            per_event = ak.sum(energy[mask], axis=1)
            values[REGION_QUANTITIES[region]] = ak.to_numpy(per_event).astype(np.float64)
        self._fill(values)

        flat_energy = ak.to_numpy(ak.flatten(energy, axis=None))
        if flat_energy.size:
            self.profile.fill(
                ak.to_numpy(ak.flatten(eta, axis=None)),
                ak.to_numpy(ak.flatten(phi, axis=None)),
                flat_energy,
            )
        self.events += len(counts)

    def _fill(self, values: dict):
        for quantity in CALO_QUANTITIES:
            self.wide[quantity].fill(values[quantity])
            self.zoom[quantity].fill(values[quantity])
