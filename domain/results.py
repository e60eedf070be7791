"""
Per-dataset aggregation result.

Owned by the pipeline run that produced it; read-only once normalized.
"""

from dataclasses import dataclass, replace
from typing import Iterator

from .events import CALO_QUANTITIES, ENERGY_SUM_NAMES
from .histograms import Histogram1D, Profile2D


@dataclass(frozen=True)
class DatasetResult:
    """
    Every histogram produced for one dataset plus its event count.

    Histogram dicts are keyed by quantity name and ordered in page order.
    """

    name: str
    label: str
    event_count: int
    file_count: int
    energy_sums: dict[str, Histogram1D]
    calo_wide: dict[str, Histogram1D]
    calo_zoom: dict[str, Histogram1D]
    profile: Profile2D
    normalized: bool = False

    def __post_init__(self):
        """Validate the result."""
        if self.event_count < 0:
            raise ValueError(f"event_count must be non-negative, got {self.event_count}")
        if self.file_count < 0:
            raise ValueError(f"file_count must be non-negative, got {self.file_count}")
        if list(self.energy_sums) != list(ENERGY_SUM_NAMES.values()):
            raise ValueError("energy_sums must hold every energy-sum quantity in bit order")
        for family in (self.calo_wide, self.calo_zoom):
            if list(family) != list(CALO_QUANTITIES):
                raise ValueError(f"calo histograms must be {list(CALO_QUANTITIES)}, got {list(family)}")

    def histograms_1d(self) -> Iterator[Histogram1D]:
        """All 1-D histograms: energy sums, then wide and zoomed calo sets."""
        yield from self.energy_sums.values()
        yield from self.calo_wide.values()
        yield from self.calo_zoom.values()

    def with_normalized(self) -> 'DatasetResult':
        """Return a copy flagged as normalized."""
        return replace(self, normalized=True)

    def means(self) -> dict[str, dict[str, float]]:
        """Per-family, per-quantity histogram means."""
        return {
            "energy_sums": {k: h.mean for k, h in self.energy_sums.items()},
            "calo_wide": {k: h.mean for k, h in self.calo_wide.items()},
            "calo_zoom": {k: h.mean for k, h in self.calo_zoom.items()},
        }
