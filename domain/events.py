"""
Event-related domain models.

Immutable records produced by the event stream readers, plus the fixed
quantity tables that name their contents.
"""

from dataclasses import dataclass
from typing import Optional

from .regions import Region


# Bit index of the energy-sum array -> quantity name. Fixed at runtime.
ENERGY_SUM_NAMES: dict[int, str] = {
    0: "etSumTotalEt",
    1: "etSumTotalEtHF",
    2: "etSumTotalEtEm",
    3: "etSumMinBiasHFP0",
    4: "htSumht",
    5: "htSumhtHF",
    6: "etSumMinBiasHFM0",
    7: "etSumMissingEt",
    8: "etSumMinBiasHFP1",
    9: "htSumMissingHt",
    10: "etSumMinBiasHFM1",
    11: "etSumMissingEtHF",
    12: "htSumMissingHtHF",
    13: "etSumTowCount",
    14: "etAsym",
    15: "etHFAsym",
    16: "htAsym",
    17: "htHFAsym",
    18: "centrality",
}

N_ENERGY_SUMS = len(ENERGY_SUM_NAMES)

# Calo-tower distributions, in page order
TOWER_COUNT = "nTowers"
CALO_QUANTITIES: tuple[str, ...] = (
    TOWER_COUNT,
    "HB Sum",
    "HE Sum",
    "HF Sum",
)

REGION_QUANTITIES: dict[Region, str] = {
    Region.BARREL: "HB Sum",
    Region.ENDCAP: "HE Sum",
    Region.FORWARD: "HF Sum",
}


@dataclass(frozen=True)
class EnergySumRecord:
    """
    One event of the energy-sum table.

    Always holds exactly 19 slots; a slot is None when the stored array
    of that event was too short to contain it.
    """

    values: tuple[Optional[float], ...]

    def __post_init__(self):
        """Validate the record."""
        if len(self.values) != N_ENERGY_SUMS:
            raise ValueError(
                f"EnergySumRecord needs {N_ENERGY_SUMS} slots, got {len(self.values)}"
            )

    @classmethod
    def from_sequence(cls, values) -> 'EnergySumRecord':
        """Build a record from a stored array, padding or clipping to 19 slots."""
        values = [None if v is None else float(v) for v in list(values)[:N_ENERGY_SUMS]]
        values.extend([None] * (N_ENERGY_SUMS - len(values)))
        return cls(values=tuple(values))

    def __getitem__(self, name: str) -> Optional[float]:
        for index, quantity in ENERGY_SUM_NAMES.items():
            if quantity == name:
                return self.values[index]
        raise KeyError(name)


@dataclass(frozen=True)
class CaloTowerRecord:
    """
    One event of the calo-tower table.

    The three tower sequences are parallel and always walked in lockstep.
    """

    tower_count: int
    energy: tuple[float, ...]
    eta: tuple[int, ...]
    phi: tuple[int, ...]

    def __post_init__(self):
        """Validate the record."""
        if self.tower_count < 0:
            raise ValueError(f"tower_count must be non-negative, got {self.tower_count}")
        lengths = {len(self.energy), len(self.eta), len(self.phi)}
        if lengths != {self.tower_count}:
            raise ValueError(
                f"tower arrays out of lockstep with tower_count={self.tower_count}: "
                f"energy={len(self.energy)}, eta={len(self.eta)}, phi={len(self.phi)}"
            )

    def towers(self):
        """Iterate over (energy, eta, phi) triples."""
        return zip(self.energy, self.eta, self.phi)
