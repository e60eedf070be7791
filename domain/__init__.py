"""
Domain models for the L1 MC comparison pipeline.

Pure data structures with validation, no business logic.
"""

from .errors import ComparisonError, ConfigurationError, EmptyDatasetError
from .regions import Region, classify, region_masks
from .events import (
    ENERGY_SUM_NAMES,
    CALO_QUANTITIES,
    EnergySumRecord,
    CaloTowerRecord,
)
from .histograms import Histogram1D, Profile2D
from .results import DatasetResult
from .config import (
    ComparisonConfig,
    DatasetConfig,
    InputConfig,
    BinningConfig,
    OutputConfig,
    Binning,
)

__all__ = [
    "ComparisonError",
    "ConfigurationError",
    "EmptyDatasetError",
    "Region",
    "classify",
    "region_masks",
    "ENERGY_SUM_NAMES",
    "CALO_QUANTITIES",
    "EnergySumRecord",
    "CaloTowerRecord",
    "Histogram1D",
    "Profile2D",
    "DatasetResult",
    "ComparisonConfig",
    "DatasetConfig",
    "InputConfig",
    "BinningConfig",
    "OutputConfig",
    "Binning",
]
