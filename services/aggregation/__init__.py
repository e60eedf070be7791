"""
Aggregation services.

Services that fill and normalize the per-dataset histograms.
"""

from .aggregators import EnergySumAggregator, CaloTowerAggregator
from .dataset_aggregator import DatasetAggregator
from .normalizer import Normalizer, normalize
from .progress import ProgressLogger

__all__ = [
    "EnergySumAggregator",
    "CaloTowerAggregator",
    "DatasetAggregator",
    "Normalizer",
    "normalize",
    "ProgressLogger",
]
