"""
State handlers for the comparison run.

Each handler implements logic for a specific pipeline state.
"""

from .base import StateHandler
from .discovery_handler import DiscoveryHandler
from .aggregation_handler import AggregationHandler
from .normalization_handler import NormalizationHandler
from .report_handler import ReportHandler

__all__ = [
    "StateHandler",
    "DiscoveryHandler",
    "AggregationHandler",
    "NormalizationHandler",
    "ReportHandler",
]
