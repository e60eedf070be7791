"""
Parsing services.

Services responsible for reading event tables out of ROOT files.
"""

from .event_stream import EventStream, EnergySumStream, CaloTowerStream

__all__ = [
    "EventStream",
    "EnergySumStream",
    "CaloTowerStream",
]
