"""
Detector region classification.

Maps a calorimeter eta index onto the barrel, endcap or forward region.
"""

from enum import Enum

import awkward as ak


BARREL_MAX_ABS_ETA = 16
ENDCAP_MAX_ABS_ETA = 29


class Region(Enum):
    """Coarse detector-geometry zones."""

    BARREL = "HB"
    ENDCAP = "HE"
    FORWARD = "HF"

    def __str__(self) -> str:
        return self.name


def classify(eta_index: int) -> Region:
    """
    Classify an eta index into its region.

    |eta| <= 16 is barrel, 17..29 is endcap, anything beyond is forward.
    Total over the integers.
    """
    eta_index = int(eta_index)
    if -BARREL_MAX_ABS_ETA <= eta_index <= BARREL_MAX_ABS_ETA:
        return Region.BARREL
    if -ENDCAP_MAX_ABS_ETA <= eta_index <= ENDCAP_MAX_ABS_ETA:
        return Region.ENDCAP
    return Region.FORWARD


def region_masks(eta) -> dict[Region, ak.Array]:
    """
    Vectorised form of :func:`classify` for (possibly jagged) eta arrays.

    Args:
        eta: Array-like of eta indices, any nesting depth

    Returns:
        Dict mapping each region to a boolean mask with the shape of ``eta``
    """
    # Two-sided bounds: abs() wraps around at the minimum of signed integer dtypes
    eta = ak.Array(eta)
    barrel = (eta >= -BARREL_MAX_ABS_ETA) & (eta <= BARREL_MAX_ABS_ETA)
    forward = (eta < -ENDCAP_MAX_ABS_ETA) | (eta > ENDCAP_MAX_ABS_ETA)
    return {
        Region.BARREL: barrel,
        Region.ENDCAP: ~barrel & ~forward,
        Region.FORWARD: forward,
    }
