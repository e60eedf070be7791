"""
Tests for region classification.

Tests that the eta boundaries are exact, exhaustive and disjoint.
"""

import numpy as np
import pytest
import awkward as ak

from domain.regions import Region, classify, region_masks


class TestClassify:
    """Tests for the scalar classifier."""

    @pytest.mark.parametrize("eta, expected", [
        (0, Region.BARREL),
        (16, Region.BARREL),
        (-16, Region.BARREL),
        (17, Region.ENDCAP),
        (-17, Region.ENDCAP),
        (29, Region.ENDCAP),
        (-29, Region.ENDCAP),
        (30, Region.FORWARD),
        (-30, Region.FORWARD),
        (41, Region.FORWARD),
    ])
    def test_boundaries(self, eta, expected):
        """Test the exact boundary values."""
        assert classify(eta) is expected

    def test_far_out_of_range_is_forward(self):
        """Test that values far outside the detector classify as forward."""
        assert classify(10**9) is Region.FORWARD
        assert classify(-10**9) is Region.FORWARD

    def test_exhaustive_and_disjoint(self):
        """Test that every eta maps to exactly one region."""
        predicates = {
            Region.BARREL: lambda e: abs(e) <= 16,
            Region.ENDCAP: lambda e: 17 <= abs(e) <= 29,
            Region.FORWARD: lambda e: abs(e) > 29,
        }
        for eta in range(-200, 201):
            matching = [region for region, pred in predicates.items() if pred(eta)]
            assert len(matching) == 1
            assert classify(eta) is matching[0]

    def test_is_pure(self):
        """Test that repeated calls give the same region."""
        for eta in (-30, -17, 0, 16, 29, 30):
            assert classify(eta) is classify(eta)

    def test_region_names(self):
        """Test the short detector names."""
        assert Region.BARREL.value == "HB"
        assert Region.ENDCAP.value == "HE"
        assert Region.FORWARD.value == "HF"


class TestRegionMasks:
    """Tests for the vectorised classifier."""

    def test_masks_match_scalar_classifier(self):
        """Test that masks agree with classify element by element."""
        eta = ak.Array([[0, 16, 17, -29, -30], [], [41, -1]])
        masks = region_masks(eta)

        for region, mask in masks.items():
            for event_eta, event_mask in zip(eta.tolist(), mask.tolist()):
                assert event_mask == [classify(e) is region for e in event_eta]

    def test_masks_are_disjoint(self):
        """Test that exactly one mask is set per tower."""
        eta = ak.Array([list(range(-45, 46))])
        masks = region_masks(eta)
        total = masks[Region.BARREL] * 1 + masks[Region.ENDCAP] * 1 + masks[Region.FORWARD] * 1
        assert ak.all(total == 1)

    @pytest.mark.parametrize("dtype", [np.int16, np.int32, np.int64])
    def test_masks_match_classifier_at_dtype_limits(self, dtype):
        """Test that the extreme values of narrow integer dtypes stay forward."""
        info = np.iinfo(dtype)
        values = [info.min, info.min + 1, -30, -29, 0, 29, 30, info.max]
        eta = ak.values_astype(ak.Array([values]), dtype)

        masks = region_masks(eta)

        for region, mask in masks.items():
            assert mask.tolist() == [[classify(int(e)) is region for e in values]]
        assert masks[Region.FORWARD].tolist()[0][0]
        assert not masks[Region.BARREL].tolist()[0][0]
