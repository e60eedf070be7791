"""
Shared fixtures: tiny L1 ntuples written with uproot.
"""

import awkward as ak
import numpy as np
import pytest
import uproot


ENERGY_SUM_TREE = "l1UpgradeTree/L1UpgradeTree"
CALO_TOWER_TREE = "l1CaloTowerTree/L1CaloTowerTree"


def _jagged(lists, dtype):
    counts = np.array([len(x) for x in lists], dtype=np.int64)
    flat = np.array([v for x in lists for v in x], dtype=dtype)
    return ak.unflatten(flat, counts)


def write_ntuple(path, events, drop_columns=(), tower_count_override=None, with_energy_sums=True):
    """
    Write an L1 ntuple with both trees.

    Args:
        path: Output file path
        events: List of dicts with "sums" (list of floats) and
            "towers" (list of (eta, phi, energy) tuples)
        drop_columns: Calo-tower columns to leave out
        tower_count_override: Values written to nHCALTP instead of the
            real tower counts
        with_energy_sums: Whether to write the energy-sum tree

    Returns:
        The path, as a string
    """
    towers = [event.get("towers", []) for event in events]
    counts = [len(t) for t in towers]
    if tower_count_override is not None:
        counts = tower_count_override

    calo = {
        "nHCALTP": np.array(counts, dtype=np.int16),
        "hcalTPet": _jagged([[t[2] for t in ev] for ev in towers], np.float32),
        "hcalTPieta": _jagged([[t[0] for t in ev] for ev in towers], np.int16),
        "hcalTPiphi": _jagged([[t[1] for t in ev] for ev in towers], np.int16),
    }
    for column in drop_columns:
        del calo[column]

    with uproot.recreate(str(path)) as root_file:
        if with_energy_sums:
            root_file[ENERGY_SUM_TREE] = {
                "sumEt": _jagged([event.get("sums", []) for event in events], np.float32),
            }
        root_file[CALO_TOWER_TREE] = calo
    return str(path)


def scenario_events():
    """Three events with one tower each: barrel, endcap and forward."""
    return [
        {"sums": [float(i) * 10 + 5 for i in range(19)], "towers": [(10, 5, 5.0)]},
        {"sums": [float(i) * 10 + 15 for i in range(19)], "towers": [(-20, 40, 3.0)]},
        {"sums": [float(i) * 10 + 25 for i in range(19)], "towers": [(35, 70, 7.0)]},
    ]


@pytest.fixture
def ntuple_writer():
    return write_ntuple


@pytest.fixture
def scenario_dir(tmp_path):
    """Dataset directory with the three-event scenario split over two files."""
    events = scenario_events()
    root = tmp_path / "scenario"
    (root / "part1").mkdir(parents=True)
    write_ntuple(root / "part1" / "ntuple_1.root", events[:2])
    write_ntuple(root / "ntuple_2.root", events[2:])
    return root


@pytest.fixture
def dataset_dirs(tmp_path):
    """Old and new dataset directories of different size."""
    old_events = scenario_events()
    new_events = scenario_events() + [
        {"sums": [100.0] * 19, "towers": []},
        {"sums": [200.0] * 19, "towers": [(1, 1, 2.0), (-1, 72, 4.0), (29, 3, 1.0), (-41, 10, 6.0)]},
    ]

    old_dir = tmp_path / "mc2018"
    new_dir = tmp_path / "mc2022"
    (old_dir / "crab").mkdir(parents=True)
    (new_dir / "crab").mkdir(parents=True)

    write_ntuple(old_dir / "crab" / "L1Ntuple_1.root", old_events)
    write_ntuple(new_dir / "crab" / "L1Ntuple_1.root", new_events[:3])
    write_ntuple(new_dir / "L1Ntuple_2.root", new_events[3:])
    return old_dir, new_dir
