"""
Configuration domain models.

Validated configuration objects for the comparison pipeline.
"""

from dataclasses import dataclass, field
from typing import Optional

from .events import CALO_QUANTITIES


@dataclass(frozen=True)
class Binning:
    """Fixed 1-D binning: ``nbins`` equal bins over [low, high)."""

    nbins: int
    low: float
    high: float

    def __post_init__(self):
        """Validate binning."""
        if self.nbins <= 0:
            raise ValueError(f"nbins must be positive, got {self.nbins}")
        if self.high <= self.low:
            raise ValueError(f"high ({self.high}) must exceed low ({self.low})")

    @classmethod
    def from_value(cls, value) -> 'Binning':
        """Build from a ``[nbins, low, high]`` list or a mapping."""
        if isinstance(value, Binning):
            return value
        if isinstance(value, dict):
            return cls(nbins=int(value["nbins"]), low=float(value["low"]), high=float(value["high"]))
        nbins, low, high = value
        return cls(nbins=int(nbins), low=float(low), high=float(high))


@dataclass(frozen=True)
class InputConfig:
    """Where the two tables live inside each data file."""

    extensions: tuple[str, ...] = (".root",)

    energy_sum_tree: str = "l1UpgradeTree/L1UpgradeTree"
    energy_sum_column: str = "sumEt"

    calo_tower_tree: str = "l1CaloTowerTree/L1CaloTowerTree"
    tower_count_column: str = "nHCALTP"
    tower_energy_column: str = "hcalTPet"
    tower_eta_column: str = "hcalTPieta"
    tower_phi_column: str = "hcalTPiphi"

    step_size: str = "50 MB"
    show_progress_bar: bool = False

    def __post_init__(self):
        """Validate input configuration."""
        if not self.extensions:
            raise ValueError("extensions cannot be empty")
        for name in (
            "energy_sum_tree", "energy_sum_column", "calo_tower_tree",
            "tower_count_column", "tower_energy_column",
            "tower_eta_column", "tower_phi_column",
        ):
            if not getattr(self, name):
                raise ValueError(f"{name} cannot be empty")

    @property
    def calo_columns(self) -> tuple[str, str, str, str]:
        """Calo-tower columns as (count, energy, eta, phi)."""
        return (
            self.tower_count_column,
            self.tower_energy_column,
            self.tower_eta_column,
            self.tower_phi_column,
        )


@dataclass(frozen=True)
class BinningConfig:
    """Binnings of every histogram family."""

    energy_sum: Binning = Binning(40, 0.0, 3000.0)

    # Keyed by calo quantity name, in page order
    calo_wide: dict[str, Binning] = field(default_factory=lambda: {
        "nTowers": Binning(80, 0.0, 5500.0),
        "HB Sum": Binning(80, 0.0, 2500.0),
        "HE Sum": Binning(80, 0.0, 7000.0),
        "HF Sum": Binning(80, 0.0, 13000.0),
    })
    calo_zoom: dict[str, Binning] = field(default_factory=lambda: {
        "nTowers": Binning(40, 0.0, 550.0),
        "HB Sum": Binning(40, 0.0, 300.0),
        "HE Sum": Binning(40, 0.0, 700.0),
        "HF Sum": Binning(40, 0.0, 1300.0),
    })

    profile_eta: Binning = Binning(84, -42.0, 42.0)
    profile_phi: Binning = Binning(73, 0.0, 73.0)

    def __post_init__(self):
        """Validate that both calo families cover the same quantities."""
        for family_name in ("calo_wide", "calo_zoom"):
            family = getattr(self, family_name)
            if tuple(family) != CALO_QUANTITIES:
                raise ValueError(
                    f"{family_name} must define {list(CALO_QUANTITIES)} in order, got {list(family)}"
                )


@dataclass(frozen=True)
class DatasetConfig:
    """One side of the comparison."""

    name: str
    label: str
    input_dir: str

    def __post_init__(self):
        """Validate dataset configuration."""
        if not self.name:
            raise ValueError("dataset name cannot be empty")
        if not self.input_dir:
            raise ValueError(f"input_dir of dataset '{self.name}' cannot be empty")


@dataclass(frozen=True)
class OutputConfig:
    """Names and layout of the produced documents."""

    output_dir: str = "."
    energy_sums_filename: str = "L1EnergySumsUnpacked.pdf"
    calo_towers_filename: str = "L1CaloTPUnpacked.pdf"
    calo_profiles_filename: str = "L1CaloTPEtaPhiUnpacked.pdf"
    summary_filename: Optional[str] = "comparison_summary.json"

    page_size_inches: tuple[float, float] = (5.0, 5.0)
    profile_z_max: float = 4.0
    progress_divisions: int = 20

    def __post_init__(self):
        """Validate output configuration."""
        names = [self.energy_sums_filename, self.calo_towers_filename, self.calo_profiles_filename]
        if not all(names):
            raise ValueError("output filenames cannot be empty")
        if len(set(names)) != len(names):
            raise ValueError(f"output filenames must be distinct, got {names}")
        if len(self.page_size_inches) != 2 or min(self.page_size_inches) <= 0:
            raise ValueError(f"page_size_inches must be two positive numbers, got {self.page_size_inches}")
        if self.profile_z_max <= 0:
            raise ValueError(f"profile_z_max must be positive, got {self.profile_z_max}")
        if self.progress_divisions <= 0:
            raise ValueError(f"progress_divisions must be positive, got {self.progress_divisions}")


@dataclass(frozen=True)
class ComparisonConfig:
    """
    Complete comparison configuration.

    Immutable configuration object validated at creation.
    """

    old: DatasetConfig
    new: DatasetConfig

    input: InputConfig = field(default_factory=InputConfig)
    binning: BinningConfig = field(default_factory=BinningConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    run_name: str = "l1_mc_comparison"

    def __post_init__(self):
        """Validate comparison configuration."""
        if self.old.name == self.new.name:
            raise ValueError(f"dataset names must differ, both are '{self.old.name}'")

    @property
    def datasets(self) -> tuple[DatasetConfig, DatasetConfig]:
        """Both datasets, old first."""
        return (self.old, self.new)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'ComparisonConfig':
        """
        Create ComparisonConfig from a dictionary (e.g., loaded from YAML).

        Args:
            config_dict: Dictionary with configuration values

        Returns:
            Validated ComparisonConfig instance
        """
        config_dict = config_dict or {}

        datasets_dict = config_dict.get("datasets", {})
        old_dict = datasets_dict.get("old", {})
        new_dict = datasets_dict.get("new", {})
        old = DatasetConfig(
            name=old_dict.get("name", "old"),
            label=old_dict.get("label", "2018 MB MC"),
            input_dir=old_dict.get("input_dir", ""),
        )
        new = DatasetConfig(
            name=new_dict.get("name", "new"),
            label=new_dict.get("label", "2022 MB MC"),
            input_dir=new_dict.get("input_dir", ""),
        )

        defaults = InputConfig()
        input_dict = config_dict.get("input", {})
        input_config = InputConfig(
            extensions=tuple(input_dict.get("extensions", defaults.extensions)),
            energy_sum_tree=input_dict.get("energy_sum_tree", defaults.energy_sum_tree),
            energy_sum_column=input_dict.get("energy_sum_column", defaults.energy_sum_column),
            calo_tower_tree=input_dict.get("calo_tower_tree", defaults.calo_tower_tree),
            tower_count_column=input_dict.get("tower_count_column", defaults.tower_count_column),
            tower_energy_column=input_dict.get("tower_energy_column", defaults.tower_energy_column),
            tower_eta_column=input_dict.get("tower_eta_column", defaults.tower_eta_column),
            tower_phi_column=input_dict.get("tower_phi_column", defaults.tower_phi_column),
            step_size=input_dict.get("step_size", defaults.step_size),
            show_progress_bar=input_dict.get("show_progress_bar", defaults.show_progress_bar),
        )

        binning_defaults = BinningConfig()
        binning_dict = config_dict.get("binning", {})
        binning = BinningConfig(
            energy_sum=Binning.from_value(binning_dict.get("energy_sum", binning_defaults.energy_sum)),
            calo_wide=_binning_family(binning_dict.get("calo_wide"), binning_defaults.calo_wide),
            calo_zoom=_binning_family(binning_dict.get("calo_zoom"), binning_defaults.calo_zoom),
            profile_eta=Binning.from_value(binning_dict.get("profile_eta", binning_defaults.profile_eta)),
            profile_phi=Binning.from_value(binning_dict.get("profile_phi", binning_defaults.profile_phi)),
        )

        output_defaults = OutputConfig()
        output_dict = config_dict.get("output", {})
        output = OutputConfig(
            output_dir=output_dict.get("output_dir", output_defaults.output_dir),
            energy_sums_filename=output_dict.get("energy_sums_filename", output_defaults.energy_sums_filename),
            calo_towers_filename=output_dict.get("calo_towers_filename", output_defaults.calo_towers_filename),
            calo_profiles_filename=output_dict.get("calo_profiles_filename", output_defaults.calo_profiles_filename),
            summary_filename=output_dict.get("summary_filename", output_defaults.summary_filename),
            page_size_inches=tuple(output_dict.get("page_size_inches", output_defaults.page_size_inches)),
            profile_z_max=float(output_dict.get("profile_z_max", output_defaults.profile_z_max)),
            progress_divisions=int(output_dict.get("progress_divisions", output_defaults.progress_divisions)),
        )

        run_metadata = config_dict.get("run_metadata", {})

        return cls(
            old=old,
            new=new,
            input=input_config,
            binning=binning,
            output=output,
            run_name=run_metadata.get("run_name", "l1_mc_comparison"),
        )


def _binning_family(family_dict: Optional[dict], defaults: dict[str, Binning]) -> dict[str, Binning]:
    """Overlay configured binnings on the defaults, keeping page order."""
    family_dict = family_dict or {}
    unknown = set(family_dict) - set(defaults)
    if unknown:
        raise ValueError(f"Unknown calo quantities in binning: {sorted(unknown)}")
    return {
        name: Binning.from_value(family_dict.get(name, default))
        for name, default in defaults.items()
    }
