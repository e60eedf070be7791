"""
Draw-style configuration.

Binds a histogram or profile to its cosmetic options without touching
its contents. Style carries no aggregation state.
"""

from dataclasses import dataclass
from typing import Optional

from domain.histograms import Histogram1D, Profile2D


# Consistent color palette
COLORS = {
    'new': '#27ae60',
    'old': '#c0392b',
    'text_dark': '#2c3e50',
}


@dataclass(frozen=True)
class StyleOptions:
    """Cosmetics of one 1-D curve."""

    color: str
    label: str
    marker: str = "o"
    marker_size: float = 2.5
    line_width: float = 1.0
    y_title: str = "Normalized Counts"
    log_y: bool = False


@dataclass(frozen=True)
class StyledHistogram:
    """A histogram paired with how it should be drawn."""

    histogram: Histogram1D
    options: StyleOptions
    x_title: str


@dataclass(frozen=True)
class ProfileStyleOptions:
    """Cosmetics of a 2-D profile page."""

    z_min: float = 0.0
    z_max: float = 4.0
    x_title: str = "Eta"
    y_title: str = "Phi"
    cmap: str = "viridis"


@dataclass(frozen=True)
class StyledProfile:
    """A profile paired with how it should be drawn."""

    profile: Profile2D
    options: ProfileStyleOptions
    title: str


def configure(histogram: Histogram1D, options: StyleOptions, x_title: Optional[str] = None) -> StyledHistogram:
    """
    Attach draw options to a histogram.

    Args:
        histogram: Histogram to draw
        options: Curve cosmetics
        x_title: Axis title; defaults to the histogram title

    Returns:
        StyledHistogram; the histogram itself is not modified
    """
    return StyledHistogram(
        histogram=histogram,
        options=options,
        x_title=x_title if x_title is not None else (histogram.title or histogram.name),
    )


def configure_profile(profile: Profile2D, options: ProfileStyleOptions, title: str) -> StyledProfile:
    """Attach draw options and a page title to a profile."""
    if options.z_max <= options.z_min:
        raise ValueError(f"z_max ({options.z_max}) must exceed z_min ({options.z_min})")
    return StyledProfile(profile=profile, options=options, title=title)
