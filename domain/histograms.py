"""
Histogram domain models.

Fixed-binning 1-D histograms and 2-D profiles backed by numpy arrays.
Binning follows ROOT conventions: bins are half-open [low, high), a value
equal to the upper edge lands in overflow, and the 1-D mean is computed
from in-range fills only.
"""

import numpy as np


def _in_range(values: np.ndarray, low: float, high: float) -> np.ndarray:
    # np.histogram closes its last bin; the upper edge belongs to overflow here
    return (values >= low) & (values < high)


class Histogram1D:
    """
    Fixed-binning 1-D histogram.

    Filled first, scaled once afterwards. Filling a scaled histogram is an
    error because the contents would mix two different normalizations.
    """

    def __init__(self, name: str, nbins: int, low: float, high: float, title: str = ""):
        if nbins <= 0:
            raise ValueError(f"nbins must be positive, got {nbins}")
        if high <= low:
            raise ValueError(f"upper edge ({high}) must exceed lower edge ({low})")

        self.name = name
        self.title = title
        self.nbins = int(nbins)
        self.low = float(low)
        self.high = float(high)

        self._contents = np.zeros(self.nbins, dtype=np.float64)
        self._underflow = 0.0
        self._overflow = 0.0
        self._sum_w = 0.0
        self._sum_wx = 0.0
        self._entries = 0
        self._scaled = False

    def fill(self, values, weight: float = 1.0):
        """
        Fill one value or an array of values.

        NaN values are ignored.

        Args:
            values: Scalar or array-like of values
            weight: Weight applied to every value
        """
        if self._scaled:
            raise RuntimeError(f"Histogram '{self.name}' was already scaled and cannot be filled")

        values = np.asarray(values, dtype=np.float64).ravel()
        values = values[~np.isnan(values)]
        if values.size == 0:
            return

        inside = _in_range(values, self.low, self.high)
        counts, _ = np.histogram(values[inside], bins=self.bin_edges)
        self._contents += counts * weight
        self._underflow += float(np.count_nonzero(values < self.low)) * weight
        self._overflow += float(np.count_nonzero(values >= self.high)) * weight
        self._entries += int(values.size)

        self._sum_w += float(np.count_nonzero(inside)) * weight
        self._sum_wx += float(np.sum(values[inside])) * weight

    def scale(self, factor: float):
        """
        Multiply all contents by ``factor``.

        Raises:
            RuntimeError: If the histogram was already scaled
        """
        if self._scaled:
            raise RuntimeError(f"Histogram '{self.name}' was already scaled")
        self._contents *= factor
        self._underflow *= factor
        self._overflow *= factor
        self._sum_w *= factor
        self._sum_wx *= factor
        self._scaled = True

    @property
    def contents(self) -> np.ndarray:
        """In-range bin contents (copy)."""
        return self._contents.copy()

    @property
    def underflow(self) -> float:
        return self._underflow

    @property
    def overflow(self) -> float:
        return self._overflow

    @property
    def entries(self) -> int:
        """Number of fill calls that carried a value, including under/overflow."""
        return self._entries

    @property
    def is_scaled(self) -> bool:
        return self._scaled

    @property
    def bin_edges(self) -> np.ndarray:
        return np.linspace(self.low, self.high, self.nbins + 1)

    @property
    def bin_centers(self) -> np.ndarray:
        edges = self.bin_edges
        return 0.5 * (edges[:-1] + edges[1:])

    def integral(self, include_flow: bool = False) -> float:
        """Sum of bin contents, optionally including under/overflow."""
        total = float(np.sum(self._contents))
        if include_flow:
            total += self._underflow + self._overflow
        return total

    @property
    def mean(self) -> float:
        """Mean of the in-range fills; unchanged by scaling."""
        if self._sum_w == 0:
            return 0.0
        return self._sum_wx / self._sum_w

    def __repr__(self) -> str:
        return (
            f"Histogram1D(name={self.name!r}, nbins={self.nbins}, "
            f"range=[{self.low}, {self.high}), entries={self._entries})"
        )


class Profile2D:
    """
    2-D profile: each (x, y) cell holds the mean of the values filled into it.

    Fills outside either axis range are counted as entries but do not
    touch the cell grid.
    """

    def __init__(
        self,
        name: str,
        nbins_x: int, low_x: float, high_x: float,
        nbins_y: int, low_y: float, high_y: float,
        title: str = "",
    ):
        for nbins, low, high in ((nbins_x, low_x, high_x), (nbins_y, low_y, high_y)):
            if nbins <= 0:
                raise ValueError(f"nbins must be positive, got {nbins}")
            if high <= low:
                raise ValueError(f"upper edge ({high}) must exceed lower edge ({low})")

        self.name = name
        self.title = title
        self.nbins_x, self.low_x, self.high_x = int(nbins_x), float(low_x), float(high_x)
        self.nbins_y, self.low_y, self.high_y = int(nbins_y), float(low_y), float(high_y)

        self._sum_wz = np.zeros((self.nbins_x, self.nbins_y), dtype=np.float64)
        self._sum_w = np.zeros((self.nbins_x, self.nbins_y), dtype=np.float64)
        self._entries = 0

    def fill(self, x, y, z, weight: float = 1.0):
        """
        Fill parallel arrays (or scalars) of x, y and the profiled value z.
        """
        x = np.asarray(x, dtype=np.float64).ravel()
        y = np.asarray(y, dtype=np.float64).ravel()
        z = np.asarray(z, dtype=np.float64).ravel()
        if not (x.size == y.size == z.size):
            raise ValueError(f"x, y, z must have equal length, got {x.size}, {y.size}, {z.size}")
        if x.size == 0:
            return

        self._entries += int(x.size)

        inside = _in_range(x, self.low_x, self.high_x) & _in_range(y, self.low_y, self.high_y)
        bins = (self.x_edges, self.y_edges)
        sum_wz, _, _ = np.histogram2d(x[inside], y[inside], bins=bins, weights=z[inside])
        sum_w, _, _ = np.histogram2d(x[inside], y[inside], bins=bins)
        self._sum_wz += sum_wz * weight
        self._sum_w += sum_w * weight

    @property
    def contents(self) -> np.ndarray:
        """Cell means, shape (nbins_x, nbins_y); empty cells are 0."""
        means = np.zeros_like(self._sum_wz)
        filled = self._sum_w > 0
        means[filled] = self._sum_wz[filled] / self._sum_w[filled]
        return means

    @property
    def entries(self) -> int:
        return self._entries

    @property
    def x_edges(self) -> np.ndarray:
        return np.linspace(self.low_x, self.high_x, self.nbins_x + 1)

    @property
    def y_edges(self) -> np.ndarray:
        return np.linspace(self.low_y, self.high_y, self.nbins_y + 1)

    def cell_mean(self, x: float, y: float) -> float:
        """Mean of the cell containing (x, y); 0 for empty or out-of-range cells."""
        if not (self.low_x <= x < self.high_x and self.low_y <= y < self.high_y):
            return 0.0
        ix = min(int(np.searchsorted(self.x_edges, x, side="right")) - 1, self.nbins_x - 1)
        iy = min(int(np.searchsorted(self.y_edges, y, side="right")) - 1, self.nbins_y - 1)
        return float(self.contents[ix, iy])

    def __repr__(self) -> str:
        return (
            f"Profile2D(name={self.name!r}, x={self.nbins_x}[{self.low_x}, {self.high_x}), "
            f"y={self.nbins_y}[{self.low_y}, {self.high_y}), entries={self._entries})"
        )
