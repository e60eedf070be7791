"""
PDF rendering of comparison pages.

One multi-page PDF document is open at a time. Pages are written to
"<name>.part" and the document only appears under its final name once
close() has terminated it, so an interrupted run never leaves a
valid-looking document behind.
"""

import logging
import os
from typing import Optional

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for servers
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

from .style import COLORS, StyledHistogram, StyledProfile


PARTIAL_SUFFIX = ".part"


class PdfRenderer:
    """
    Renders overlays and profiles, one page per call, into a PDF document.
    """

    def __init__(self, page_size: tuple[float, float] = (5.0, 5.0)):
        self.page_size = tuple(page_size)
        self.logger = logging.getLogger(self.__class__.__name__)
        self._pdf: Optional[PdfPages] = None
        self._path: Optional[str] = None
        self._pages = 0

    @property
    def is_open(self) -> bool:
        return self._pdf is not None

    @property
    def pages(self) -> int:
        """Pages written to the currently open document."""
        return self._pages

    def open(self, path: str):
        """Start a new document at ``path``."""
        if self._pdf is not None:
            raise RuntimeError(f"Document {self._path} is still open")

        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        self._path = path
        self._pages = 0
        self._pdf = PdfPages(path + PARTIAL_SUFFIX)
        self.logger.info(f"Opened document: {path}")

    def draw_comparison(
        self,
        first: StyledHistogram,
        second: StyledHistogram,
        first_mean: float,
        second_mean: float,
    ):
        """
        Overlay two histograms on one page with their means.

        ``first`` is drawn first and sets the axes, ``second`` on top.
        """
        fig, ax = self._new_page()

        for styled in (first, second):
            hist = styled.histogram
            opts = styled.options
            ax.plot(
                hist.bin_centers,
                hist.contents,
                color=opts.color,
                marker=opts.marker,
                markersize=opts.marker_size,
                linewidth=opts.line_width,
                label=opts.label,
            )

        ax.set_xlim(first.histogram.low, first.histogram.high)
        ax.set_xlabel(first.x_title)
        ax.set_ylabel(first.options.y_title)
        if first.options.log_y:
            ax.set_yscale('log')
        ax.legend(loc='upper right', fontsize=8, frameon=False)

        # Older curve's mean sits above the newer one's
        ax.text(0.55, 0.64, f"{second.options.label} Mean: {second_mean:.6f}",
                transform=ax.transAxes, fontsize=7, color=second.options.color)
        ax.text(0.55, 0.60, f"{first.options.label} Mean: {first_mean:.6f}",
                transform=ax.transAxes, fontsize=7, color=first.options.color)

        self._emit(fig)

    def draw_profile(self, styled: StyledProfile):
        """Draw a 2-D profile as a colour map on its own page."""
        fig, ax = self._new_page()
        profile = styled.profile
        opts = styled.options

        mesh = ax.pcolormesh(
            profile.x_edges,
            profile.y_edges,
            profile.contents.T,
            vmin=opts.z_min,
            vmax=opts.z_max,
            cmap=opts.cmap,
        )
        fig.colorbar(mesh, ax=ax)
        ax.set_title(styled.title, fontsize=10, color=COLORS['text_dark'])
        ax.set_xlabel(opts.x_title)
        ax.set_ylabel(opts.y_title)

        self._emit(fig)

    def close(self) -> str:
        """
        Terminate the open document and move it to its final name.

        Returns:
            Path of the finished document
        """
        if self._pdf is None:
            raise RuntimeError("No document is open")

        pdf, path, pages = self._pdf, self._path, self._pages
        self._pdf = None
        self._path = None
        self._pages = 0

        pdf.close()
        partial = path + PARTIAL_SUFFIX
        if not os.path.exists(partial):
            raise RuntimeError(f"Document {path} has no pages")
        os.replace(partial, path)
        self.logger.info(f"Closed document: {path} ({pages} pages)")
        return path

    def abort(self):
        """Drop the open document without terminating it under its final name."""
        if self._pdf is None:
            return
        pdf, path = self._pdf, self._path
        self._pdf = None
        self._path = None
        self._pages = 0

        pdf.close()
        partial = path + PARTIAL_SUFFIX
        if os.path.exists(partial):
            os.remove(partial)
        self.logger.warning(f"Aborted document: {path}")

    def _new_page(self):
        if self._pdf is None:
            raise RuntimeError("No document is open")
        fig, ax = plt.subplots(figsize=self.page_size)
        fig.subplots_adjust(left=0.17, bottom=0.15)
        return fig, ax

    def _emit(self, fig):
        try:
            self._pdf.savefig(fig)
        finally:
            plt.close(fig)
        self._pages += 1
