"""
ComparisonReportBuilder - Pair old/new histograms into comparison documents.

Writes three documents, in this order and with this page order:
  1. Energy sums      - one overlay per quantity, in bit order
  2. Calo towers 1-D  - nTowers, HB, HE, HF wide, then the same zoomed
  3. Calo towers 2-D  - new eta/phi profile, then old

Every document is opened and closed explicitly; a failure while drawing
aborts the open document and propagates.
"""

import logging
import os
from dataclasses import dataclass
from typing import Callable

from domain.config import OutputConfig
from domain.events import CALO_QUANTITIES, ENERGY_SUM_NAMES
from domain.histograms import Histogram1D
from domain.results import DatasetResult
from .pdf_renderer import PdfRenderer
from .style import (
    COLORS,
    ProfileStyleOptions,
    StyleOptions,
    configure,
    configure_profile,
)


@dataclass(frozen=True)
class ComparisonPage:
    """One overlay page: the new and old curves of a quantity with their means."""

    title: str
    new: Histogram1D
    old: Histogram1D
    new_mean: float
    old_mean: float


@dataclass(frozen=True)
class ReportDocument:
    """A finished document and the titles of its pages, in order."""

    path: str
    page_titles: tuple[str, ...]

    @property
    def page_count(self) -> int:
        return len(self.page_titles)


def pair_histograms(
    new: dict[str, Histogram1D],
    old: dict[str, Histogram1D],
    order,
) -> list[ComparisonPage]:
    """
    Pair same-named histograms of two datasets in ``order``.

    Raises:
        KeyError: If a quantity is missing on either side
    """
    pages = []
    for quantity in order:
        new_hist, old_hist = new[quantity], old[quantity]
        pages.append(ComparisonPage(
            title=quantity,
            new=new_hist,
            old=old_hist,
            new_mean=new_hist.mean,
            old_mean=old_hist.mean,
        ))
    return pages


class ComparisonReportBuilder:
    """
    Drives the renderer over both normalized datasets.
    """

    def __init__(self, renderer: PdfRenderer, output_config: OutputConfig):
        """
        Initialize builder.

        Args:
            renderer: Rendering collaborator; one page per draw call
            output_config: Document names and profile colour range
        """
        self.renderer = renderer
        self.output_config = output_config
        self.logger = logging.getLogger(self.__class__.__name__)

    def build(self, old: DatasetResult, new: DatasetResult) -> list[ReportDocument]:
        """
        Write all three comparison documents.

        Args:
            old: Normalized result of the older dataset
            new: Normalized result of the newer dataset

        Returns:
            The finished documents, in writing order

        Raises:
            RuntimeError: If either result is not normalized
        """
        for result in (old, new):
            if not result.normalized:
                raise RuntimeError(f"Dataset '{result.name}' must be normalized before reporting")

        cfg = self.output_config
        return [
            self._write_overlays(
                cfg.energy_sums_filename,
                pair_histograms(new.energy_sums, old.energy_sums, ENERGY_SUM_NAMES.values()),
                new, old, log_y=False,
            ),
            self._write_overlays(
                cfg.calo_towers_filename,
                pair_histograms(new.calo_wide, old.calo_wide, CALO_QUANTITIES)
                + pair_histograms(new.calo_zoom, old.calo_zoom, CALO_QUANTITIES),
                new, old, log_y=True,
            ),
            self._write_profiles(cfg.calo_profiles_filename, new, old),
        ]

    def _write_overlays(
        self,
        filename: str,
        pages: list[ComparisonPage],
        new: DatasetResult,
        old: DatasetResult,
        log_y: bool,
    ) -> ReportDocument:
        new_style = StyleOptions(color=COLORS['new'], label=new.label, log_y=log_y)
        old_style = StyleOptions(color=COLORS['old'], label=old.label, log_y=log_y)

        draws = []
        for page in pages:
            draws.append((page.title, self._overlay_draw(page, new_style, old_style)))
        return self._write_document(filename, draws)

    def _overlay_draw(self, page: ComparisonPage, new_style: StyleOptions, old_style: StyleOptions) -> Callable[[], None]:
        def draw():
            self.renderer.draw_comparison(
                configure(page.new, new_style, x_title=page.title),
                configure(page.old, old_style, x_title=page.title),
                page.new_mean,
                page.old_mean,
            )
        return draw

    def _write_profiles(self, filename: str, new: DatasetResult, old: DatasetResult) -> ReportDocument:
        options = ProfileStyleOptions(z_max=self.output_config.profile_z_max)
        draws = []
        for result in (new, old):
            title = f"{result.label} Average Had"
            styled = configure_profile(result.profile, options, title)
            draws.append((title, lambda styled=styled: self.renderer.draw_profile(styled)))
        return self._write_document(filename, draws)

    def _write_document(self, filename: str, draws: list[tuple[str, Callable[[], None]]]) -> ReportDocument:
        path = os.path.join(self.output_config.output_dir, filename)
        self.renderer.open(path)
        try:
            for title, draw in draws:
                draw()
                self.logger.debug(f"Wrote page '{title}' to {path}")
        except Exception:
            self.renderer.abort()
            raise
        final_path = self.renderer.close()

        self.logger.info(f"Wrote {len(draws)} pages to {final_path}")
        return ReportDocument(path=final_path, page_titles=tuple(title for title, _ in draws))
