"""
Analysis services.

Styling, rendering and reporting of the dataset comparison.
"""

from .style import StyleOptions, ProfileStyleOptions, configure, configure_profile
from .pdf_renderer import PdfRenderer
from .report_builder import ComparisonReportBuilder, ComparisonPage, ReportDocument, pair_histograms
from .summary import build_summary, write_summary

__all__ = [
    "StyleOptions",
    "ProfileStyleOptions",
    "configure",
    "configure_profile",
    "PdfRenderer",
    "ComparisonReportBuilder",
    "ComparisonPage",
    "ReportDocument",
    "pair_histograms",
    "build_summary",
    "write_summary",
]
