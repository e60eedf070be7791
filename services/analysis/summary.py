"""
JSON summary of a finished comparison.
"""

import json
import logging
import os

from domain.results import DatasetResult

logger = logging.getLogger(__name__)


def build_summary(old: DatasetResult, new: DatasetResult, documents) -> dict:
    """
    Collect event counts, file counts and histogram means of both datasets.

    Args:
        old: Normalized older dataset
        new: Normalized newer dataset
        documents: ReportDocument objects that were written

    Returns:
        JSON-serializable dict
    """
    return {
        "datasets": {
            result.name: {
                "label": result.label,
                "event_count": result.event_count,
                "file_count": result.file_count,
                "profile_entries": result.profile.entries,
                "means": result.means(),
            }
            for result in (old, new)
        },
        "documents": [
            {"path": doc.path, "pages": list(doc.page_titles)}
            for doc in documents
        ],
    }


def write_summary(path: str, old: DatasetResult, new: DatasetResult, documents) -> str:
    """Write :func:`build_summary` output to ``path`` as indented JSON."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, "w") as f:
        json.dump(build_summary(old, new, documents), f, indent=2, default=str)

    logger.info(f"Saved comparison summary to: {path}")
    return path
