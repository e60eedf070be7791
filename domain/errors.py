"""
Error taxonomy for the comparison pipeline.

Every failure aborts the run; nothing here is retried.
"""


class ComparisonError(Exception):
    """Base class for all fatal comparison errors."""


class ConfigurationError(ComparisonError):
    """A requested table or column cannot be served by the input files."""


class EmptyDatasetError(ComparisonError):
    """A dataset has no files or no events, so it cannot be normalized."""
