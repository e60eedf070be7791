"""
FileDiscovery service - Single responsibility: Enumerate data files.

Walks a dataset directory tree and returns every data-container file in it.
No validation of file contents; that is left to the event stream readers.
"""

import logging
import os
from typing import Iterable


class FileDiscovery:
    """
    Service for locating data files below a root directory.

    A directory entry is a data file when its name contains one of the
    recognised extensions. An entry whose name contains no "." is treated
    as a directory and descended into. Symlinked directories are not
    followed.
    """

    def __init__(self, extensions: Iterable[str] = (".root",)):
        """
        Initialize discovery.

        Args:
            extensions: Substrings that mark a name as a data file
        """
        self.extensions = tuple(extensions)
        if not self.extensions:
            raise ValueError("extensions cannot be empty")
        self.logger = logging.getLogger(self.__class__.__name__)

    def is_data_file(self, name: str) -> bool:
        """Check if a file name carries a recognised extension."""
        return any(ext in name for ext in self.extensions)

    def discover(self, root_dir: str) -> list[str]:
        """
        Enumerate data files below ``root_dir``.

        Missing or empty directories contribute no files. The result is
        sorted so that an unchanged tree always yields the same list.

        Args:
            root_dir: Dataset root directory

        Returns:
            Sorted list of data file paths
        """
        found = []
        pending = [root_dir]

        while pending:
            directory = pending.pop()
            try:
                entries = sorted(os.scandir(directory), key=lambda e: e.name)
            except (FileNotFoundError, NotADirectoryError):
                self.logger.warning(f"Directory not found, skipping: {directory}")
                continue

            for entry in entries:
                if "." not in entry.name:
                    if entry.is_dir(follow_symlinks=False):
                        pending.append(entry.path)
                elif self.is_data_file(entry.name):
                    found.append(entry.path)
                    self.logger.debug(f"Found data file: {entry.path}")

        found.sort()
        self.logger.info(f"Discovered {len(found)} data files under {root_dir}")
        return found
