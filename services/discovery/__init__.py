"""
Discovery services.

Services responsible for locating input data files.
"""

from .file_discovery import FileDiscovery

__all__ = ["FileDiscovery"]
