"""
Progress reporting for long event loops.

Logs "i / N events" each time the running count crosses a multiple of
N // divisions. Purely observational.
"""

import logging


class ProgressLogger:
    """Logs event-loop progress at fixed intervals."""

    def __init__(self, total: int, divisions: int = 20, label: str = "", logger: logging.Logger = None):
        if divisions <= 0:
            raise ValueError(f"divisions must be positive, got {divisions}")
        self.total = total
        self.interval = max(total // divisions, 1)
        self.label = label
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self._done = 0

    @property
    def done(self) -> int:
        return self._done

    def advance(self, n: int = 1):
        """Account for ``n`` more processed events."""
        previous = self._done
        self._done += n
        for step in range(previous // self.interval + 1, self._done // self.interval + 1):
            prefix = f"{self.label}: " if self.label else ""
            self.logger.info(f"{prefix}{step * self.interval} / {self.total} events")
