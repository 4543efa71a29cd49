from __future__ import annotations

import logging
from typing import Callable, Optional

LOGGER = logging.getLogger("offvocal.progress")

ProgressCallback = Callable[[float], None]


class ProgressTracker:
    """Forward a clamped, non-decreasing percentage to a progress sink."""

    def __init__(self, callback: Optional[ProgressCallback] = None) -> None:
        self.callback = callback
        self.last = 0.0

    def _emit(self, value: float) -> None:
        if self.callback is None:
            return
        try:
            self.callback(value)
        except Exception:
            LOGGER.debug("Progress callback raised; ignoring", exc_info=True)

    def report(self, value: float) -> None:
        value = min(100.0, max(0.0, float(value)))
        if value < self.last:
            value = self.last
        self.last = value
        self._emit(value)

    def complete(self) -> None:
        self.last = 100.0
        self._emit(100.0)


def scoped_progress(base: float, share: float, keyword_index: int, fraction: float, keyword_count: int) -> float:
    """Progress after ``fraction`` of keyword ``keyword_index`` within one scope's share."""

    if keyword_count <= 0:
        return base + share
    fraction = min(1.0, max(0.0, fraction))
    return base + share * (keyword_index + fraction) / keyword_count


__all__ = ["ProgressCallback", "ProgressTracker", "scoped_progress"]
