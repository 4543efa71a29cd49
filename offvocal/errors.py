"""Error hierarchy for the cleanup pipeline."""
from __future__ import annotations


class CleanupError(RuntimeError):
    """Base exception for off-vocal cleanup failures."""


class CleanupCancelled(CleanupError):
    """Raised inside a run when its cancellation token has been set."""


__all__ = ["CleanupCancelled", "CleanupError"]
