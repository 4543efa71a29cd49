from __future__ import annotations

import threading
from typing import Any, Optional

from .errors import CleanupCancelled


class CancellationToken:
    def __init__(self) -> None:
        self._evt = threading.Event()

    def set(self) -> None:
        self._evt.set()

    def is_set(self) -> bool:
        return self._evt.is_set()


def is_cancelled(token: Optional[Any]) -> bool:
    """Accept our own token, a ``threading.Event`` or anything with ``is_cancelled()``."""

    if token is None:
        return False
    if hasattr(token, "is_cancelled"):
        return bool(token.is_cancelled())
    return bool(token.is_set())


def raise_if_cancelled(token: Optional[Any]) -> None:
    if is_cancelled(token):
        raise CleanupCancelled("cleanup run cancelled")


__all__ = ["CancellationToken", "is_cancelled", "raise_if_cancelled"]
