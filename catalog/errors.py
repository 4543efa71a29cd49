"""Error hierarchy for catalog access."""
from __future__ import annotations

from typing import Optional


class CatalogError(RuntimeError):
    """Raised when the catalog cannot answer a query or perform a deletion."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = ["CatalogError"]
