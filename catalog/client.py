"""Contract every catalog backend exposes to the cleanup pipeline."""
from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from .types import CatalogItem, DeleteOptions, ItemQuery, LibraryRoot


@runtime_checkable
class CatalogClient(Protocol):
    def list_roots(self) -> Sequence[LibraryRoot]:
        ...

    def count(self, query: ItemQuery) -> int:
        ...

    def page(self, query: ItemQuery, offset: int, limit: int) -> Sequence[CatalogItem]:
        ...

    def delete(self, item: CatalogItem, options: DeleteOptions) -> None:
        ...


__all__ = ["CatalogClient"]
