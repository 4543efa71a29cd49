"""In-memory catalog used by the cleanup tests."""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from catalog.errors import CatalogError
from catalog.types import CatalogItem, DeleteOptions, ItemQuery, LibraryRoot


def make_items(count: int, keyword: str, *, prefix: str = "track") -> List[CatalogItem]:
    return [
        CatalogItem(
            id=f"{prefix}-{keyword}-{index}",
            path=f"/music/{prefix} {index} ({keyword}).flac",
            name=f"{prefix} {index} ({keyword})",
        )
        for index in range(count)
    ]


class FakeCatalog:
    """Name-contains matching over a fixed list of (root id, item) entries."""

    def __init__(
        self,
        entries: Iterable[Tuple[Optional[str], CatalogItem]] = (),
        *,
        roots: Sequence[LibraryRoot] = (),
        fail_delete: Iterable[str] = (),
        fail_count: Optional[Exception] = None,
    ) -> None:
        self.entries = list(entries)
        self.roots = list(roots)
        self.fail_delete = set(fail_delete)
        self.fail_count = fail_count
        self.list_roots_calls = 0
        self.count_calls: List[ItemQuery] = []
        self.page_calls: List[Tuple[ItemQuery, int, int]] = []
        self.delete_calls: List[Tuple[CatalogItem, DeleteOptions]] = []
        self.closed = False

    @classmethod
    def with_items(cls, items: Iterable[CatalogItem], **kwargs) -> "FakeCatalog":
        return cls([(None, item) for item in items], **kwargs)

    def _matches(self, query: ItemQuery) -> List[CatalogItem]:
        needle = query.keyword.lower()
        return [
            item
            for root_id, item in self.entries
            if needle in (item.name or "").lower()
            and (query.scope.parent_id is None or query.scope.parent_id == root_id)
        ]

    def list_roots(self) -> List[LibraryRoot]:
        self.list_roots_calls += 1
        return list(self.roots)

    def count(self, query: ItemQuery) -> int:
        self.count_calls.append(query)
        if self.fail_count is not None:
            raise self.fail_count
        return len(self._matches(query))

    def page(self, query: ItemQuery, offset: int, limit: int) -> List[CatalogItem]:
        self.page_calls.append((query, offset, limit))
        return self._matches(query)[offset : offset + limit]

    def delete(self, item: CatalogItem, options: DeleteOptions) -> None:
        self.delete_calls.append((item, options))
        if item.id in self.fail_delete:
            raise CatalogError(f"file is locked: {item.path}", status_code=500)

    @property
    def deleted_ids(self) -> List[str]:
        return [item.id for item, _ in self.delete_calls if item.id not in self.fail_delete]

    def close(self) -> None:
        self.closed = True
