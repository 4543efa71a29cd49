"""Paginated keyword scan over one library scope."""
from __future__ import annotations

import logging
from typing import Any, Iterator, List, Optional, Sequence

from catalog.client import CatalogClient
from catalog.types import CatalogItem, ItemQuery, LibraryScope

from .cancellation import raise_if_cancelled
from .gate import DeletionGate, GateReport
from .progress import ProgressTracker, scoped_progress

LOGGER = logging.getLogger("offvocal.scanner")

PAGE_SIZE = 100


class KeywordScanner:
    def __init__(
        self,
        catalog: CatalogClient,
        gate: DeletionGate,
        *,
        progress: Optional[ProgressTracker] = None,
        cancellation: Optional[Any] = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.catalog = catalog
        self.gate = gate
        self.progress = progress or ProgressTracker()
        self.cancellation = cancellation
        self.page_size = max(1, int(page_size))

    def collect(
        self,
        scope: LibraryScope,
        keyword: str,
        *,
        base: float = 0.0,
        share: float = 100.0,
        keyword_index: int = 0,
        keyword_count: int = 1,
    ) -> List[CatalogItem]:
        """Fetch every item matching ``keyword`` in ``scope`` page by page.

        The total is counted once up front; pages are requested until the
        offset reaches it, even if the catalog changes in the meantime.
        """

        query = ItemQuery(scope=scope, keyword=keyword, limit=self.page_size)
        total = self.catalog.count(query)
        LOGGER.debug("Resulting amount of matched files: %d", total)
        matches: List[CatalogItem] = []
        offset = 0
        while offset < total:
            for item in self.catalog.page(query.at(offset), offset, self.page_size):
                matches.append(item)
                self.progress.report(
                    scoped_progress(base, share, keyword_index, len(matches) / total, keyword_count)
                )
                raise_if_cancelled(self.cancellation)
            offset += self.page_size
        return matches

    def scan(
        self,
        scope: LibraryScope,
        keywords: Sequence[str],
        *,
        base: float = 0.0,
        share: float = 100.0,
    ) -> Iterator[GateReport]:
        keyword_count = len(keywords)
        LOGGER.debug("Amount of keywords: %d", keyword_count)
        for index, keyword in enumerate(keywords):
            if not keyword:
                LOGGER.warning("Skipping empty keyword at position %d", index)
                continue
            LOGGER.debug("Now querying for keyword: %s (scope=%s)", keyword, scope)
            matches = self.collect(
                scope,
                keyword,
                base=base,
                share=share,
                keyword_index=index,
                keyword_count=keyword_count,
            )
            yield self.gate.process(keyword, matches, scope=scope)


__all__ = ["KeywordScanner", "PAGE_SIZE"]
