"""Audit or delete the items matched for one keyword."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from catalog.client import CatalogClient
from catalog.types import CatalogItem, DeleteOptions, LibraryScope

from .config import ExecutionMode

LOGGER = logging.getLogger("offvocal.gate")

DESTRUCTIVE_DELETE_OPTIONS = DeleteOptions(remove_file_from_disk=True)


@dataclass(frozen=True, slots=True)
class DeletionOutcome:
    item: CatalogItem
    ok: bool
    error: Optional[Exception] = None


@dataclass(slots=True)
class GateReport:
    keyword: str
    scope: LibraryScope
    mode: ExecutionMode
    matched: int
    outcomes: List[DeletionOutcome] = field(default_factory=list)

    @property
    def deleted(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failed(self) -> List[DeletionOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


class DeletionGate:
    def __init__(self, catalog: CatalogClient, mode: ExecutionMode) -> None:
        self.catalog = catalog
        self.mode = mode

    def _attempt(self, item: CatalogItem) -> DeletionOutcome:
        try:
            self.catalog.delete(item, DESTRUCTIVE_DELETE_OPTIONS)
        except Exception as exc:
            return DeletionOutcome(item=item, ok=False, error=exc)
        return DeletionOutcome(item=item, ok=True)

    def process(self, keyword: str, items: Sequence[CatalogItem], *, scope: LibraryScope) -> GateReport:
        report = GateReport(keyword=keyword, scope=scope, mode=self.mode, matched=len(items))
        LOGGER.info("Keyword %s matched %d file(s).", keyword, len(items))
        if LOGGER.isEnabledFor(logging.DEBUG):
            LOGGER.debug("Matched files: %s", [item.path or item.id for item in items])
        if self.mode is not ExecutionMode.DESTRUCTIVE:
            return report

        report.outcomes = [self._attempt(item) for item in items]
        for outcome in report.failed:
            LOGGER.error(
                "Error deleting item: %s (%s)",
                outcome.item.id,
                outcome.item.path,
                exc_info=outcome.error,
            )
        if items:
            LOGGER.info(
                "Keyword %s: deleted %d of %d file(s), %d failed",
                keyword,
                report.deleted,
                len(items),
                len(report.failed),
            )
        return report


__all__ = ["DeletionGate", "DeletionOutcome", "GateReport"]
