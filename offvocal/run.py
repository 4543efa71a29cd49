"""Orchestration for the off-vocal cleanup pipeline."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from catalog.client import CatalogClient
from catalog.types import GLOBAL_SCOPE, LibraryScope

from .config import ScanConfiguration
from .errors import CleanupCancelled
from .gate import DeletionGate, GateReport
from .progress import ProgressCallback, ProgressTracker
from .scanner import PAGE_SIZE, KeywordScanner

LOGGER = logging.getLogger("offvocal.run")


class RunStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class RunOutcome:
    status: RunStatus
    scopes: List[LibraryScope] = field(default_factory=list)
    reports: List[GateReport] = field(default_factory=list)
    elapsed_s: float = 0.0

    @property
    def matched(self) -> int:
        return sum(report.matched for report in self.reports)

    @property
    def deleted(self) -> int:
        return sum(report.deleted for report in self.reports)

    @property
    def failed(self) -> int:
        return sum(len(report.failed) for report in self.reports)

    def as_dict(self) -> dict:
        return {
            "status": self.status.value,
            "scopes": [str(scope) for scope in self.scopes],
            "matched": self.matched,
            "deleted": self.deleted,
            "failed": self.failed,
            "elapsed_s": round(self.elapsed_s, 3),
            "keywords": [
                {
                    "keyword": report.keyword,
                    "scope": str(report.scope),
                    "matched": report.matched,
                    "deleted": report.deleted,
                    "failed": len(report.failed),
                }
                for report in self.reports
            ],
        }


class CleanupRunner:
    def __init__(
        self,
        catalog: CatalogClient,
        config: ScanConfiguration,
        *,
        progress_callback: Optional[ProgressCallback] = None,
        cancellation: Optional[Any] = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.catalog = catalog
        self.config = config
        self.cancellation = cancellation
        self.progress = ProgressTracker(progress_callback)
        self.gate = DeletionGate(catalog, config.execution_mode)
        self.scanner = KeywordScanner(
            catalog,
            self.gate,
            progress=self.progress,
            cancellation=cancellation,
            page_size=page_size,
        )

    def resolve_scopes(self) -> List[LibraryScope]:
        selected = self.config.selected_libraries
        if not selected:
            return [GLOBAL_SCOPE]
        wanted = set(selected)
        scopes: List[LibraryScope] = []
        found = set()
        for root in self.catalog.list_roots():
            if root.name not in wanted or not root.id:
                continue
            found.add(root.name)
            scopes.append(LibraryScope.scoped(root.id))
        missing = [name for name in selected if name not in found]
        if missing:
            LOGGER.info("Ignoring unknown libraries: %s", ", ".join(missing))
        if not scopes:
            LOGGER.info("No selected library resolved; scanning the whole catalog")
            return [GLOBAL_SCOPE]
        return scopes

    def run(self) -> RunOutcome:
        start = time.perf_counter()
        LOGGER.info("Execution mode: %s", self.config.execution_mode.value)
        LOGGER.debug("Keyword(s) to look for in filenames: %s", list(self.config.keywords))
        scopes = self.resolve_scopes()
        outcome = RunOutcome(status=RunStatus.COMPLETED, scopes=scopes)
        share = 100.0 / len(scopes)
        base = 0.0
        try:
            for scope in scopes:
                for report in self.scanner.scan(scope, self.config.keywords, base=base, share=share):
                    outcome.reports.append(report)
                base += share
        except CleanupCancelled:
            outcome.status = RunStatus.CANCELLED
            outcome.elapsed_s = time.perf_counter() - start
            LOGGER.warning(
                "Cleanup cancelled after %d keyword(s); %d file(s) deleted before stopping",
                len(outcome.reports),
                outcome.deleted,
            )
            return outcome
        self.progress.complete()
        outcome.elapsed_s = time.perf_counter() - start
        LOGGER.info(
            "Cleanup finished: %d match(es), %d deleted, %d failed in %.1fs",
            outcome.matched,
            outcome.deleted,
            outcome.failed,
            outcome.elapsed_s,
        )
        return outcome


def run_cleanup(
    catalog: CatalogClient,
    config: ScanConfiguration,
    *,
    progress_callback: Optional[ProgressCallback] = None,
    cancellation: Optional[Any] = None,
) -> RunOutcome:
    runner = CleanupRunner(
        catalog,
        config,
        progress_callback=progress_callback,
        cancellation=cancellation,
    )
    return runner.run()


__all__ = ["CleanupRunner", "RunOutcome", "RunStatus", "run_cleanup"]
