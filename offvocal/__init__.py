"""Find off-vocal (karaoke, instrumental, ...) tracks in a media catalog and remove them."""

from .cancellation import CancellationToken
from .config import ExecutionMode, ScanConfiguration, split_keywords
from .errors import CleanupCancelled, CleanupError
from .gate import DeletionGate, DeletionOutcome, GateReport
from .run import CleanupRunner, RunOutcome, RunStatus, run_cleanup
from .scanner import PAGE_SIZE, KeywordScanner

__all__ = [
    "CancellationToken",
    "CleanupCancelled",
    "CleanupError",
    "CleanupRunner",
    "DeletionGate",
    "DeletionOutcome",
    "ExecutionMode",
    "GateReport",
    "KeywordScanner",
    "PAGE_SIZE",
    "RunOutcome",
    "RunStatus",
    "ScanConfiguration",
    "run_cleanup",
    "split_keywords",
]
