"""Run one registered job and turn its result into a host-level status."""
from __future__ import annotations

import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

from catalog.errors import CatalogError

from .logs import OrchestratorLogger
from .registry import JobRegistry, RunnerContext, build_default_registry


class JobStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(slots=True)
class JobResult:
    key: str
    status: JobStatus
    started_utc: str
    ended_utc: str
    outcome: Optional[Any] = None
    error_code: Optional[str] = None
    error_msg: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "key": self.key,
            "status": self.status.value,
            "started_utc": self.started_utc,
            "ended_utc": self.ended_utc,
            "error_code": self.error_code,
            "error_msg": self.error_msg,
        }
        if self.outcome is not None and hasattr(self.outcome, "as_dict"):
            payload["outcome"] = self.outcome.as_dict()
        return payload


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def run_job(
    key: str,
    ctx: RunnerContext,
    *,
    progress: Optional[Callable[[float], None]] = None,
    cancellation: Optional[Any] = None,
    registry: Optional[JobRegistry] = None,
    logger: Optional[OrchestratorLogger] = None,
) -> JobResult:
    """Run the job registered under ``key``; failures are captured, not raised."""

    spec = (registry or build_default_registry()).get(key)
    logger = logger or OrchestratorLogger(ctx.working_dir)
    started = _utcnow()
    logger.log_job(spec.key, "start", 1100, True, name=spec.name)
    try:
        outcome = spec.runner(ctx, progress, cancellation)
    except Exception as exc:
        tb = traceback.format_exc(limit=6)
        error_code = _classify_error(exc)
        logger.log_error(1301, spec.key, "run", exc, error_code=error_code, trace=tb)
        return JobResult(
            key=spec.key,
            status=JobStatus.FAILED,
            started_utc=started,
            ended_utc=_utcnow(),
            error_code=error_code,
            error_msg=str(exc),
        )
    status = JobStatus.COMPLETED
    if getattr(getattr(outcome, "status", None), "value", None) == JobStatus.CANCELLED.value:
        status = JobStatus.CANCELLED
    summary = outcome.as_dict() if hasattr(outcome, "as_dict") else {}
    logger.log_job(
        spec.key,
        "finish",
        1200,
        status is JobStatus.COMPLETED,
        status=status.value,
        matched=summary.get("matched"),
        deleted=summary.get("deleted"),
        failed=summary.get("failed"),
    )
    return JobResult(
        key=spec.key,
        status=status,
        started_utc=started,
        ended_utc=_utcnow(),
        outcome=outcome,
        error_code="CANCELED" if status is JobStatus.CANCELLED else None,
    )


def _classify_error(exc: Exception) -> str:
    if isinstance(exc, CatalogError):
        if exc.status_code in (401, 403):
            return "CATALOG_AUTH"
        return "CATALOG_UNAVAILABLE"
    return "ERROR"
