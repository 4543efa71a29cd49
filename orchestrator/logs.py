"""Structured logging helpers for the job host."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional

from core.paths import get_logs_dir


LOGGER = logging.getLogger("offvocal.orchestrator.logs")


class OrchestratorLogger:
    """Write structured JSONL events for job runs."""

    def __init__(self, working_dir: Path) -> None:
        self._working_dir = Path(working_dir)
        self._log_path = get_logs_dir(self._working_dir) / "orchestrator.jsonl"
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._log_path

    # ------------------------------------------------------------------
    def log_event(
        self,
        *,
        level: str,
        event_id: int,
        job: Optional[str],
        phase: str,
        ok: bool,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        payload: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "event_id": int(event_id),
            "job": job,
            "phase": phase,
            "ok": ok,
        }
        if data:
            payload.update(data)
        line = json.dumps(payload, sort_keys=True, ensure_ascii=False)
        with self._lock:
            with self._log_path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        LOGGER.log(getattr(logging, level, logging.INFO), "%s", line)

    # ------------------------------------------------------------------
    def log_job(self, job: str, phase: str, event_id: int, ok: bool, **data: Any) -> None:
        self.log_event(level="INFO", event_id=event_id, job=job, phase=phase, ok=ok, data=data)

    def log_error(self, event_id: int, job: Optional[str], phase: str, err: Exception, **data: Any) -> None:
        payload = dict(data)
        payload["err"] = type(err).__name__
        payload["err_msg"] = str(err)
        self.log_event(level="ERROR", event_id=event_id, job=job, phase=phase, ok=False, data=payload)
