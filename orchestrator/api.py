"""Public API surface for triggering and observing jobs."""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException
from pydantic import BaseModel

from catalog.client import CatalogClient
from core.settings import load_settings
from offvocal.cancellation import CancellationToken

from .auth import APIKeyAuth
from .logs import OrchestratorLogger
from .registry import JobRegistry, JobSpec, RunnerContext, build_default_registry
from .runner import JobResult, JobStatus, run_job


class JobStateResponse(BaseModel):
    key: str
    name: str
    category: str
    description: str
    status: str
    progress: float
    last_result: Optional[Dict[str, Any]] = None


class JobsResponse(BaseModel):
    jobs: List[JobStateResponse]


class JobActionResponse(BaseModel):
    key: str
    status: str


@dataclass(slots=True)
class _JobState:
    status: JobStatus = JobStatus.IDLE
    progress: float = 0.0
    token: Optional[CancellationToken] = None
    thread: Optional[threading.Thread] = None
    last_result: Optional[JobResult] = None
    done: threading.Event = field(default_factory=threading.Event)


class JobService:
    """Run registered jobs on background threads, one run per job key at a time.

    Settings are loaded fresh at the start of every run so that changes made
    between runs take effect without restarting the host.
    """

    def __init__(
        self,
        working_dir: Path,
        *,
        api_key: Optional[str] = None,
        registry: Optional[JobRegistry] = None,
        logger: Optional[OrchestratorLogger] = None,
        settings_loader: Optional[Callable[[], Dict[str, Any]]] = None,
        catalog_factory: Optional[Callable[[], CatalogClient]] = None,
    ) -> None:
        self._working_dir = Path(working_dir)
        self._registry = registry or build_default_registry()
        self._logger = logger or OrchestratorLogger(self._working_dir)
        self._settings_loader = settings_loader or (lambda: load_settings(self._working_dir))
        self._catalog_factory = catalog_factory
        self._auth = APIKeyAuth(api_key)
        self._lock = threading.Lock()
        self._states: Dict[str, _JobState] = {key: _JobState() for key in self._registry.all_specs()}

    # ------------------------------------------------------------------
    def _state(self, key: str) -> _JobState:
        self._registry.get(key)
        return self._states[key]

    def trigger(self, key: str) -> bool:
        """Start ``key`` in the background; return False if it is already running."""

        state = self._state(key)
        with self._lock:
            if state.status is JobStatus.RUNNING:
                return False
            state.status = JobStatus.RUNNING
            state.progress = 0.0
            state.token = CancellationToken()
            state.done.clear()
            state.thread = threading.Thread(
                target=self._run,
                args=(key, state, state.token),
                name=f"job-{key}",
                daemon=True,
            )
            state.thread.start()
        return True

    def _run(self, key: str, state: _JobState, token: CancellationToken) -> None:
        def _progress(value: float) -> None:
            state.progress = value

        try:
            catalog = self._catalog_factory() if self._catalog_factory else None
            ctx = RunnerContext(self._working_dir, self._settings_loader(), catalog=catalog)
            result = run_job(
                key,
                ctx,
                progress=_progress,
                cancellation=token,
                registry=self._registry,
                logger=self._logger,
            )
        except Exception as exc:
            self._logger.log_error(1302, key, "host", exc)
            result = None
        with self._lock:
            state.last_result = result
            state.status = result.status if result is not None else JobStatus.FAILED
            state.token = None
            state.done.set()

    def cancel(self, key: str) -> bool:
        state = self._state(key)
        with self._lock:
            if state.status is not JobStatus.RUNNING or state.token is None:
                return False
            state.token.set()
        self._logger.log_job(key, "cancel", 1150, True)
        return True

    def wait(self, key: str, timeout: Optional[float] = None) -> bool:
        return self._state(key).done.wait(timeout)

    def describe(self, key: str) -> JobStateResponse:
        spec = self._registry.get(key)
        state = self._states[key]
        return self._describe(spec, state)

    def describe_all(self) -> List[JobStateResponse]:
        return [self._describe(spec, self._states[key]) for key, spec in self._registry.all_specs().items()]

    @staticmethod
    def _describe(spec: JobSpec, state: _JobState) -> JobStateResponse:
        return JobStateResponse(
            key=spec.key,
            name=spec.name,
            category=spec.category,
            description=spec.description,
            status=state.status.value,
            progress=state.progress,
            last_result=state.last_result.as_dict() if state.last_result else None,
        )

    # ------------------------------------------------------------------
    def router(self) -> APIRouter:
        router = APIRouter(prefix="/v1/jobs", tags=["jobs"], dependencies=[Depends(self._auth)])

        def require_known(key: str) -> None:
            try:
                self._registry.get(key)
            except KeyError:
                raise HTTPException(status_code=404, detail="Job not found")

        @router.get("", response_model=JobsResponse)
        def jobs() -> JobsResponse:
            return JobsResponse(jobs=self.describe_all())

        @router.get("/{key}", response_model=JobStateResponse)
        def job(key: str) -> JobStateResponse:
            require_known(key)
            return self.describe(key)

        @router.post("/{key}/run", response_model=JobActionResponse, status_code=202)
        def run(key: str) -> JobActionResponse:
            require_known(key)
            if not self.trigger(key):
                raise HTTPException(status_code=409, detail="Job is already running")
            return JobActionResponse(key=key, status=JobStatus.RUNNING.value)

        @router.post("/{key}/cancel", response_model=JobActionResponse)
        def cancel(key: str) -> JobActionResponse:
            require_known(key)
            if not self.cancel(key):
                raise HTTPException(status_code=409, detail="Job is not running")
            return JobActionResponse(key=key, status="cancelling")

        return router


def create_app(service: JobService, *, title: str = "Off-Vocal Cleanup") -> FastAPI:
    app = FastAPI(title=title)
    app.include_router(service.router())
    return app


__all__ = ["JobService", "JobStateResponse", "create_app"]
