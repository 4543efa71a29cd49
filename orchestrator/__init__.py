"""Job host for the off-vocal cleanup maintenance job."""

from .api import JobService, create_app
from .registry import DELETE_OFF_VOCAL_SONGS, JobRegistry, JobSpec, RunnerContext, build_default_registry
from .runner import JobResult, JobStatus, run_job

__all__ = [
    "DELETE_OFF_VOCAL_SONGS",
    "JobRegistry",
    "JobResult",
    "JobService",
    "JobSpec",
    "JobStatus",
    "RunnerContext",
    "build_default_registry",
    "create_app",
    "run_job",
]
