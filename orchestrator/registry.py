"""Job registry describing the maintenance jobs this host can run."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from catalog.client import CatalogClient


RunnerFn = Callable[["RunnerContext", Optional[Callable[[float], None]], Optional[Any]], Any]


@dataclass(slots=True)
class RunnerContext:
    working_dir: Path
    settings: Dict[str, Any]
    catalog: Optional[CatalogClient] = None


@dataclass(slots=True)
class JobSpec:
    key: str
    name: str
    category: str
    description: str
    runner: RunnerFn
    default_triggers: Tuple[str, ...] = ()


class JobRegistry:
    """Authoritative registry for job keys."""

    def __init__(self) -> None:
        self._jobs: Dict[str, JobSpec] = {}

    def register(self, spec: JobSpec) -> None:
        if spec.key in self._jobs:
            raise ValueError(f"Job key already registered: {spec.key}")
        self._jobs[spec.key] = spec

    def get(self, key: str) -> JobSpec:
        try:
            return self._jobs[key]
        except KeyError as exc:
            raise KeyError(f"Unknown job key: {key}") from exc

    def all_specs(self) -> Dict[str, JobSpec]:
        return dict(self._jobs)


# ----------------------------------------------------------------------
# Default runner implementations
# ----------------------------------------------------------------------

DELETE_OFF_VOCAL_SONGS = "DeleteOffVocalSongs"


def _delete_off_vocal_songs(
    ctx: RunnerContext,
    progress: Optional[Callable[[float], None]],
    cancellation: Optional[Any],
) -> Any:
    from catalog.jellyfin import CatalogSettings, JellyfinCatalogClient
    from offvocal.config import ScanConfiguration
    from offvocal.run import run_cleanup

    config = ScanConfiguration.from_settings(ctx.settings)
    if ctx.catalog is not None:
        return run_cleanup(ctx.catalog, config, progress_callback=progress, cancellation=cancellation)
    client = JellyfinCatalogClient(CatalogSettings.from_settings(ctx.settings))
    try:
        return run_cleanup(client, config, progress_callback=progress, cancellation=cancellation)
    finally:
        client.close()


def build_default_registry() -> JobRegistry:
    registry = JobRegistry()

    registry.register(
        JobSpec(
            key=DELETE_OFF_VOCAL_SONGS,
            name="Delete Off-Vocal Songs",
            category="Library",
            description="Scans the Media Library for off-vocal tracks and deletes them.",
            runner=_delete_off_vocal_songs,
        )
    )

    return registry
