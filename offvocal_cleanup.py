"""Run the off-vocal cleanup job once against the persisted settings."""
from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
from pathlib import Path
from typing import Optional, Sequence

from core.logging_utils import configure_json_logging
from core.paths import ensure_working_dir_structure, resolve_working_dir
from core.settings import load_settings
from offvocal.cancellation import CancellationToken
from orchestrator.registry import DELETE_OFF_VOCAL_SONGS, RunnerContext
from orchestrator.runner import JobResult, JobStatus, run_job

EXIT_CODES = {
    JobStatus.COMPLETED: 0,
    JobStatus.FAILED: 1,
    JobStatus.CANCELLED: 130,
}


def format_result(result: JobResult) -> str:
    lines = [f"[{result.status.value}] {result.key} ({result.started_utc} -> {result.ended_utc})"]
    if result.error_msg and result.status is JobStatus.FAILED:
        lines.append(f" - error {result.error_code}: {result.error_msg}")
    outcome = result.outcome.as_dict() if result.outcome is not None else None
    if outcome:
        for entry in outcome["keywords"]:
            lines.append(
                f" - {entry['keyword']} @ {entry['scope']}: matched={entry['matched']} "
                f"deleted={entry['deleted']} failed={entry['failed']}"
            )
        lines.append(
            f" = matched={outcome['matched']} deleted={outcome['deleted']} failed={outcome['failed']}"
        )
    return "\n".join(lines)


def cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Delete off-vocal songs from the media library")
    parser.add_argument("--json", action="store_true", help="Output the run result as JSON")
    parser.add_argument(
        "--working-dir",
        type=Path,
        default=None,
        help="Override working directory",
    )
    args = parser.parse_args(argv)

    working_dir = args.working_dir or resolve_working_dir()
    ensure_working_dir_structure(working_dir)
    settings = load_settings(working_dir)
    level = str(settings.get("logging", {}).get("level") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    configure_json_logging("offvocal", working_dir=working_dir, level=level, propagate=True)

    token = CancellationToken()

    def _on_interrupt(signum, frame) -> None:  # noqa: ARG001
        logging.getLogger("offvocal").warning("Interrupt received; cancelling after the current item")
        token.set()

    previous = signal.signal(signal.SIGINT, _on_interrupt)
    try:
        result = run_job(
            DELETE_OFF_VOCAL_SONGS,
            RunnerContext(working_dir, settings),
            cancellation=token,
        )
    finally:
        signal.signal(signal.SIGINT, previous)

    if args.json:
        print(json.dumps(result.as_dict(), ensure_ascii=False, indent=2))
    else:
        print(format_result(result))
    return EXIT_CODES.get(result.status, 1)


if __name__ == "__main__":
    sys.exit(cli())
