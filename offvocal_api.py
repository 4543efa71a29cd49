"""CLI entry-point to launch the job-control HTTP API."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

import uvicorn

from core.logging_utils import configure_json_logging
from core.paths import resolve_working_dir
from core.settings import load_settings
from orchestrator.api import JobService, create_app

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8757


def _resolve_bind_host(candidate: Optional[str]) -> str:
    host = (candidate or DEFAULT_HOST).strip()
    if not host:
        host = DEFAULT_HOST
    norm = host.lower()
    if norm == "localhost":
        return "127.0.0.1"
    if norm.startswith("::ffff:"):
        norm = norm.split("::ffff:")[-1]
    if norm == "::1":
        return "127.0.0.1"
    if norm.startswith("127."):
        return norm
    raise ValueError(
        f"Refusing to bind API server to non-loopback host '{candidate}'. The job API only serves on localhost."
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Start the local off-vocal cleanup job API.")
    parser.add_argument("--host", default=None, help="Bind host (default from settings.json)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default from settings.json)")
    parser.add_argument("--api-key", dest="api_key", default=None, help="Override the API key for this session")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    args = parse_args(argv)
    working_dir = resolve_working_dir()
    settings = load_settings(working_dir)
    api_settings = settings.get("api") if isinstance(settings.get("api"), dict) else {}
    try:
        host = _resolve_bind_host(args.host or api_settings.get("host"))
    except ValueError as exc:
        logging.error("%s", exc)
        return 2
    port = args.port or api_settings.get("port") or DEFAULT_PORT
    try:
        port = int(port)
    except (TypeError, ValueError):
        port = DEFAULT_PORT
    api_key = args.api_key if args.api_key else api_settings.get("api_key")
    if not api_key:
        logging.warning("API key is not configured; all requests will be rejected with 401.")

    level = str(settings.get("logging", {}).get("level") or "INFO")
    configure_json_logging("offvocal", working_dir=working_dir, level=level)

    service = JobService(working_dir, api_key=api_key)
    app = create_app(service)

    print(f"API listening on http://{host}:{port}", flush=True)

    uvicorn_config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level="info",
        access_log=False,
    )
    server = uvicorn.Server(uvicorn_config)
    server.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
