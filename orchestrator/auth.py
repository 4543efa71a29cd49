"""``X-API-Key`` guard for the job-control routes."""
import hmac
import logging
from typing import Optional

from fastapi import Header, HTTPException, status

LOGGER = logging.getLogger("offvocal.orchestrator.auth")


class APIKeyAuth:
    """FastAPI dependency comparing ``X-API-Key`` against the configured key.

    With no key configured every request is refused.
    """

    def __init__(self, expected_key: Optional[str]) -> None:
        self._expected = (expected_key or "").strip()

    def __call__(self, x_api_key: Optional[str] = Header(None)) -> str:
        if not self._expected:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="API key is not configured.",
            )
        supplied = (x_api_key or "").strip()
        if not supplied or not hmac.compare_digest(supplied.encode("utf-8"), self._expected.encode("utf-8")):
            LOGGER.info("Rejected job API request with %s API key", "an invalid" if supplied else "no")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing API key.",
            )
        return self._expected
