"""Outline API client."""

from typing import Any

import requests
from loguru import logger


class OutlineApiError(RuntimeError):
    """Raised when an Outline API request fails at the HTTP or transport level."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class OutlineApi:
    """Thin JSON-over-POST client for the Outline REST API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.sess = session or requests.Session()
        self.sess.headers.update(
            {
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )
        logger.debug("Outline API ready: {}", self.base_url)

    def call(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Invoke an Outline RPC endpoint (e.g. ``documents.list``), return json."""
        url = f"{self.base_url}/api/{endpoint}"
        logger.debug("Making request: {} {}", endpoint, repr(payload)[:64])

        try:
            r = self.sess.post(url, json=payload)
        except requests.RequestException as e:
            msg = f"Outline API request failed: {endpoint!r}: {e}"
            raise OutlineApiError(msg) from e

        if not r.ok:
            msg = f"Outline API error ({r.status_code}) on {endpoint!r}: {r.text}"
            raise OutlineApiError(msg, status_code=r.status_code)

        try:
            rv: dict[str, Any] = r.json()
        except ValueError as e:
            msg = f"Outline API returned invalid JSON for {endpoint!r}"
            raise OutlineApiError(msg, status_code=r.status_code) from e
        return rv
