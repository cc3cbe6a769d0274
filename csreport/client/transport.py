"""Primary/fallback HTTP transport for reaching the report API."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx
import structlog

from csreport.errors import AllConnectionsFailedError

logger = structlog.get_logger(__name__)

API_ENDPOINTS: dict[str, str] = {
    "submit": "/api/submit",
    "query": "/api/query",
    "send_email": "/api/send-email",
    "admin_forms": "/api/admin/forms",
    "admin_export": "/api/admin/export",
}


class TransportStage(str, Enum):
    TRYING_PRIMARY = "trying_primary"
    TRYING_FALLBACK = "trying_fallback"
    DONE = "done"


@dataclass(frozen=True)
class TransportRequest:
    """Endpoint-independent description of one logical API call."""

    method: str
    path: str
    params: str | Mapping[str, Any] | None = None
    json: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)


class ResilientTransport:
    """Send a request to the primary base URL, then once to the fallback.

    Attempts run one after the other, each under its own ``timeout_seconds``
    deadline, so a call takes at most about twice the timeout. When both
    attempts fail the caller receives a single ``AllConnectionsFailedError``;
    per-attempt detail goes to the log only.
    """

    def __init__(
        self,
        primary_base_url: str,
        fallback_base_url: str,
        *,
        timeout_seconds: float = 10.0,
        accepted_status_codes: Iterable[int] = (),
        session: httpx.AsyncClient | None = None,
        time_fn: Callable[[], float] | None = None,
    ):
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        self.primary_base_url = primary_base_url.rstrip("/")
        self.fallback_base_url = fallback_base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.accepted_status_codes = frozenset(accepted_status_codes)
        self.session = session or httpx.AsyncClient(timeout=timeout_seconds)
        self._time_fn = time_fn or time.monotonic

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        *,
        query: str | Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> httpx.Response:
        """Call a named API endpoint (see ``API_ENDPOINTS``)."""
        try:
            path = API_ENDPOINTS[endpoint]
        except KeyError as exc:
            raise ValueError(f"Unknown API endpoint: {endpoint}") from exc

        headers = {"Content-Type": "application/json"} if body is not None else {}
        return await self.send(TransportRequest(method=method, path=path, params=query, json=body, headers=headers))

    async def send(self, request: TransportRequest) -> httpx.Response:
        stage = TransportStage.TRYING_PRIMARY
        while stage is not TransportStage.DONE:
            base_url = self.primary_base_url if stage is TransportStage.TRYING_PRIMARY else self.fallback_base_url
            response = await self._attempt(stage, base_url, request)
            if response is not None:
                return response
            stage = (
                TransportStage.TRYING_FALLBACK if stage is TransportStage.TRYING_PRIMARY else TransportStage.DONE
            )

        logger.error("all_connections_failed", method=request.method, path=request.path)
        raise AllConnectionsFailedError()

    def is_accepted(self, response: httpx.Response) -> bool:
        return response.is_success or response.status_code in self.accepted_status_codes

    async def aclose(self) -> None:
        """Close underlying HTTP client."""
        await self.session.aclose()

    async def _attempt(
        self,
        stage: TransportStage,
        base_url: str,
        request: TransportRequest,
    ) -> httpx.Response | None:
        url = f"{base_url}{request.path}"
        log = logger.bind(stage=stage.value, method=request.method, url=url)
        started = self._time_fn()
        try:
            response = await asyncio.wait_for(
                self.session.request(
                    request.method,
                    url,
                    params=request.params,
                    json=request.json,
                    headers=dict(request.headers),
                ),
                timeout=self.timeout_seconds,
            )
        except (TimeoutError, httpx.TimeoutException):
            log.warning("transport_attempt_timeout", elapsed_seconds=self._elapsed(started))
            return None
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            log.warning("transport_attempt_error", error=str(exc), elapsed_seconds=self._elapsed(started))
            return None

        if self.is_accepted(response):
            log.info("transport_attempt_succeeded", status=response.status_code, elapsed_seconds=self._elapsed(started))
            return response

        log.warning("transport_attempt_rejected", status=response.status_code, elapsed_seconds=self._elapsed(started))
        await response.aclose()
        return None

    def _elapsed(self, started: float) -> float:
        return round(self._time_fn() - started, 3)
