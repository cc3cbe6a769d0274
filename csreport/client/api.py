"""Typed client for the report submission and lookup endpoints."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel

from csreport.client.transport import ResilientTransport
from csreport.errors import ReportServiceError

logger = structlog.get_logger(__name__)

# Application-level replies that carry a user-facing message.
PROTOCOL_ACCEPTED_STATUS_CODES = frozenset({400, 404, 409})


class SubmitResult(BaseModel):
    success: bool
    lookup_code: str | None = None
    message: str = ""


class QueryResult(BaseModel):
    success: bool
    record: dict[str, Any] | None = None
    message: str = ""


ResultT = TypeVar("ResultT", SubmitResult, QueryResult)


class ReportServiceClient:
    """Submit and look up reports through a ``ResilientTransport``."""

    def __init__(self, transport: ResilientTransport):
        self.transport = transport

    @classmethod
    def from_urls(
        cls,
        primary_base_url: str,
        fallback_base_url: str,
        *,
        timeout_seconds: float = 10.0,
    ) -> "ReportServiceClient":
        return cls(
            ResilientTransport(
                primary_base_url,
                fallback_base_url,
                timeout_seconds=timeout_seconds,
                accepted_status_codes=PROTOCOL_ACCEPTED_STATUS_CODES,
            )
        )

    async def submit_report(self, payload: Mapping[str, Any]) -> SubmitResult:
        response = await self.transport.request("submit", "POST", body=dict(payload))
        return _read_result(SubmitResult, response)

    async def query_report(self, code: str) -> QueryResult:
        response = await self.transport.request("query", "GET", query={"code": code})
        return _read_result(QueryResult, response)

    async def close(self) -> None:
        await self.transport.aclose()


def _read_result(model: type[ResultT], response: httpx.Response) -> ResultT:
    """Parse an accepted reply; an unreadable body becomes a generic failure."""
    try:
        return model.model_validate(response.json())
    except ValueError as exc:
        logger.warning(
            "unreadable_api_reply",
            url=str(response.request.url),
            status=response.status_code,
            error=str(exc),
        )
        return model(success=False, message=ReportServiceError.default_message)
