"""Tests for the typed report API client."""

from __future__ import annotations

import json

import httpx
import pytest

from csreport.client.api import PROTOCOL_ACCEPTED_STATUS_CODES, ReportServiceClient
from csreport.client.transport import ResilientTransport
from csreport.errors import AllConnectionsFailedError, ReportServiceError


def _client(handler) -> ReportServiceClient:
    transport = ResilientTransport(
        "https://primary.test",
        "https://fallback.test",
        timeout_seconds=1,
        accepted_status_codes=PROTOCOL_ACCEPTED_STATUS_CODES,
        session=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return ReportServiceClient(transport)


@pytest.mark.asyncio
async def test_submit_report_posts_payload_and_parses_code() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/submit"
        assert request.method == "POST"
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"success": True, "lookup_code": "ABC12345", "message": "ok"})

    client = _client(handler)
    result = await client.submit_report({"companyName": "Acme"})
    await client.close()

    assert result.success is True
    assert result.lookup_code == "ABC12345"
    assert bodies == [{"companyName": "Acme"}]


@pytest.mark.asyncio
async def test_duplicate_code_reply_is_not_treated_as_outage() -> None:
    hosts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        hosts.append(request.url.host)
        return httpx.Response(409, json={"success": False, "message": "Lookup code already exists"})

    client = _client(handler)
    result = await client.submit_report({"companyName": "Acme"})
    await client.close()

    assert result.success is False
    assert "already exists" in result.message
    assert hosts == ["primary.test"]


@pytest.mark.asyncio
async def test_query_report_uses_fallback_when_primary_down() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "primary.test":
            return httpx.Response(503)
        assert request.url.params["code"] == "MYCODE01"
        return httpx.Response(
            200,
            json={"success": True, "record": {"lookup_code": "MYCODE01"}, "message": "Report found"},
        )

    client = _client(handler)
    result = await client.query_report("MYCODE01")
    await client.close()

    assert result.success is True
    assert result.record == {"lookup_code": "MYCODE01"}


@pytest.mark.asyncio
async def test_query_report_propagates_unified_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    client = _client(handler)
    with pytest.raises(AllConnectionsFailedError):
        await client.query_report("MYCODE01")
    await client.close()


@pytest.mark.asyncio
async def test_non_json_reply_becomes_generic_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>captive portal</html>")

    client = _client(handler)
    result = await client.query_report("ABC12345")
    await client.close()

    assert result.success is False
    assert result.record is None
    assert result.message == ReportServiceError.default_message


@pytest.mark.asyncio
async def test_wrongly_shaped_reply_becomes_generic_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["not", "an", "envelope"])

    client = _client(handler)
    result = await client.submit_report({"companyName": "Acme"})
    await client.close()

    assert result.success is False
    assert result.lookup_code is None
    assert result.message == ReportServiceError.default_message
