"""API tests for report submission and lookup endpoints."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from conftest import InMemoryReportRepo
from csreport.api.reports import router
from csreport.errors import StorageError
from csreport.pipeline import ReportQueryService, SubmissionPipeline


def build_test_client(repo: InMemoryReportRepo | None = None) -> tuple[TestClient, InMemoryReportRepo]:
    app = FastAPI()
    app.include_router(router)
    repo = repo or InMemoryReportRepo()
    app.state.report_repo = repo
    app.state.submission_pipeline = SubmissionPipeline(repo)
    app.state.query_service = ReportQueryService(repo)
    return TestClient(app), repo


def test_submit_returns_lookup_code(make_payload) -> None:
    client, repo = build_test_client()

    response = client.post("/api/submit", json=make_payload())

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["lookup_code"] in repo.items


def test_submit_missing_field_returns_400(make_payload) -> None:
    client, repo = build_test_client()
    body = make_payload()
    del body["mobile"]

    response = client.post("/api/submit", json=body)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "mobile is required"}
    assert repo.calls == []


def test_submit_duplicate_custom_code_returns_409(make_payload) -> None:
    client, _ = build_test_client()
    client.post("/api/submit", json=make_payload(customLookupCode="MYCODE01"))

    response = client.post("/api/submit", json=make_payload(customLookupCode="MYCODE01"))

    assert response.status_code == 409
    assert response.json()["success"] is False


def test_submit_unparseable_body_returns_generic_server_error() -> None:
    client, repo = build_test_client()

    response = client.post("/api/submit", content=b"{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Server error, please retry"}
    assert repo.items == {}


def test_submit_storage_failure_returns_500(make_payload) -> None:
    class _BrokenRepo(InMemoryReportRepo):
        async def exists(self, code: str) -> bool:
            raise StorageError("mongo unavailable")

    client, _ = build_test_client(_BrokenRepo())

    response = client.post("/api/submit", json=make_payload())

    assert response.status_code == 500
    assert response.json()["success"] is False


def test_query_returns_record(make_payload) -> None:
    client, _ = build_test_client()
    code = client.post("/api/submit", json=make_payload(customLookupCode="MYCODE01")).json()["lookup_code"]

    response = client.get("/api/query", params={"code": code})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["record"]["lookup_code"] == "MYCODE01"
    assert payload["record"]["company_name"] == "Acme Trading Co"
    assert payload["record"]["id"]


def test_query_unknown_code_returns_404() -> None:
    client, _ = build_test_client()

    response = client.get("/api/query", params={"code": "NEVER001"})

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_query_without_code_returns_400() -> None:
    client, repo = build_test_client()

    response = client.get("/api/query")

    assert response.status_code == 400
    assert repo.calls == []


def test_unconfigured_pipeline_returns_503() -> None:
    app = FastAPI()
    app.include_router(router)
    client = TestClient(app)

    response = client.get("/api/query", params={"code": "ABC12345"})

    assert response.status_code == 503
