"""Shared test fixtures for csreport."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from csreport.errors import ConstraintViolationError
from csreport.models.report import ReportRecord
from csreport.repositories.mongo import MongoReportRepository, ensure_indexes

FIXED_NOW = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


class InMemoryReportRepo:
    """Report repository with a lookup-code uniqueness rule and call tracking."""

    def __init__(self) -> None:
        self.items: dict[str, ReportRecord] = {}
        self.calls: list[tuple[str, str]] = []

    async def exists(self, code: str) -> bool:
        self.calls.append(("exists", code))
        return self._find(code) is not None

    async def insert(self, record: ReportRecord) -> None:
        self.calls.append(("insert", record.lookup_code))
        if self._find(record.lookup_code) is not None:
            raise ConstraintViolationError("lookup_code", record.lookup_code)
        self.items[record.lookup_code] = record

    async def get_by_code(self, code: str) -> ReportRecord | None:
        self.calls.append(("get_by_code", code))
        return self._find(code)

    async def list_recent(self, limit: int = 500) -> list[ReportRecord]:
        items = sorted(self.items.values(), key=lambda row: row.created_at, reverse=True)
        return items[:limit]

    def _find(self, code: str) -> ReportRecord | None:
        for record in self.items.values():
            if code in (record.lookup_code, record.custom_lookup_code):
                return record
        return None


@pytest.fixture
def mongo_client() -> AsyncMongoMockClient:
    """Return an isolated async Mongo mock client per test."""
    return AsyncMongoMockClient()


@pytest_asyncio.fixture
async def mongo_db(mongo_client: AsyncMongoMockClient):
    """Return indexed test database instance."""
    db = mongo_client["csreport_test"]
    await ensure_indexes(db)
    return db


@pytest.fixture
def report_repo(mongo_db) -> MongoReportRepository:
    """Mongo report repository fixture."""
    return MongoReportRepository(mongo_db)


@pytest.fixture
def memory_repo() -> InMemoryReportRepo:
    return InMemoryReportRepo()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def make_payload():
    """Factory for complete report payloads in the form's camelCase shape."""

    def _create(**overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "companyName": "Acme Trading Co",
            "address": "88 Harbour Road",
            "phone": "020-5550100",
            "website": "https://acme.example",
            "contactPerson": "Lin Wei",
            "mobile": "13800138000",
            "wechat": "linwei88",
            "companySize": "50",
            "officeSize": "300 sqm",
            "mainBusiness": "Import and export",
            "products": "Electronic components",
            "serviceNeeds": "Managed IT support",
            "chatRecords": "Interested in a quote next month.",
        }
        payload.update(overrides)
        return payload

    return _create
