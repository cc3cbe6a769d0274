"""MongoDB connection and initialization helpers."""

from __future__ import annotations

import logging
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from csreport.errors import ConstraintViolationError, StorageError
from csreport.models.report import ReportRecord

REPORTS_COLLECTION = "reports"

logger = logging.getLogger(__name__)


async def create_mongo_client(mongodb_uri: str) -> AsyncIOMotorClient:
    """Create and validate an async MongoDB client connection."""
    try:
        client = AsyncIOMotorClient(mongodb_uri)
        await client.admin.command("ping")
        return client
    except PyMongoError as exc:
        raise RuntimeError(f"Failed to connect to MongoDB at {mongodb_uri}: {exc}") from exc


def get_database(client: AsyncIOMotorClient, database_name: str) -> AsyncIOMotorDatabase:
    """Return configured MongoDB database handle."""
    return client[database_name]


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create required MongoDB indexes, including the lookup-code uniqueness constraint."""
    try:
        await db[REPORTS_COLLECTION].create_index([("id", ASCENDING)], unique=True, name="uq_report_id")
        await db[REPORTS_COLLECTION].create_index(
            [("lookup_code", ASCENDING)], unique=True, name="uq_report_lookup_code"
        )
        await db[REPORTS_COLLECTION].create_index(
            [("custom_lookup_code", ASCENDING)],
            name="idx_report_custom_lookup_code",
        )
        await db[REPORTS_COLLECTION].create_index(
            [("created_at", ASCENDING)],
            name="idx_report_created_at",
        )
    except PyMongoError as exc:
        raise RuntimeError(f"Failed to ensure MongoDB indexes: {exc}") from exc


def _strip_mongo_id(document: dict[str, Any] | None) -> dict[str, Any] | None:
    if document is None:
        return None
    cleaned = dict(document)
    cleaned.pop("_id", None)
    return cleaned


def _code_filter(code: str) -> dict[str, Any]:
    return {"$or": [{"lookup_code": code}, {"custom_lookup_code": code}]}


class MongoReportRepository:
    """MongoDB-backed report repository."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[REPORTS_COLLECTION]

    async def exists(self, code: str) -> bool:
        if not code:
            return False
        try:
            count = await self.collection.count_documents(_code_filter(code), limit=1)
        except PyMongoError as exc:
            raise StorageError(f"Failed to check lookup code: {exc}") from exc
        return count > 0

    async def insert(self, record: ReportRecord) -> None:
        try:
            await self.collection.insert_one(record.to_document())
        except DuplicateKeyError as exc:
            if "id" in (exc.details or {}).get("keyValue", {}):
                logger.error("Report id collision: id=%s", record.id)
                raise StorageError(f"Report with id '{record.id}' already exists") from exc
            raise ConstraintViolationError("lookup_code", record.lookup_code) from exc
        except PyMongoError as exc:
            raise StorageError(f"Failed to insert report: {exc}") from exc

    async def get_by_code(self, code: str) -> ReportRecord | None:
        try:
            document = await self.collection.find_one(_code_filter(code))
        except PyMongoError as exc:
            raise StorageError(f"Failed to load report: {exc}") from exc
        cleaned = _strip_mongo_id(document)
        return ReportRecord.model_validate(cleaned) if cleaned else None

    async def list_recent(self, limit: int = 500) -> list[ReportRecord]:
        cursor = self.collection.find({}).sort("created_at", DESCENDING).limit(limit)
        items: list[ReportRecord] = []
        try:
            async for document in cursor:
                cleaned = _strip_mongo_id(document)
                if cleaned:
                    items.append(ReportRecord.model_validate(cleaned))
        except PyMongoError as exc:
            raise StorageError(f"Failed to list reports: {exc}") from exc
        return items
