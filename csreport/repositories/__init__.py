"""Repository interfaces and concrete data access helpers."""

from csreport.repositories.base import ReportRepository
from csreport.repositories.mongo import (
    MongoReportRepository,
    create_mongo_client,
    ensure_indexes,
    get_database,
)

__all__ = [
    "MongoReportRepository",
    "ReportRepository",
    "create_mongo_client",
    "ensure_indexes",
    "get_database",
]
