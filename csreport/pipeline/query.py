"""Report lookup by public code."""

from __future__ import annotations

import structlog

from csreport.errors import InvalidInputError, ReportNotFoundError
from csreport.models.report import ReportRecord
from csreport.repositories.base import ReportRepository
from csreport.utils.codes import normalize_lookup_code

logger = structlog.get_logger(__name__)


class ReportQueryService:
    """Resolve a lookup code to its stored report."""

    def __init__(self, report_repo: ReportRepository):
        self.report_repo = report_repo

    async def find(self, code: str | None) -> ReportRecord:
        if code is None or not code.strip():
            raise InvalidInputError("Lookup code must not be empty")

        normalized = normalize_lookup_code(code)
        record = await self.report_repo.get_by_code(normalized)
        if record is None:
            logger.info("report_lookup_miss", lookup_code=normalized)
            raise ReportNotFoundError(normalized)
        return record
