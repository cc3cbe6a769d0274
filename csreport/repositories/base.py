"""Repository protocol definitions for the data access layer."""

from __future__ import annotations

from typing import Protocol

from csreport.models.report import ReportRecord


class ReportRepository(Protocol):
    """Data access contract for report records.

    ``insert`` must raise ``ConstraintViolationError`` when the lookup code is
    already stored; existence checks alone cannot close the race between
    concurrent writers.
    """

    async def exists(self, code: str) -> bool: ...

    async def insert(self, record: ReportRecord) -> None: ...

    async def get_by_code(self, code: str) -> ReportRecord | None: ...

    async def list_recent(self, limit: int = 500) -> list[ReportRecord]: ...
