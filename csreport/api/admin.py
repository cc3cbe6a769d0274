"""Admin listing of submitted reports with submission counts."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from csreport.errors import StorageError
from csreport.models.report import ReportRecord, utc_now
from csreport.repositories.base import ReportRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


class SubmissionStats(BaseModel):
    total_forms: int
    today_forms: int
    this_week_forms: int
    this_month_forms: int


class AdminFormsResponse(BaseModel):
    success: bool
    items: list[ReportRecord]
    stats: SubmissionStats
    message: str


def get_report_repo(request: Request) -> ReportRepository:
    """Get report repository from app state."""
    repository = getattr(request.app.state, "report_repo", None)
    if repository is None:
        raise HTTPException(status_code=503, detail="Report repository is not configured")
    return repository


def _as_utc(value: datetime) -> datetime:
    # Mongo hands back naive UTC datetimes.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def compute_stats(records: list[ReportRecord], now: datetime) -> SubmissionStats:
    """Count submissions for today (UTC), the last 7 days, and the last 30 days."""
    today = now.date()
    week_ago = now - timedelta(days=7)
    month_ago = now - timedelta(days=30)
    created = [_as_utc(record.created_at) for record in records]
    return SubmissionStats(
        total_forms=len(records),
        today_forms=sum(1 for value in created if value.date() == today),
        this_week_forms=sum(1 for value in created if value >= week_ago),
        this_month_forms=sum(1 for value in created if value >= month_ago),
    )


@router.get("/forms", response_model=AdminFormsResponse)
async def list_forms(
    report_repo: Annotated[ReportRepository, Depends(get_report_repo)],
    limit: int = Query(default=500, ge=1, le=5000),
) -> AdminFormsResponse | JSONResponse:
    """Return stored reports newest first along with submission counts."""
    try:
        records = await report_repo.list_recent(limit=limit)
    except StorageError as exc:
        logger.error("Report listing failed: %s", exc)
        return JSONResponse(status_code=500, content={"success": False, "message": exc.message})

    return AdminFormsResponse(
        success=True,
        items=records,
        stats=compute_stats(records, utc_now()),
        message="OK",
    )
