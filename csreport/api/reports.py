"""API endpoints for report submission and lookup."""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from csreport.errors import (
    DuplicateCodeError,
    ReportNotFoundError,
    ReportServiceError,
)
from csreport.pipeline.ingestion import SubmissionPipeline
from csreport.pipeline.query import ReportQueryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reports"])


class SubmitResponse(BaseModel):
    """Envelope returned by report submission."""

    success: bool
    lookup_code: str | None = None
    message: str


class QueryResponse(BaseModel):
    """Envelope returned by report lookup."""

    success: bool
    record: dict[str, Any] | None = None
    message: str


def get_submission_pipeline(request: Request) -> SubmissionPipeline:
    """Get submission pipeline from app state."""
    pipeline = getattr(request.app.state, "submission_pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=503, detail="Submission pipeline is not configured")
    return pipeline


def get_query_service(request: Request) -> ReportQueryService:
    """Get query service from app state."""
    service = getattr(request.app.state, "query_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Query service is not configured")
    return service


def error_status(error: ReportServiceError) -> int:
    """Map a service error to its HTTP status code."""
    if isinstance(error, DuplicateCodeError):
        return 409
    if isinstance(error, ReportNotFoundError):
        return 404
    if error.user_correctable:
        return 400
    return 500


def _failure(model: type[BaseModel], error: ReportServiceError) -> JSONResponse:
    message = error.message if error.user_correctable else type(error).default_message
    body = model(success=False, message=message)
    return JSONResponse(status_code=error_status(error), content=body.model_dump(exclude_none=True))


@router.post("/submit", response_model=SubmitResponse)
async def submit_report(
    request: Request,
    pipeline: Annotated[SubmissionPipeline, Depends(get_submission_pipeline)],
) -> SubmitResponse | JSONResponse:
    """Validate and store a report, returning its lookup code."""
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.error("Unparseable report payload: %s", exc)
        return _failure(SubmitResponse, ReportServiceError())

    try:
        lookup_code = await pipeline.submit(payload)
    except ReportServiceError as exc:
        if not exc.user_correctable:
            logger.error("Report submission failed: %s", exc)
        return _failure(SubmitResponse, exc)

    return SubmitResponse(success=True, lookup_code=lookup_code, message="Report submitted successfully")


@router.get("/query", response_model=QueryResponse)
async def query_report(
    service: Annotated[ReportQueryService, Depends(get_query_service)],
    code: str | None = Query(default=None),
) -> QueryResponse | JSONResponse:
    """Return the report stored under a lookup code."""
    try:
        record = await service.find(code)
    except ReportServiceError as exc:
        if not exc.user_correctable:
            logger.error("Report lookup failed: %s", exc)
        return _failure(QueryResponse, exc)

    return QueryResponse(success=True, record=record.model_dump(mode="json"), message="Report found")
