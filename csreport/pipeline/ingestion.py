"""Report submission pipeline: validate, allocate a lookup code, persist."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

import structlog
from pydantic import ValidationError

from csreport.errors import (
    AllocationExhaustedError,
    AllocationFailedError,
    CodeAlreadyTakenError,
    ConstraintViolationError,
    DuplicateCodeError,
    InvalidInputError,
    MissingFieldError,
)
from csreport.models.report import ReportRecord, ReportSubmission, utc_now
from csreport.pipeline.allocation import CodeAllocator
from csreport.repositories.base import ReportRepository
from csreport.utils.codes import is_valid_lookup_code, new_record_id, normalize_lookup_code

logger = structlog.get_logger(__name__)


class SubmissionPipeline:
    """Turn a raw report payload into a persisted record with a unique lookup code."""

    def __init__(
        self,
        report_repo: ReportRepository,
        *,
        allocator: CodeAllocator | None = None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_record_id,
        insert_retries: int = 1,
    ):
        self.report_repo = report_repo
        self.allocator = allocator or CodeAllocator()
        self.clock = clock
        self.id_factory = id_factory
        self.insert_retries = insert_retries

    async def submit(self, payload: Mapping[str, Any]) -> str:
        """Persist a report and return its final lookup code."""
        submission = self.validate(payload)
        custom_code = normalize_lookup_code(submission.custom_lookup_code or "") or None
        if custom_code is not None and not is_valid_lookup_code(custom_code):
            raise InvalidInputError("Lookup code must be 6-12 letters or digits")

        fields = self._record_fields(submission, custom_code)
        log = logger.bind(component="ingestion", record_id=fields["id"], custom_code=bool(custom_code))

        retries_left = self.insert_retries
        while True:
            lookup_code = await self._allocate(custom_code)
            record = ReportRecord(lookup_code=lookup_code, **fields)
            try:
                await self.report_repo.insert(record)
            except ConstraintViolationError as exc:
                if custom_code is not None:
                    log.info("custom_code_lost_insert_race", lookup_code=lookup_code)
                    raise DuplicateCodeError(custom_code) from exc
                if retries_left <= 0:
                    log.error("generated_code_insert_retries_exhausted", lookup_code=lookup_code)
                    raise AllocationFailedError() from exc
                retries_left -= 1
                log.warning("generated_code_lost_insert_race", lookup_code=lookup_code)
                continue

            log.info("report_submitted", lookup_code=lookup_code)
            return lookup_code

    @staticmethod
    def validate(payload: Mapping[str, Any]) -> ReportSubmission:
        """Parse the payload and enforce required fields before any store access."""
        if not isinstance(payload, Mapping):
            raise InvalidInputError("Report payload must be a JSON object")
        try:
            submission = ReportSubmission.model_validate(dict(payload))
        except ValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            raise InvalidInputError(f"Invalid value for {location}: {first.get('msg', 'invalid')}") from exc

        missing = submission.first_missing_field()
        if missing is not None:
            raise MissingFieldError(missing)
        return submission

    async def _allocate(self, custom_code: str | None) -> str:
        try:
            return await self.allocator.allocate(custom_code, self.report_repo.exists)
        except CodeAlreadyTakenError as exc:
            raise DuplicateCodeError(exc.code) from exc
        except AllocationExhaustedError as exc:
            raise AllocationFailedError() from exc

    def _record_fields(self, submission: ReportSubmission, custom_code: str | None) -> dict[str, Any]:
        now = self.clock()
        fields = submission.model_dump(exclude={"id", "custom_lookup_code", "report_date"})
        for key, value in fields.items():
            if value == "":
                fields[key] = None
        fields.update(
            id=(submission.id or "").strip() or self.id_factory(),
            custom_lookup_code=custom_code,
            report_date=submission.report_date or now.date(),
            created_at=now,
            updated_at=now,
        )
        return fields
