"""Shared data models for csreport."""

from csreport.models.report import REQUIRED_FIELDS, ReportRecord, ReportSubmission, utc_now

__all__ = [
    "REQUIRED_FIELDS",
    "ReportRecord",
    "ReportSubmission",
    "utc_now",
]
