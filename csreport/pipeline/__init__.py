"""Backend report handling: code allocation, ingestion, and lookup."""

from csreport.pipeline.allocation import CodeAllocator
from csreport.pipeline.ingestion import SubmissionPipeline
from csreport.pipeline.query import ReportQueryService

__all__ = ["CodeAllocator", "ReportQueryService", "SubmissionPipeline"]
