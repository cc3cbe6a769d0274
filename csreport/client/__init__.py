"""Client-side access to the report API."""

from csreport.client.api import QueryResult, ReportServiceClient, SubmitResult
from csreport.client.transport import API_ENDPOINTS, ResilientTransport, TransportRequest, TransportStage

__all__ = [
    "API_ENDPOINTS",
    "QueryResult",
    "ReportServiceClient",
    "ResilientTransport",
    "SubmitResult",
    "TransportRequest",
    "TransportStage",
]
