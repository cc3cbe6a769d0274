"""FastAPI route modules."""

from csreport.api import admin, health, reports

__all__ = ["admin", "health", "reports"]
