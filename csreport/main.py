"""csreport FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from csreport.api import admin, health, reports
from csreport.config import get_settings
from csreport.logging_setup import setup_logging
from csreport.pipeline import CodeAllocator, ReportQueryService, SubmissionPipeline
from csreport.repositories import MongoReportRepository, create_mongo_client, ensure_indexes, get_database

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.logging_config_path)
    logger.info("csreport starting up...")
    mongo_client = None

    try:
        mongo_client = await create_mongo_client(settings.mongodb_uri)
        mongo_db = get_database(mongo_client, settings.mongodb_database)
        await ensure_indexes(mongo_db)
        app.state.mongo_client = mongo_client
        app.state.mongo_db = mongo_db
        app.state.settings = settings

        report_repo = MongoReportRepository(mongo_db)
        app.state.report_repo = report_repo
        app.state.submission_pipeline = SubmissionPipeline(
            report_repo,
            allocator=CodeAllocator(max_attempts=settings.max_code_attempts),
        )
        app.state.query_service = ReportQueryService(report_repo)

        logger.info("MongoDB connection established, report pipeline initialized.")
        logger.info("csreport ready.")
        yield
    finally:
        logger.info("csreport shutting down...")
        if mongo_client is not None:
            mongo_client.close()


app = FastAPI(
    title="csreport",
    description="Customer-visit report submission and lookup API",
    version=VERSION,
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(reports.router)
app.include_router(admin.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Service banner."""
    return {
        "success": True,
        "message": "CS Report API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": VERSION,
    }


@app.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "version": VERSION}
