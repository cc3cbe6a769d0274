"""Logging configuration: stdlib handlers from YAML, structlog JSON events on top."""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

import structlog
import yaml


def setup_logging(config_path: str | Path = "config/logging.yaml") -> None:
    """Load logging configuration from YAML, then enable structured events."""
    log_config_path = Path(config_path)
    if log_config_path.exists():
        with open(log_config_path) as f:
            config = yaml.safe_load(f)
        logging.config.dictConfig(config)
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
    configure_structured_logging()


def configure_structured_logging() -> None:
    """Render structlog events as JSON through stdlib logging, with contextvars merged."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
