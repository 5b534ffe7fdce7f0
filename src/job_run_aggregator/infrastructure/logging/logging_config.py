"""
Structured logging configuration for job-run-aggregator.

The aggregator is run by hand or from a CI step whose log is read by a
person, so records are rendered as plain key=value console lines by default.
Colors are off because CI log viewers show the escape codes verbatim.
Set log_format to "json" when the output is shipped to a log collector.

Logs go to stderr. Bound context carries the job name and job run ID of the
record being processed.
"""

import structlog
import logging
import sys
from typing import Any, List

LOG_FORMATS = ("text", "json")


def _renderer(log_format: str):
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(log_level: str = "INFO", log_format: str = "text") -> None:
    """
    Configure structlog.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: "text" (default) for console lines, "json" for one JSON object per line

    Raises:
        ValueError: Unknown log_format
    """
    if log_format not in LOG_FORMATS:
        raise ValueError(f"unknown log format {log_format!r}, expected one of {LOG_FORMATS}")

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    processors: List[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _renderer(log_format),
    ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(job_name: str = None, job_run_id: str = None) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance with optional context.

    Args:
        job_name: Job family being processed
        job_run_id: Job run identifier for tracing

    Returns:
        Configured logger instance
    """
    context: dict[str, Any] = {}
    if job_name:
        context["job_name"] = job_name
    if job_run_id:
        context["job_run_id"] = job_run_id

    return structlog.get_logger(**context)
