"""
Application Services

Service classes for the scan-and-cache and analysis use cases.
"""

from .analyzer_service import AnalyzerService
from .cache_builder_service import CacheBuilderService, cached_high_water_mark
from .job_run_scanner import DEFAULT_RECENCY_WINDOW, JobRunScanner

__all__ = [
    "AnalyzerService",
    "CacheBuilderService",
    "JobRunScanner",
    "DEFAULT_RECENCY_WINDOW",
    "cached_high_water_mark",
]
