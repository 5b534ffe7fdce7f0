"""
Application Layer

Orchestrates scanning, caching and cache analysis.
"""

from .services import AnalyzerService, CacheBuilderService, JobRunScanner

__all__ = ["AnalyzerService", "CacheBuilderService", "JobRunScanner"]
