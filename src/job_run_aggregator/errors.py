"""
Job Run Aggregator Errors

Error types raised while scanning, fetching, parsing and caching job runs.
"""

from typing import Any, Dict, List, Optional


class JobRunAggregatorError(Exception):
    """Base error with a message and optional structured details."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary format."""
        error_dict = {"error": type(self).__name__, "message": self.message}
        error_dict.update(self.details)
        return error_dict


class StorageError(JobRunAggregatorError):
    """Remote object store operation failed."""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.original_error = original_error
        super().__init__(message, details)


class ListingError(JobRunAggregatorError):
    """
    Remote enumeration broke mid-scan.

    The complete job runs gathered before the failure are kept on
    ``partial_job_runs`` so callers can decide whether to use them.
    """

    def __init__(self, message: str, partial_job_runs: List[Any], original_error: Exception):
        self.partial_job_runs = partial_job_runs
        self.original_error = original_error
        super().__init__(
            message,
            {"partial_count": len(partial_job_runs), "cause": str(original_error)},
        )


class MissingPathError(JobRunAggregatorError):
    """A content accessor was called without a path."""


class ContentFetchError(JobRunAggregatorError):
    """One or more content paths of a job run could not be read."""

    def __init__(self, job_run_id: str, errors: Dict[str, Exception]):
        self.job_run_id = job_run_id
        self.errors = dict(errors)
        failures = "; ".join(f"{path}: {err}" for path, err in self.errors.items())
        super().__init__(
            f"failed to fetch {len(self.errors)} path(s) for job run {job_run_id}: {failures}",
            {"job_run_id": job_run_id, "failed_paths": list(self.errors)},
        )

    @property
    def failed_paths(self) -> List[str]:
        return list(self.errors)


class DescriptorParseError(JobRunAggregatorError):
    """Descriptor bytes could not be decoded into a prowjob document."""
