"""
Job Run Scanner

Lists the bucket objects of one job and groups prowjob.json and junit files
into per-run RemoteJobRun records.
"""

import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from job_run_aggregator.domain.ports import IObjectStoragePort
from job_run_aggregator.domain.value_objects import (
    GCS_LOGS_ROOT,
    JUNIT_DIR_MARKER,
    JUNIT_EXTENSION,
    PROWJOB_FILENAME,
    ObjectAttrs,
)
from job_run_aggregator.errors import ListingError, StorageError
from job_run_aggregator.infrastructure.job_runs import RemoteJobRun
from job_run_aggregator.infrastructure.logging import get_logger

DEFAULT_RECENCY_WINDOW = timedelta(hours=24)

# logs/<job>/<run>/<file> is the shortest junit path we accept
_MIN_JUNIT_PATH_PARTS = 4
_JUNIT_RUN_ID_INDEX = 2


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def job_prefix(job_name: str) -> str:
    # trailing slash keeps jobs sharing a name prefix out of the listing
    return f"{GCS_LOGS_ROOT}/{job_name}/"


class JobRunScanner:
    """
    Discovers the recent runs of a job in a bucket.

    Only objects created inside the recency window are considered. An old
    object is skipped even when younger objects of the same run are kept, so
    runs straddling the window edge can come back without some junit files.
    """

    def __init__(
        self,
        storage: IObjectStoragePort,
        recency_window: timedelta = DEFAULT_RECENCY_WINDOW,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Args:
            storage: Bucket to list and read from
            recency_window: Maximum object age considered
            clock: Returns the current time (timezone aware)
        """
        self._storage = storage
        self._recency_window = recency_window
        self._clock = clock

    async def scan(self, job_name: str, start_after: Optional[str] = None) -> List[RemoteJobRun]:
        """
        Return the complete job runs of job_name, in first-seen order.

        Args:
            job_name: Job family to scan
            start_after: Optional key the listing starts strictly after

        Raises:
            ListingError: The listing broke; the complete runs found so far are
                on its partial_job_runs attribute
        """
        log = get_logger(job_name=job_name)
        started = time.monotonic()
        now = self._clock()

        job_runs: List[RemoteJobRun] = []
        run_id_to_job_run: Dict[str, RemoteJobRun] = {}

        def job_run_for(job_run_id: str) -> RemoteJobRun:
            job_run = run_id_to_job_run.get(job_run_id)
            if job_run is None:
                job_run = RemoteJobRun(self._storage, job_name, job_run_id)
                run_id_to_job_run[job_run_id] = job_run
                job_runs.append(job_run)
            return job_run

        listed = 0
        try:
            async for attrs in self._storage.list_objects(job_prefix(job_name), start_after=start_after):
                listed += 1
                if now - attrs.created > self._recency_window:
                    continue
                self._classify(attrs, job_run_for, log)
        except StorageError as e:
            partial = self._complete(job_runs, log)
            log.error("Listing failed", error=str(e), partial_count=len(partial))
            raise ListingError(f"failed to list job runs for {job_name}", partial, e) from e

        complete = self._complete(job_runs, log)
        log.info(
            "Scanned job runs",
            objects_listed=listed,
            job_runs=len(complete),
            elapsed_ms=round((time.monotonic() - started) * 1000, 1),
        )
        return complete

    def _classify(self, attrs: ObjectAttrs, job_run_for, log) -> None:
        name = attrs.name

        if name.endswith(PROWJOB_FILENAME):
            parent = name.rsplit("/", 1)[0] if "/" in name else ""
            job_run_id = parent.rsplit("/", 1)[-1]
            log.debug("Found prowjob", path=name)
            job_run_for(job_run_id).set_prowjob_path(name)

        elif name.endswith(JUNIT_EXTENSION) and JUNIT_DIR_MARKER in name:
            name_parts = name.split("/")
            if len(name_parts) < _MIN_JUNIT_PATH_PARTS:
                return
            log.debug("Found junit", path=name)
            job_run_for(name_parts[_JUNIT_RUN_ID_INDEX]).add_junit_paths(name)

    @staticmethod
    def _complete(job_runs: List[RemoteJobRun], log) -> List[RemoteJobRun]:
        """Drop runs without a prowjob.json."""
        complete = []
        for job_run in job_runs:
            if not job_run.prowjob_path:
                log.info("Removing job run without prowjob.json", job_run_id=job_run.job_run_id)
                continue
            complete.append(job_run)
        return complete
