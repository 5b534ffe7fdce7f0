"""
Cache Builder Service

Scans a job's recent runs in the bucket and writes each of them to the local
cache, one run at a time.
"""

from datetime import timedelta
from pathlib import Path
from typing import List, Optional, Union

from job_run_aggregator.application.services.job_run_scanner import (
    DEFAULT_RECENCY_WINDOW,
    JobRunScanner,
)
from job_run_aggregator.domain.ports import IJobRun, IObjectStoragePort
from job_run_aggregator.domain.value_objects import GCS_LOGS_ROOT
from job_run_aggregator.infrastructure.logging import get_logger


def _run_id_sort_key(job_run_id: str):
    # prow build IDs are numeric; longer means newer
    return (len(job_run_id), job_run_id)


def cached_high_water_mark(working_dir: Union[str, Path], job_name: str) -> Optional[str]:
    """
    Listing key of the newest run already cached for job_name.

    Returns:
        logs/<job_name>/<newest job run id>, or None when nothing is cached
    """
    job_dir = Path(working_dir) / GCS_LOGS_ROOT / job_name
    if not job_dir.is_dir():
        return None

    job_run_ids = [entry.name for entry in job_dir.iterdir() if entry.is_dir()]
    if not job_run_ids:
        return None
    newest = max(job_run_ids, key=_run_id_sort_key)
    return f"{GCS_LOGS_ROOT}/{job_name}/{newest}"


class CacheBuilderService:
    """
    Reads prowjob.json and junit files for one job and caches them to the
    local disk for use by other processes.
    """

    def __init__(
        self,
        storage: IObjectStoragePort,
        job_name: str,
        working_dir: Union[str, Path],
        recency_window: timedelta = DEFAULT_RECENCY_WINDOW,
        resume_from_cache: bool = False,
        scanner: Optional[JobRunScanner] = None,
    ):
        """
        Args:
            storage: Bucket holding the job's logs
            job_name: Job family to cache
            working_dir: Cache root
            recency_window: Maximum object age considered by the scan
            resume_from_cache: Start listing at the newest run already cached.
                Runs older than that are not revisited.
            scanner: Scanner override, built from storage and recency_window by default
        """
        self._job_name = job_name
        self._working_dir = Path(working_dir)
        self._resume_from_cache = resume_from_cache
        self._scanner = scanner or JobRunScanner(storage, recency_window=recency_window)
        self._logger = get_logger(job_name=job_name)

    async def read_job_runs(self) -> List[IJobRun]:
        start_after = None
        if self._resume_from_cache:
            start_after = cached_high_water_mark(self._working_dir, self._job_name)
            self._logger.info("Resuming from cache", start_after=start_after)
        return await self._scanner.scan(self._job_name, start_after=start_after)

    async def run(self) -> List[IJobRun]:
        """
        Cache every complete recent run of the job.

        Errors propagate on the first failing run; nothing is retried.

        Returns:
            The job runs that were cached
        """
        self._logger.info("Caching job runs", working_dir=str(self._working_dir))
        job_runs = await self.read_job_runs()

        for job_run in job_runs:
            await job_run.write_cache(self._working_dir)

        self._logger.info("Cached job runs", job_runs=len(job_runs))
        return job_runs
