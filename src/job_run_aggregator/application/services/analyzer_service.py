"""
Analyzer Service

Works against the local cache only: loads the cached runs of a job and
rebuilds the by-name index from their prowjobs.
"""

from pathlib import Path
from typing import List, Union

from job_run_aggregator.domain.value_objects import GCS_LOGS_ROOT
from job_run_aggregator.infrastructure.job_runs import FilesystemJobRun
from job_run_aggregator.infrastructure.logging import get_logger
from job_run_aggregator.infrastructure.persistence import write_name_index


class AnalyzerService:
    """Reads a job's cached runs from <working_dir>/logs/<job_name>."""

    def __init__(self, job_name: str, working_dir: Union[str, Path]):
        self._job_name = job_name
        self._working_dir = Path(working_dir)
        self._logger = get_logger(job_name=job_name)

    @property
    def job_dir(self) -> Path:
        return self._working_dir / GCS_LOGS_ROOT / self._job_name

    def load_job_runs(self) -> List[FilesystemJobRun]:
        """
        One FilesystemJobRun per cached run directory.

        Raises:
            FileNotFoundError: Nothing has been cached for the job
        """
        self._logger.info("Reading job runs", job_dir=str(self.job_dir))
        return [
            FilesystemJobRun.from_working_dir(self._working_dir, self._job_name, entry.name)
            for entry in sorted(self.job_dir.iterdir())
            if entry.is_dir()
        ]

    async def rebuild_name_index(self) -> List[Path]:
        """
        Write by-name entries for every cached run carrying the analysis label.

        Returns:
            The index files written
        """
        written = []
        for job_run in self.load_job_runs():
            prowjob = await job_run.get_prowjob()
            index_file = write_name_index(prowjob, self._working_dir, self._job_name)
            if index_file is not None:
                written.append(index_file)

        self._logger.info("Rebuilt name index", entries=len(written))
        return written
