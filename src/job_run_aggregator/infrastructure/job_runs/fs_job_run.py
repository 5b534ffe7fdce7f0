"""
Filesystem-backed job run.

Represents a job run that is already cached on local disk, using the same
remote-layout paths as a bucket-backed run so analysis code can treat both
alike.
"""

import asyncio
from pathlib import Path
from typing import Dict, List, Union

from job_run_aggregator.domain.ports import IJobRun
from job_run_aggregator.domain.value_objects import (
    GCS_LOGS_ROOT,
    JUNIT_DIR_MARKER,
    JUNIT_EXTENSION,
    PROWJOB_FILENAME,
    ProwJob,
)
from job_run_aggregator.errors import MissingPathError
from job_run_aggregator.infrastructure.job_runs.content import fetch_all_content, fetch_prowjob
from job_run_aggregator.infrastructure.persistence.cache_writer import write_job_run_cache


def _to_remote_path(local_file: Path, job_name: str, job_run_id: str) -> str:
    """
    Rebuild logs/<job>/<run>/... from a local file path.

    The last path segment equal to the run ID anchors the remote part.
    """
    parts = local_file.parts
    anchor = len(parts) - 1
    while anchor >= 0 and parts[anchor] != job_run_id:
        anchor -= 1
    return "/".join([GCS_LOGS_ROOT, job_name, *parts[anchor:]])


def _is_junit_path(remote_path: str) -> bool:
    return remote_path.endswith(JUNIT_EXTENSION) and JUNIT_DIR_MARKER in remote_path


class FilesystemJobRun(IJobRun):
    """
    A job run read from <working_dir>/logs/<job_name>/<job_run_id>.

    Content is not memoized: the filesystem already is the cache.
    """

    def __init__(self, working_dir: Union[str, Path], job_name: str, job_run_id: str):
        self._working_dir = Path(working_dir)
        self._job_name = job_name
        self._job_run_id = job_run_id
        self._prowjob_path = "/".join([GCS_LOGS_ROOT, job_name, job_run_id, PROWJOB_FILENAME])
        self._junit_paths: List[str] = []

    @classmethod
    def from_working_dir(
        cls, working_dir: Union[str, Path], job_name: str, job_run_id: str
    ) -> "FilesystemJobRun":
        """
        Build a job run by walking its cached directory for junit files.

        Raises:
            FileNotFoundError: The job run directory does not exist
        """
        job_run = cls(working_dir, job_name, job_run_id)
        job_run_dir = job_run.local_dir
        if not job_run_dir.is_dir():
            raise FileNotFoundError(f"job run directory not found: {job_run_dir}")

        for local_file in sorted(job_run_dir.rglob("*")):
            if not local_file.is_file():
                continue
            # classify on the remote layout, never on the working dir
            remote_path = _to_remote_path(local_file, job_name, job_run_id)
            if _is_junit_path(remote_path):
                job_run.add_junit_paths(remote_path)
        return job_run

    def __repr__(self) -> str:
        return f"FilesystemJobRun(job_name={self._job_name!r}, job_run_id={self._job_run_id!r})"

    @property
    def local_dir(self) -> Path:
        return self._working_dir / GCS_LOGS_ROOT / self._job_name / self._job_run_id

    @property
    def job_name(self) -> str:
        return self._job_name

    @property
    def job_run_id(self) -> str:
        return self._job_run_id

    @property
    def prowjob_path(self) -> str:
        return self._prowjob_path

    @property
    def junit_paths(self) -> List[str]:
        return list(self._junit_paths)

    def set_prowjob_path(self, prowjob_path: str) -> None:
        self._prowjob_path = prowjob_path

    def add_junit_paths(self, *junit_paths: str) -> None:
        self._junit_paths.extend(junit_paths)

    async def get_prowjob(self) -> ProwJob:
        return await fetch_prowjob(self)

    async def get_content(self, path: str) -> bytes:
        if not path:
            raise MissingPathError("missing path", {"job_run_id": self._job_run_id})
        return await asyncio.to_thread((self._working_dir / path).read_bytes)

    async def get_all_content(self) -> Dict[str, bytes]:
        return await fetch_all_content(self)

    async def write_cache(self, parent_dir: Union[str, Path]) -> None:
        await write_job_run_cache(self, parent_dir)
