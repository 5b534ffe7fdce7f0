"""
Bucket-backed job run.

Content is read from the object store on first use and memoized for the
lifetime of the job run.
"""

from pathlib import Path
from typing import Dict, List, Union

from job_run_aggregator.domain.ports import IJobRun, IObjectStoragePort
from job_run_aggregator.domain.value_objects import ProwJob
from job_run_aggregator.errors import MissingPathError
from job_run_aggregator.infrastructure.job_runs.content import fetch_all_content, fetch_prowjob
from job_run_aggregator.infrastructure.logging import get_logger
from job_run_aggregator.infrastructure.persistence.cache_writer import write_job_run_cache


class RemoteJobRun(IJobRun):
    """
    A job run whose files live in a bucket.

    The storage handle is only read from and may be shared between job runs;
    the content memo belongs to this instance alone.
    """

    def __init__(self, storage: IObjectStoragePort, job_name: str, job_run_id: str):
        self._storage = storage
        self._job_name = job_name
        self._job_run_id = job_run_id
        self._prowjob_path = ""
        self._junit_paths: List[str] = []
        self._path_to_content: Dict[str, bytes] = {}
        self._logger = get_logger(job_name=job_name, job_run_id=job_run_id)

    def __repr__(self) -> str:
        return f"RemoteJobRun(job_name={self._job_name!r}, job_run_id={self._job_run_id!r})"

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
        if path in self._path_to_content:
            return self._path_to_content[path]

        content = await self._storage.read_object(path)
        self._path_to_content[path] = content
        self._logger.debug("Fetched content", path=path, size=len(content))
        return content

    async def get_all_content(self) -> Dict[str, bytes]:
        content_map = await fetch_all_content(self)
        self._logger.info("Retrieved all content", paths=len(content_map))
        return content_map

    async def write_cache(self, parent_dir: Union[str, Path]) -> None:
        await write_job_run_cache(self, parent_dir)
