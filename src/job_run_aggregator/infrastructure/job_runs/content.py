"""
Content helpers shared by the job run backings.
"""

from typing import Dict

from job_run_aggregator.domain.ports import IJobRun
from job_run_aggregator.domain.prowjob_codec import parse_prowjob
from job_run_aggregator.domain.value_objects import ProwJob
from job_run_aggregator.errors import ContentFetchError, MissingPathError


async def fetch_prowjob(job_run: IJobRun) -> ProwJob:
    if not job_run.prowjob_path:
        raise MissingPathError(
            "missing prowjob path",
            {"job_name": job_run.job_name, "job_run_id": job_run.job_run_id},
        )
    prowjob_bytes = await job_run.get_content(job_run.prowjob_path)
    return parse_prowjob(prowjob_bytes)


async def fetch_all_content(job_run: IJobRun) -> Dict[str, bytes]:
    """
    Read every path of a job run, one after another.

    Failures do not stop the loop; they are collected and raised together so
    the caller sees every path that could not be read.
    """
    content_map: Dict[str, bytes] = {}
    errors: Dict[str, Exception] = {}

    for path in job_run.all_paths():
        try:
            content_map[path] = await job_run.get_content(path)
        except Exception as e:
            errors[path] = e

    if errors:
        raise ContentFetchError(job_run.job_run_id, errors)
    return content_map
