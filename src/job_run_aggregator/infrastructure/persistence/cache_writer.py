"""
Cache writer for job run content.

Mirrors a job run's remote files below a local directory, adds the normalized
prowjob.yaml next to every prowjob.json, and maintains the by-name index for
runs carrying the analysis label.
"""

import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

from job_run_aggregator.domain.ports import IJobRun
from job_run_aggregator.domain.prowjob_codec import serialize_prowjob
from job_run_aggregator.domain.value_objects import (
    BY_NAME_DIR,
    NORMALIZED_PROWJOB_FILENAME,
    PROWJOB_FILENAME,
    ProwJob,
)
from job_run_aggregator.infrastructure.logging import get_logger

logger = get_logger()


class CreatedDirectories:
    """
    Tracks the top-most directories a write is about to create.

    A directory is claimed only if it does not exist yet and is not already
    below a claimed one, so removing the claimed set undoes every directory
    the write created without touching anything that was there before.
    """

    def __init__(self) -> None:
        self._created: List[Path] = []

    @property
    def paths(self) -> List[Path]:
        return list(self._created)

    def claim(self, root: Path, relative: Union[str, Path] = "") -> Optional[Path]:
        """
        Record the first missing directory along root/relative.

        Must be called before the directories are created.
        """
        candidate = Path(root)
        chain = [candidate]
        for part in Path(relative).parts:
            candidate = candidate / part
            chain.append(candidate)

        for directory in chain:
            if directory in self._created:
                return None
            if not directory.exists():
                self._created.append(directory)
                return directory
        return None

    def remove_all(self) -> None:
        for directory in reversed(self._created):
            shutil.rmtree(directory, ignore_errors=True)


@contextmanager
def remove_created_dirs_on_failure() -> Iterator[CreatedDirectories]:
    """
    Yield a CreatedDirectories tracker and remove what it claimed if the
    block does not complete.

    Removal is best effort; the block's own exception always propagates.
    """
    created_dirs = CreatedDirectories()
    succeeded = False
    try:
        yield created_dirs
        succeeded = True
    finally:
        if not succeeded and created_dirs.paths:
            logger.warning(
                "Removing partially written cache directories",
                directories=[str(d) for d in created_dirs.paths],
            )
            created_dirs.remove_all()


def is_safe_path_segment(value: Optional[str]) -> bool:
    """True when value can be used as exactly one directory name."""
    if not isinstance(value, str) or value in ("", ".", ".."):
        return False
    if "/" in value or os.sep in value:
        return False
    return not (os.altsep and os.altsep in value)


def name_index_dir(parent_dir: Path, job_name: str, prowjob: ProwJob) -> Path:
    """by-name/<job_name>/<analysis label>/<prowjob name> below parent_dir."""
    return Path(parent_dir) / BY_NAME_DIR / job_name / prowjob.analysis_label / prowjob.name


def write_name_index(
    prowjob: ProwJob,
    parent_dir: Path,
    job_name: str,
    created_dirs: Optional[CreatedDirectories] = None,
) -> Optional[Path]:
    """
    Write the normalized prowjob into the by-name index.

    The label value and the prowjob name come from the descriptor and each
    becomes one directory level, so values that are empty, "." or "..", or
    that contain a path separator are refused with a warning.

    Returns:
        The written file, or None when the prowjob has no analysis label or
        cannot be indexed
    """
    if prowjob.analysis_label is None:
        return None

    for field, value in (("analysis_label", prowjob.analysis_label), ("name", prowjob.name)):
        if not is_safe_path_segment(value):
            logger.warning(
                "Skipping by-name index for unsafe path segment",
                job_name=job_name,
                field=field,
                value=value,
            )
            return None

    parent_dir = Path(parent_dir)
    target_dir = name_index_dir(parent_dir, job_name, prowjob)
    if created_dirs is not None:
        created_dirs.claim(parent_dir, target_dir.relative_to(parent_dir))
    target_dir.mkdir(parents=True, exist_ok=True)

    target_file = target_dir / NORMALIZED_PROWJOB_FILENAME
    target_file.write_bytes(serialize_prowjob(prowjob))
    return target_file


async def write_job_run_cache(job_run: IJobRun, parent_dir: Union[str, Path]) -> None:
    """
    Persist every path of a job run to parent_dir/<path>.

    All content is fetched before the first file is written. If anything
    fails, directories created by this call are removed and the original
    error is raised unchanged.

    Args:
        job_run: Job run to cache
        parent_dir: Cache root; files land at parent_dir/logs/<job>/<run>/...

    Raises:
        MissingPathError, ContentFetchError, DescriptorParseError: fetch phase
        OSError: write phase
    """
    parent_dir = Path(parent_dir)
    log = get_logger(job_name=job_run.job_name, job_run_id=job_run.job_run_id)

    with remove_created_dirs_on_failure() as created_dirs:
        prowjob = await job_run.get_prowjob()
        prowjob_bytes = serialize_prowjob(prowjob)
        content_map = await job_run.get_all_content()

        for path, content in content_map.items():
            target_file = parent_dir / path
            created_dirs.claim(parent_dir, Path(path).parent)
            target_file.parent.mkdir(parents=True, exist_ok=True)
            target_file.write_bytes(content)

            if path.endswith(PROWJOB_FILENAME):
                normalized_file = target_file.parent / NORMALIZED_PROWJOB_FILENAME
                normalized_file.write_bytes(prowjob_bytes)

        index_file = write_name_index(prowjob, parent_dir, job_run.job_name, created_dirs)

    log.info(
        "Cached job run",
        files=len(content_map),
        parent_dir=str(parent_dir),
        name_index=str(index_file) if index_file else None,
    )
