"""
Job Run Port Interface

Defines the contract shared by every job run backing (remote bucket or local
filesystem). Callers program only against this interface.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List

from job_run_aggregator.domain.value_objects import ProwJob


class IJobRun(ABC):
    """
    One execution of a named CI job and the paths of its known content.

    Paths are always in the remote layout: logs/<job_name>/<job_run_id>/...
    """

    @property
    @abstractmethod
    def job_name(self) -> str:
        pass

    @property
    @abstractmethod
    def job_run_id(self) -> str:
        pass

    @property
    @abstractmethod
    def prowjob_path(self) -> str:
        """Path of prowjob.json, empty when not discovered yet."""
        pass

    @property
    @abstractmethod
    def junit_paths(self) -> List[str]:
        pass

    @abstractmethod
    def set_prowjob_path(self, prowjob_path: str) -> None:
        pass

    @abstractmethod
    def add_junit_paths(self, *junit_paths: str) -> None:
        pass

    @abstractmethod
    async def get_prowjob(self) -> ProwJob:
        """
        Fetch and decode the run's prowjob.

        Raises:
            MissingPathError: No prowjob path is set
            DescriptorParseError: The content could not be decoded
        """
        pass

    @abstractmethod
    async def get_content(self, path: str) -> bytes:
        """
        Return the content stored at path.

        Raises:
            MissingPathError: path is empty
        """
        pass

    @abstractmethod
    async def get_all_content(self) -> Dict[str, bytes]:
        """
        Return the content of the prowjob and every junit path.

        Raises:
            ContentFetchError: Naming every path that failed; no content is
                returned in that case
        """
        pass

    @abstractmethod
    async def write_cache(self, parent_dir: Path) -> None:
        """Persist all content below parent_dir, mirroring the remote layout."""
        pass

    def all_paths(self) -> List[str]:
        """The prowjob path followed by every junit path."""
        return [self.prowjob_path, *self.junit_paths]
