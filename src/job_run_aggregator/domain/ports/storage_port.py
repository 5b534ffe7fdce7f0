"""
Object Storage Port Interface

Defines the read-only contract the scanner and remote job runs need from a
bucket. This is an output port - implemented by infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator, Optional

from job_run_aggregator.domain.value_objects import ObjectAttrs


class IObjectStoragePort(ABC):
    """
    Port interface for bucket listing and object reads.

    Implementations must request only name and creation time when listing.
    """

    @abstractmethod
    def list_objects(
        self,
        prefix: str,
        start_after: Optional[str] = None,
    ) -> AsyncIterator[ObjectAttrs]:
        """
        Iterate over the objects whose key starts with prefix.

        Args:
            prefix: Key prefix to list
            start_after: Only keys strictly greater than this are returned

        Returns:
            Async iterator of ObjectAttrs

        Raises:
            StorageError: Listing failed; objects yielded so far remain valid
        """
        pass

    @abstractmethod
    async def read_object(self, key: str) -> bytes:
        """
        Read the full body of one object.

        Args:
            key: Object key

        Returns:
            Object content

        Raises:
            StorageError: Object could not be read
        """
        pass
