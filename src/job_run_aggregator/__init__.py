"""
Job Run Aggregator

Discovers CI job run artifacts in a bucket and materializes them into a local
cache.
"""

__version__ = "0.1.0"

from .domain.value_objects import ObjectAttrs, ProwJob
from .domain.prowjob_codec import parse_prowjob, serialize_prowjob
from .domain.ports import IJobRun, IObjectStoragePort
from .errors import (
    JobRunAggregatorError,
    StorageError,
    ListingError,
    MissingPathError,
    ContentFetchError,
    DescriptorParseError,
)

__all__ = [
    "ObjectAttrs",
    "ProwJob",
    "parse_prowjob",
    "serialize_prowjob",
    "IJobRun",
    "IObjectStoragePort",
    "JobRunAggregatorError",
    "StorageError",
    "ListingError",
    "MissingPathError",
    "ContentFetchError",
    "DescriptorParseError",
]
