"""
Job Run Aggregator Domain Layer

Value objects, the prowjob codec and the port interfaces.
"""

from .prowjob_codec import parse_prowjob, serialize_prowjob
from .value_objects import ObjectAttrs, ProwJob

__all__ = [
    "ObjectAttrs",
    "ProwJob",
    "parse_prowjob",
    "serialize_prowjob",
]
