"""
Job Run Value Objects

Immutable value objects describing listed bucket objects and prowjob documents.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

# Remote layout: logs/<job_name>/<job_run_id>/...
GCS_LOGS_ROOT = "logs"
PROWJOB_FILENAME = "prowjob.json"
NORMALIZED_PROWJOB_FILENAME = "prowjob.yaml"
JUNIT_EXTENSION = ".xml"
JUNIT_DIR_MARKER = "/junit"
BY_NAME_DIR = "by-name"

ANALYSIS_LABEL = "release.openshift.io/analysis"
MANAGED_FIELDS_KEY = "managedFields"


@dataclass(frozen=True)
class ObjectAttrs:
    """
    Metadata-only projection of one listed bucket object.

    Attributes:
        name: Full object key
        created: Creation time (timezone aware)
    """

    name: str
    created: datetime


@dataclass
class ProwJob:
    """
    A decoded prowjob descriptor.

    The document is kept as a plain mapping; only the fields the cache
    needs are exposed as properties.
    """

    document: Dict[str, Any] = field(default_factory=dict)

    @property
    def metadata(self) -> Dict[str, Any]:
        return self.document.get("metadata") or {}

    @property
    def name(self) -> str:
        return self.metadata.get("name") or ""

    @property
    def labels(self) -> Dict[str, str]:
        return dict(self.metadata.get("labels") or {})

    @property
    def analysis_label(self) -> Optional[str]:
        """Value of the analysis label, or None when the run is not indexed by name."""
        return self.labels.get(ANALYSIS_LABEL)

    def strip_managed_fields(self) -> None:
        metadata = self.document.get("metadata")
        if isinstance(metadata, dict):
            metadata.pop(MANAGED_FIELDS_KEY, None)
