"""
Test helpers for job-run-aggregator tests.

Provides an in-memory bucket, sample prowjobs and a fixed clock.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Dict, List, Optional, Set

from job_run_aggregator.domain.ports import IObjectStoragePort
from job_run_aggregator.domain.value_objects import ObjectAttrs
from job_run_aggregator.errors import StorageError

NOW = datetime(2021, 7, 20, 12, 0, 0, tzinfo=timezone.utc)


class FakeObjectStorage(IObjectStoragePort):
    """In-memory bucket recording every read."""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.created: Dict[str, datetime] = {}
        self.reads: List[str] = []
        self.failing_keys: Set[str] = set()
        self.fail_listing_after: Optional[int] = None
        self.list_calls: List[dict] = []

    def add(self, key: str, content: bytes = b"", age: timedelta = timedelta(hours=1)) -> None:
        self.objects[key] = content
        self.created[key] = NOW - age

    async def list_objects(self, prefix: str, start_after: Optional[str] = None) -> AsyncIterator[ObjectAttrs]:
        self.list_calls.append({"prefix": prefix, "start_after": start_after})
        yielded = 0
        for key in self.objects:
            if not key.startswith(prefix):
                continue
            if start_after and key <= start_after:
                continue
            if self.fail_listing_after is not None and yielded >= self.fail_listing_after:
                raise StorageError("listing broke", original_error=RuntimeError("connection reset"))
            yielded += 1
            yield ObjectAttrs(name=key, created=self.created[key])

    async def read_object(self, key: str) -> bytes:
        self.reads.append(key)
        if key in self.failing_keys or key not in self.objects:
            raise StorageError(f"failed to read {key}", original_error=KeyError(key))
        return self.objects[key]


def make_prowjob(
    name: str = "e2e-upgrade-123",
    labels: Optional[Dict[str, str]] = None,
    managed_fields: bool = True,
) -> dict:
    document = {
        "kind": "ProwJob",
        "apiVersion": "prow.k8s.io/v1",
        "metadata": {
            "name": name,
            "namespace": "ci",
            "labels": labels if labels is not None else {"prow.k8s.io/build-id": "1416792177459073024"},
        },
        "spec": {"job": "periodic-ci-e2e", "type": "periodic"},
        "status": {"state": "success", "startTime": "2021-07-20T10:00:00Z"},
    }
    if managed_fields:
        document["metadata"]["managedFields"] = [
            {"manager": "plank", "operation": "Update", "apiVersion": "prow.k8s.io/v1"}
        ]
    return document


def prowjob_json(**kwargs) -> bytes:
    return json.dumps(make_prowjob(**kwargs)).encode("utf-8")
