"""
S3 object storage

Read-only bucket access through boto3. Works against AWS S3, MinIO and the
S3-compatible XML API of Google Cloud Storage, where the CI logs live.
"""
import asyncio
from datetime import timezone
from typing import AsyncIterator, Optional

import boto3
from botocore import UNSIGNED
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from job_run_aggregator.domain.ports import IObjectStoragePort
from job_run_aggregator.domain.value_objects import ObjectAttrs
from job_run_aggregator.errors import StorageError
from job_run_aggregator.infrastructure.logging import get_logger
from job_run_aggregator.settings import Settings, get_settings

logger = get_logger()


# upper bound for a single connect or read; the command deadline bounds the rest
MAX_REQUEST_TIMEOUT_SECONDS = 60.0


def client_config(timeout: float, anonymous: bool) -> Config:
    """
    botocore client config with per-request timeouts.

    The command deadline cancels the awaiting coroutine but not the worker
    thread running the boto3 call, so each request is bounded as well.
    """
    request_timeout = min(timeout, MAX_REQUEST_TIMEOUT_SECONDS)
    options = {
        "connect_timeout": request_timeout,
        "read_timeout": request_timeout,
        "retries": {"max_attempts": 3, "mode": "standard"},
    }
    if anonymous:
        options["signature_version"] = UNSIGNED
    return Config(**options)


class S3ObjectStorage(IObjectStoragePort):
    """
    S3 compatible bucket reader.

    Anonymous (unsigned) requests are used when no access key is configured,
    which is enough for public CI buckets.
    """

    def __init__(self, settings: Optional[Settings] = None, request_timeout: Optional[float] = None):
        """
        Initialize the S3 client.

        Reads from settings:
        - endpoint_url: S3 endpoint URL
        - access_key_id / secret_access_key: credentials, empty for anonymous access
        - region: region name
        - bucket: bucket name
        - timeout_seconds: request timeout when request_timeout is not given
        """
        settings = settings or get_settings()
        timeout = request_timeout if request_timeout is not None else settings.timeout_seconds
        config = client_config(timeout, anonymous=not settings.access_key_id)

        if settings.access_key_id:
            self._client = boto3.client(
                "s3",
                endpoint_url=settings.endpoint_url or None,
                aws_access_key_id=settings.access_key_id,
                aws_secret_access_key=settings.secret_access_key,
                region_name=settings.region,
                config=config,
            )
        else:
            self._client = boto3.client(
                "s3",
                endpoint_url=settings.endpoint_url or None,
                region_name=settings.region,
                config=config,
            )
        self._bucket = settings.bucket

    @property
    def bucket(self) -> str:
        return self._bucket

    async def list_objects(
        self,
        prefix: str,
        start_after: Optional[str] = None,
    ) -> AsyncIterator[ObjectAttrs]:
        """
        List objects under prefix, one page per worker thread call.

        Only the key and last-modified time of each object are surfaced and
        the owner is never requested.
        """
        params = {"Bucket": self._bucket, "Prefix": prefix, "FetchOwner": False}
        if start_after:
            params["StartAfter"] = start_after

        try:
            paginator = self._client.get_paginator("list_objects_v2")
            pages = iter(paginator.paginate(**params))
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"failed to list {prefix}", original_error=e) from e

        page_count = 0
        while True:
            try:
                # next() with a default so StopIteration never crosses the thread boundary
                page = await asyncio.to_thread(next, pages, None)
            except (ClientError, BotoCoreError) as e:
                raise StorageError(
                    f"failed to list {prefix}",
                    original_error=e,
                    details={"pages_read": page_count},
                ) from e
            if page is None:
                break
            page_count += 1

            for obj in page.get("Contents", []):
                created = obj["LastModified"]
                if created.tzinfo is None:
                    created = created.replace(tzinfo=timezone.utc)
                yield ObjectAttrs(name=obj["Key"], created=created)

        logger.debug("Listed objects", prefix=prefix, pages=page_count, bucket=self._bucket)

    async def read_object(self, key: str) -> bytes:
        """Download one object body."""

        def _read() -> bytes:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            body = response["Body"]
            try:
                return body.read()
            finally:
                body.close()

        try:
            content = await asyncio.to_thread(_read)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"failed to read {key}", original_error=e) from e

        logger.debug("Downloaded object", key=key, size=len(content))
        return content
