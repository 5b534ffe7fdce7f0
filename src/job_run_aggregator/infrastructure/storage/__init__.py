"""
Storage module

- S3ObjectStorage: S3 compatible bucket reader (AWS S3, MinIO, GCS XML API)
"""
from .s3_storage import S3ObjectStorage

__all__ = ["S3ObjectStorage"]
