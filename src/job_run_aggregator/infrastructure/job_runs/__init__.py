"""
Job run backings: bucket objects or a local cache directory.
"""

from .fs_job_run import FilesystemJobRun
from .remote_job_run import RemoteJobRun

__all__ = ["FilesystemJobRun", "RemoteJobRun"]
