"""
Domain Ports

Port interfaces defining contracts between layers.
"""

from .job_run_port import IJobRun
from .storage_port import IObjectStoragePort

__all__ = [
    "IJobRun",
    "IObjectStoragePort",
]
