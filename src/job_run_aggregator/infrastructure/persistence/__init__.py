"""
Persistence Infrastructure

Local cache writing.
"""

from .cache_writer import (
    CreatedDirectories,
    remove_created_dirs_on_failure,
    write_job_run_cache,
    write_name_index,
)

__all__ = [
    "CreatedDirectories",
    "remove_created_dirs_on_failure",
    "write_job_run_cache",
    "write_name_index",
]
