"""
Application configuration

Loaded from environment variables (JOB_RUN_AGGREGATOR_*) and an optional
.env file using pydantic-settings.
"""
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="JOB_RUN_AGGREGATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============== Bucket ==============
    bucket: str = Field(default="origin-ci-test")
    # GCS exposes an S3-compatible XML API
    endpoint_url: str = Field(default="https://storage.googleapis.com")
    region: str = Field(default="auto")
    access_key_id: str = Field(default="")
    secret_access_key: str = Field(default="")

    # ============== Job ==============
    job_name: str = Field(default="periodic-ci-openshift-release-master-ci-4.9-e2e-gcp-upgrade")
    working_dir: str = Field(default="job-aggregator-working-dir")

    # ============== Scan ==============
    recency_window_hours: float = Field(default=24.0, gt=0)
    resume_from_cache: bool = Field(default=False)

    # ============== Runtime ==============
    timeout_seconds: float = Field(default=3600.0, gt=0)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["text", "json"] = Field(default="text")


@lru_cache
def get_settings() -> Settings:
    return Settings()
