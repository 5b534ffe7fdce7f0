#!/usr/bin/env python3
"""
Job Run Aggregator CLI - cache CI job runs locally and index them
"""

import argparse
import asyncio
import sys
from datetime import timedelta
from typing import Optional, Sequence

from job_run_aggregator.application.services import AnalyzerService, CacheBuilderService
from job_run_aggregator.errors import JobRunAggregatorError
from job_run_aggregator.infrastructure.logging import configure_logging, get_logger
from job_run_aggregator.infrastructure.storage import S3ObjectStorage
from job_run_aggregator.settings import Settings, get_settings


def parse_args(argv: Optional[Sequence[str]] = None, settings: Optional[Settings] = None):
    """Parse command line arguments, defaulting to the environment settings"""
    settings = settings or get_settings()

    parser = argparse.ArgumentParser(
        prog="job-run-aggregator",
        description="Cache CI job run artifacts from a bucket and index them locally",
    )
    parser.add_argument(
        "command",
        choices=["cache", "analyze"],
        help="cache: fetch recent runs from the bucket; analyze: rebuild the by-name index from the cache",
    )
    parser.add_argument(
        "--job",
        default=settings.job_name,
        help="The name of the job to inspect.",
    )
    parser.add_argument(
        "--working-dir",
        default=settings.working_dir,
        help="The directory to store caches, output, and the like.",
    )
    parser.add_argument(
        "--window-hours",
        type=float,
        default=settings.recency_window_hours,
        help=f"Only consider objects created within this many hours (default: {settings.recency_window_hours})",
    )
    parser.add_argument(
        "--resume",
        action="store_true",
        default=settings.resume_from_cache,
        help="Start listing after the newest run already in the cache",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.timeout_seconds,
        help=f"Deadline for the whole command in seconds (default: {settings.timeout_seconds})",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


async def run_command(args, settings: Settings) -> None:
    if args.command == "cache":
        service = CacheBuilderService(
            storage=S3ObjectStorage(settings, request_timeout=args.timeout),
            job_name=args.job,
            working_dir=args.working_dir,
            recency_window=timedelta(hours=args.window_hours),
            resume_from_cache=args.resume,
        )
        await service.run()
    else:
        await AnalyzerService(args.job, args.working_dir).rebuild_name_index()


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = get_settings()
    args = parse_args(argv, settings)
    configure_logging(args.log_level, settings.log_format)
    logger = get_logger(job_name=args.job)

    try:
        asyncio.run(asyncio.wait_for(run_command(args, settings), timeout=args.timeout))
    except asyncio.TimeoutError:
        logger.error("Command timed out", command=args.command, timeout=args.timeout)
        return 1
    except JobRunAggregatorError as e:
        logger.error("Command failed", command=args.command, **e.to_dict())
        return 1
    except OSError as e:
        logger.error("Command failed", command=args.command, error=str(e))
        return 1
    return 0


def entry_point():
    sys.exit(main())


if __name__ == "__main__":
    entry_point()
