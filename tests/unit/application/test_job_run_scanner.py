"""
Unit tests for the job run scanner.
"""

import itertools
from datetime import timedelta

import pytest

from job_run_aggregator.application.services import JobRunScanner
from job_run_aggregator.errors import ListingError

from helpers import NOW, FakeObjectStorage


@pytest.fixture
def scanner(storage, clock):
    return JobRunScanner(storage, recency_window=timedelta(hours=24), clock=clock)


class TestJobRunScanner:

    @pytest.mark.asyncio
    async def test_end_to_end_recency_window(self, storage, scanner):
        storage.add("logs/jobA/run1/prowjob.json", age=timedelta(hours=1))
        storage.add("logs/jobA/run1/artifacts/junit_x.xml", age=timedelta(hours=1))
        storage.add("logs/jobA/run2/prowjob.json", age=timedelta(hours=48))

        job_runs = await scanner.scan("jobA")

        assert [j.job_run_id for j in job_runs] == ["run1"]
        assert job_runs[0].prowjob_path == "logs/jobA/run1/prowjob.json"
        assert job_runs[0].junit_paths == ["logs/jobA/run1/artifacts/junit_x.xml"]
        assert job_runs[0].job_name == "jobA"

    @pytest.mark.asyncio
    async def test_grouping_is_independent_of_listing_order(self, clock):
        keys = [
            "logs/jobA/run1/prowjob.json",
            "logs/jobA/run1/artifacts/e2e/junit/junit_1.xml",
            "logs/jobA/run1/artifacts/e2e/junit/junit_2.xml",
        ]
        for ordering in itertools.permutations(keys):
            storage = FakeObjectStorage()
            for key in ordering:
                storage.add(key)

            job_runs = await JobRunScanner(storage, clock=clock).scan("jobA")

            assert len(job_runs) == 1
            assert job_runs[0].prowjob_path == keys[0]
            assert sorted(job_runs[0].junit_paths) == sorted(keys[1:])

    @pytest.mark.asyncio
    async def test_runs_without_prowjob_are_dropped(self, storage, scanner):
        storage.add("logs/jobA/run1/prowjob.json")
        storage.add("logs/jobA/run2/artifacts/junit/junit.xml")

        job_runs = await scanner.scan("jobA")

        assert [j.job_run_id for j in job_runs] == ["run1"]

    @pytest.mark.asyncio
    async def test_old_artifact_skipped_even_when_run_is_recent(self, storage, scanner):
        storage.add("logs/jobA/run1/prowjob.json", age=timedelta(hours=2))
        storage.add("logs/jobA/run1/junit/old.xml", age=timedelta(hours=30))
        storage.add("logs/jobA/run1/junit/new.xml", age=timedelta(hours=2))

        job_runs = await scanner.scan("jobA")

        assert job_runs[0].junit_paths == ["logs/jobA/run1/junit/new.xml"]

    @pytest.mark.asyncio
    async def test_ignores_unrelated_files(self, storage, scanner):
        storage.add("logs/jobA/run1/prowjob.json")
        storage.add("logs/jobA/run1/build-log.txt")
        storage.add("logs/jobA/run1/artifacts/results.xml")
        storage.add("logs/jobA/run1/junit/summary.json")

        job_runs = await scanner.scan("jobA")

        assert job_runs[0].junit_paths == []

    @pytest.mark.asyncio
    async def test_short_junit_paths_are_skipped(self, storage, scanner):
        storage.add("logs/jobA/junit.xml")
        storage.add("logs/jobA/run1/prowjob.json")

        job_runs = await scanner.scan("jobA")

        assert [j.job_run_id for j in job_runs] == ["run1"]
        assert job_runs[0].junit_paths == []

    @pytest.mark.asyncio
    async def test_runs_keep_first_seen_order(self, storage, scanner):
        storage.add("logs/jobA/run2/junit/a.xml")
        storage.add("logs/jobA/run1/prowjob.json")
        storage.add("logs/jobA/run2/prowjob.json")

        job_runs = await scanner.scan("jobA")

        assert [j.job_run_id for j in job_runs] == ["run2", "run1"]

    @pytest.mark.asyncio
    async def test_lists_job_prefix(self, storage, scanner):
        await scanner.scan("jobA", start_after="logs/jobA/run0")

        assert storage.list_calls == [{"prefix": "logs/jobA/", "start_after": "logs/jobA/run0"}]

    @pytest.mark.asyncio
    async def test_sibling_job_sharing_name_prefix_is_not_scanned(self, storage, scanner):
        storage.add("logs/jobA/run1/prowjob.json")
        storage.add("logs/jobA-ovn/run9/prowjob.json")
        storage.add("logs/jobA-ovn/run9/artifacts/junit/junit.xml")

        job_runs = await scanner.scan("jobA")

        assert [j.job_run_id for j in job_runs] == ["run1"]
        assert job_runs[0].junit_paths == []

    @pytest.mark.asyncio
    async def test_listing_failure_returns_partial_results(self, storage, scanner):
        storage.add("logs/jobA/run1/prowjob.json")
        storage.add("logs/jobA/run2/junit/a.xml")
        storage.add("logs/jobA/run3/prowjob.json")
        storage.fail_listing_after = 2

        with pytest.raises(ListingError) as exc_info:
            await scanner.scan("jobA")

        error = exc_info.value
        assert [j.job_run_id for j in error.partial_job_runs] == ["run1"]
        assert "listing broke" in str(error.original_error)

    @pytest.mark.asyncio
    async def test_default_window_is_24_hours(self, storage):
        storage.add("logs/jobA/run1/prowjob.json", age=timedelta(hours=23))
        storage.add("logs/jobA/run2/prowjob.json", age=timedelta(hours=25))

        job_runs = await JobRunScanner(storage, clock=lambda: NOW).scan("jobA")

        assert [j.job_run_id for j in job_runs] == ["run1"]

    @pytest.mark.asyncio
    async def test_records_share_storage_but_not_content(self, storage, scanner):
        storage.add("logs/jobA/run1/prowjob.json", b"{}")
        storage.add("logs/jobA/run2/prowjob.json", b"{}")

        run1, run2 = await scanner.scan("jobA")
        await run1.get_content(run1.prowjob_path)
        await run2.get_content(run2.prowjob_path)

        assert storage.reads == ["logs/jobA/run1/prowjob.json", "logs/jobA/run2/prowjob.json"]
