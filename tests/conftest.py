"""
Pytest fixtures for job-run-aggregator tests.
"""

from pathlib import Path

import pytest

from helpers import NOW, FakeObjectStorage


@pytest.fixture
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def working_dir(tmp_path) -> Path:
    return tmp_path / "working-dir"
