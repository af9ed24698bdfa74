"""
Pytest configuration for job-ingest tests.

Every test that touches storage gets its own temporary SQLite file, and
DATABASE_PATH is pointed at it so nothing can fall back to data/jobs.db.
"""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from job_ingest.config import get_config
from job_ingest.database import JobStore
from job_ingest.models import ScrapedJob


@pytest.fixture(scope="function")
def test_db_path(tmp_path: Path) -> Generator[str, None, None]:
    """
    Provides an isolated database path and exports it as DATABASE_PATH.

    Yields:
        str: Path to a not-yet-created SQLite file
    """
    db_path = tmp_path / "test_jobs.db"
    old_path = os.environ.get("DATABASE_PATH")
    os.environ["DATABASE_PATH"] = str(db_path)
    get_config.cache_clear()

    try:
        yield str(db_path)
    finally:
        if old_path is None:
            os.environ.pop("DATABASE_PATH", None)
        else:
            os.environ["DATABASE_PATH"] = old_path
        get_config.cache_clear()


@pytest.fixture(scope="function")
def test_store(test_db_path: str) -> JobStore:
    """
    Provides an initialized JobStore on a fresh database.

    Example:
        def test_upsert(test_store):
            company = test_store.upsert_company("Acme")
            assert company.id == 1
    """
    return JobStore(test_db_path)


@pytest.fixture
def make_scraped_job():
    """Factory for ScrapedJob with sensible defaults; override any field by keyword"""

    def _make(**overrides) -> ScrapedJob:
        fields = {
            "title": "Senior Backend Engineer",
            "description": "Build APIs in Python.",
            "location": "São Paulo, Brazil",
            "remote": False,
            "apply_url": "https://boards.greenhouse.io/acme/jobs/123",
            "company_name": "Acme",
        }
        fields.update(overrides)
        return ScrapedJob(**fields)

    return _make
