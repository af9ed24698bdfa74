"""
Tests for JobStore: schema, company get-or-create, keyed job upserts, saved jobs
"""

import sqlite3

import pytest

from job_ingest.database import JobStore


def _job_fields(company_id, **overrides):
    fields = {
        "ats_type": "greenhouse",
        "title": "Engineer",
        "description": "Build things",
        "location": "Remote",
        "remote": True,
        "apply_url": "https://boards.greenhouse.io/acme/jobs/1",
        "company_id": company_id,
        "posted_at": None,
    }
    fields.update(overrides)
    return fields


def _update_fields(**overrides):
    fields = {
        "title": "Engineer",
        "description": "Build things",
        "location": "Remote",
        "remote": True,
        "posted_at": None,
    }
    fields.update(overrides)
    return fields


class TestSchema:
    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "jobs.db"
        JobStore(str(db_path))
        assert db_path.exists()

    def test_init_is_idempotent(self, test_db_path):
        JobStore(test_db_path)
        store = JobStore(test_db_path)
        assert store.get_job_count() == 0

    def test_job_key_unique_constraint(self, test_store):
        company = test_store.upsert_company("Acme")
        conn = sqlite3.connect(test_store.db_path)
        try:
            insert = (
                "INSERT INTO jobs (source_type, source_key, title, description, apply_url,"
                " company_id, created_at, updated_at) VALUES ('lever', 'k', 't', 'd', 'u', ?, '', '')"
            )
            conn.execute(insert, (company.id,))
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute(insert, (company.id,))
        finally:
            conn.close()


class TestCompanies:
    def test_create(self, test_store):
        company = test_store.upsert_company(
            "Acme", website="https://acme.com", ats_provider="greenhouse", career_page_url="acme"
        )

        assert company.id is not None
        assert company.name == "Acme"
        assert company.website == "https://acme.com"
        assert company.ats_provider == "greenhouse"
        assert company.last_crawled_at is None

    def test_existing_company_never_overwritten(self, test_store):
        first = test_store.upsert_company("Acme", website="https://acme.com")
        second = test_store.upsert_company("Acme", website="https://other.example")

        assert second.id == first.id
        assert second.website == "https://acme.com"

    def test_exact_name_match_only(self, test_store):
        a = test_store.upsert_company("ACME Tech")
        b = test_store.upsert_company("ACME Technologies, Inc.")
        assert a.id != b.id

    def test_unknown_field_rejected(self, test_store):
        with pytest.raises(ValueError):
            test_store.upsert_company("Acme", last_crawled_at="2024-01-01")

    def test_list_crawlable_companies(self, test_store):
        test_store.upsert_company("Zeta", ats_provider="lever", career_page_url="zeta")
        test_store.upsert_company("Alpha", ats_provider="greenhouse", career_page_url="alpha")
        test_store.upsert_company("NoProvider", career_page_url="https://x.example")
        test_store.upsert_company("NoUrl", ats_provider="gupy")
        test_store.upsert_company("Blank", ats_provider="", career_page_url="")

        names = [c.name for c in test_store.list_crawlable_companies()]

        assert names == ["Alpha", "Zeta"]

    def test_touch_crawled_at(self, test_store):
        company = test_store.upsert_company("Acme")

        test_store.touch_company_crawled_at(company.id)

        assert test_store.get_company(company.id).last_crawled_at is not None

    def test_get_company_by_name(self, test_store):
        test_store.upsert_company("Acme")
        assert test_store.get_company_by_name("Acme").name == "Acme"
        assert test_store.get_company_by_name("acme") is None


class TestJobs:
    def test_create_then_update(self, test_store):
        company = test_store.upsert_company("Acme")

        job, created = test_store.upsert_job(
            "greenhouse", "123", _job_fields(company.id), _update_fields()
        )
        assert created is True
        assert job.remote is True

        updated, created_again = test_store.upsert_job(
            "greenhouse",
            "123",
            _job_fields(company.id, title="Ignored on update"),
            _update_fields(title="Staff Engineer", remote=False, location=None),
        )

        assert created_again is False
        assert updated.id == job.id
        assert updated.title == "Staff Engineer"
        assert updated.remote is False
        assert updated.location is None
        assert updated.created_at == job.created_at
        assert test_store.get_job_count() == 1

    def test_update_leaves_identity_fields(self, test_store):
        company = test_store.upsert_company("Acme")
        test_store.upsert_job("lever", "abc", _job_fields(company.id), _update_fields())

        job, _ = test_store.upsert_job(
            "lever",
            "abc",
            _job_fields(company.id, apply_url="https://changed.example", ats_type="unknown"),
            _update_fields(),
        )

        assert job.apply_url == "https://boards.greenhouse.io/acme/jobs/1"
        assert job.ats_type == "greenhouse"

    def test_same_key_different_source_type_is_distinct(self, test_store):
        company = test_store.upsert_company("Acme")
        test_store.upsert_job("manual", "123", _job_fields(company.id), _update_fields())
        test_store.upsert_job("greenhouse", "123", _job_fields(company.id), _update_fields())

        assert test_store.get_job_count() == 2

    def test_update_only_mutable_fields_allowed(self, test_store):
        company = test_store.upsert_company("Acme")
        with pytest.raises(ValueError):
            test_store.upsert_job(
                "lever", "k", _job_fields(company.id), {"apply_url": "https://x.example"}
            )

    def test_lookup_helpers(self, test_store):
        company = test_store.upsert_company("Acme")
        job, _ = test_store.upsert_job("lever", "k", _job_fields(company.id), _update_fields())

        assert test_store.get_job(job.id).source_key == "k"
        assert test_store.get_job_by_key("lever", "k").id == job.id
        assert test_store.get_job_by_key("lever", "missing") is None
        assert [j.id for j in test_store.get_jobs_for_company(company.id)] == [job.id]

    def test_stats(self, test_store):
        company = test_store.upsert_company("Acme")
        test_store.upsert_job("lever", "a", _job_fields(company.id), _update_fields())
        test_store.upsert_job("lever", "b", _job_fields(company.id), _update_fields())
        test_store.upsert_job("remotive", "1", _job_fields(company.id), _update_fields())

        stats = test_store.get_stats()

        assert stats["total_jobs"] == 3
        assert stats["total_companies"] == 1
        assert stats["jobs_by_source"] == {"lever": 2, "remotive": 1}


class TestSavedJobs:
    def test_save_is_idempotent(self, test_store):
        company = test_store.upsert_company("Acme")
        job, _ = test_store.upsert_job("manual", "url:x", _job_fields(company.id), _update_fields())

        assert test_store.save_job_for_user("user-1", job.id) is True
        assert test_store.save_job_for_user("user-1", job.id) is False
        assert test_store.get_saved_job_ids("user-1") == [job.id]
        assert test_store.get_saved_job_ids("user-2") == []
