"""
Tests for the job-ingest command line
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from job_ingest.cli import build_import_service, build_parser, main
from job_ingest.database import JobStore
from job_ingest.exceptions import InvalidImportRequest
from job_ingest.jobs.crawl_orchestrator import RunStats
from job_ingest.jobs.import_service import ImportResult, ImportService
from job_ingest.models import Job


def _job(**overrides):
    fields = {
        "id": 7,
        "source_type": "manual",
        "source_key": "url:https://boards.greenhouse.io/acme/jobs/1",
        "ats_type": "greenhouse",
        "title": "Data Engineer",
        "description": "d",
        "location": None,
        "remote": False,
        "apply_url": "https://boards.greenhouse.io/acme/jobs/1",
        "company_id": 1,
    }
    fields.update(overrides)
    return Job(**fields)


class TestParser:
    def test_import_link_arguments(self):
        args = build_parser().parse_args(["import-link", "https://x/jobs/1", "--user-id", "u1"])
        assert args.url == "https://x/jobs/1"
        assert args.user_id == "u1"

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_add_company_rejects_unknown_ats(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(
                ["add-company", "Acme", "--ats", "unknown", "--career-url", "acme"]
            )

    def test_add_company_accepts_workday(self):
        args = build_parser().parse_args(
            ["add-company", "Acme", "--ats", "workday", "--career-url", "https://acme.wd1"]
        )
        assert args.ats == "workday"
        assert args.website is None


class TestImportLinkCommand:
    @patch("job_ingest.cli.build_import_service")
    def test_success(self, mock_build, test_db_path, capsys):
        mock_build.return_value.import_from_link.return_value = ImportResult(
            created=True, job=_job()
        )

        exit_code = main(["import-link", "https://boards.greenhouse.io/acme/jobs/1"])

        assert exit_code == 0
        mock_build.return_value.import_from_link.assert_called_once_with(
            "https://boards.greenhouse.io/acme/jobs/1", user_id=None
        )
        out = capsys.readouterr().out
        assert "Created job 7: Data Engineer" in out

    @patch("job_ingest.cli.build_import_service")
    def test_ingestion_error_returns_nonzero(self, mock_build, test_db_path, capsys):
        mock_build.return_value.import_from_link.side_effect = InvalidImportRequest("URL is required")

        exit_code = main(["import-link", "  "])

        assert exit_code == 1
        assert "Import failed: URL is required" in capsys.readouterr().err


class TestAddCompanyCommand:
    def test_creates_company(self, test_db_path, capsys):
        exit_code = main(
            ["add-company", "Acme", "--ats", "lever", "--career-url", "https://jobs.lever.co/acme"]
        )

        assert exit_code == 0
        company = JobStore(test_db_path).get_company_by_name("Acme")
        assert company.ats_provider == "lever"
        assert company.career_page_url == "https://jobs.lever.co/acme"
        assert '"name": "Acme"' in capsys.readouterr().out

    def test_existing_company_left_unchanged(self, test_db_path, capsys):
        main(["add-company", "Acme", "--ats", "lever", "--career-url", "acme"])
        capsys.readouterr()

        main(["add-company", "Acme", "--ats", "greenhouse", "--career-url", "acme"])

        assert "already exists" in capsys.readouterr().out
        assert JobStore(test_db_path).get_company_by_name("Acme").ats_provider == "lever"


class TestCrawlCommands:
    @patch("job_ingest.cli.CrawlOrchestrator")
    def test_crawl_prints_summary(self, mock_orchestrator, test_db_path, capsys):
        mock_orchestrator.from_config.return_value.crawl_all_companies.return_value = RunStats(
            processed=2, jobs_created=5, errors=1, failed_companies=["Beta"]
        )
        mock_orchestrator.from_config.return_value.store.get_stats.return_value = {
            "total_jobs": 12,
            "total_companies": 3,
            "jobs_by_source": {"greenhouse": 12},
        }

        assert main(["crawl"]) == 0

        out = capsys.readouterr().out
        assert "Companies processed: 2" in out
        assert "Errors: 1" in out
        assert "Database: 12 jobs across 3 companies" in out
        assert '"failed_companies"' in out

    @patch("job_ingest.cli.CrawlOrchestrator")
    def test_ingest_daily_prints_report(self, mock_orchestrator, test_db_path, capsys):
        report = {"started_at": "a", "finished_at": "b", "companies": {}, "sources": []}
        mock_orchestrator.from_config.return_value.run_daily_ingestion.return_value = report

        assert main(["ingest-daily"]) == 0
        assert json.loads(capsys.readouterr().out) == report

    @patch("job_ingest.cli.IngestionScheduler")
    @patch("job_ingest.cli.CrawlOrchestrator")
    def test_schedule_stops_on_interrupt(self, mock_orchestrator, mock_scheduler, test_db_path):
        mock_scheduler.return_value.run_forever.side_effect = KeyboardInterrupt

        assert main(["schedule"]) == 0
        mock_scheduler.return_value.stop.assert_called_once()


class TestBuildImportService:
    def test_wires_config_into_fetcher(self, test_db_path):
        config = MagicMock(
            database_path=test_db_path,
            request_timeout_seconds=7,
            render_timeout_ms=5000,
            browser_headless=False,
            min_html_length=1500,
            user_agent="agent/1.0",
        )

        service = build_import_service(config)

        assert isinstance(service, ImportService)
        assert service.fetcher.min_length == 1500
        assert service.fetcher.timeout == 7
        assert service.fetcher.renderer.headless is False
