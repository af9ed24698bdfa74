"""
Command-line entry point

    job-ingest import-link URL [--user-id ID]
    job-ingest crawl
    job-ingest ingest-daily
    job-ingest add-company NAME --ats greenhouse --career-url URL [--website URL]
    job-ingest schedule
"""

import argparse
import json
import logging
import sys

from job_ingest.config import IngestConfig, get_config
from job_ingest.database import JobStore
from job_ingest.exceptions import IngestionError
from job_ingest.fetchers.html_fetcher import HtmlFetcher
from job_ingest.fetchers.playwright_renderer import PlaywrightRenderer
from job_ingest.jobs.crawl_orchestrator import CrawlOrchestrator
from job_ingest.jobs.import_service import ImportService
from job_ingest.jobs.scheduler import IngestionScheduler
from job_ingest.models import AtsType
from job_ingest.scrapers.scraper_registry import build_default_registry

logger = logging.getLogger(__name__)


def build_import_service(config: IngestConfig) -> ImportService:
    renderer = PlaywrightRenderer(
        timeout_ms=config.render_timeout_ms,
        headless=config.browser_headless,
        user_agent=config.user_agent,
    )
    fetcher = HtmlFetcher(
        timeout=config.request_timeout_seconds,
        min_length=config.min_html_length,
        renderer=renderer,
        user_agent=config.user_agent,
    )
    return ImportService(
        store=JobStore(config.database_path),
        fetcher=fetcher,
        registry=build_default_registry(timeout=config.request_timeout_seconds),
    )


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_import_link(args, config: IngestConfig) -> int:
    service = build_import_service(config)
    try:
        result = service.import_from_link(args.url, user_id=args.user_id)
    except IngestionError as e:
        print(f"✗ Import failed: {e}", file=sys.stderr)
        return 1

    print(f"✓ {'Created' if result.created else 'Updated'} job {result.job.id}: {result.job.title}")
    _print_json({"created": result.created, "job": result.job.to_dict()})
    return 0


def cmd_crawl(args, config: IngestConfig) -> int:
    orchestrator = CrawlOrchestrator.from_config(config)
    stats = orchestrator.crawl_all_companies()
    totals = orchestrator.store.get_stats()

    print("\n" + "=" * 80)
    print("CRAWL SUMMARY")
    print("=" * 80)
    print(f"Companies processed: {stats.processed}")
    print(f"Jobs created: {stats.jobs_created}")
    print(f"Jobs updated: {stats.jobs_updated}")
    print(f"Errors: {stats.errors}")
    print(f"Skipped (no bulk listing): {stats.skipped}")
    print(f"Database: {totals['total_jobs']} jobs across {totals['total_companies']} companies")
    print()
    _print_json(stats.to_dict())
    return 0


def cmd_ingest_daily(args, config: IngestConfig) -> int:
    report = CrawlOrchestrator.from_config(config).run_daily_ingestion()
    _print_json(report)
    return 0


def cmd_add_company(args, config: IngestConfig) -> int:
    store = JobStore(config.database_path)
    company = store.upsert_company(
        args.name,
        website=args.website,
        ats_provider=args.ats,
        career_page_url=args.career_url,
    )
    if company.ats_provider != args.ats or company.career_page_url != args.career_url:
        print(f"⚠ Company '{company.name}' already exists; stored fields left unchanged")
    _print_json(company.to_dict())
    return 0


def cmd_schedule(args, config: IngestConfig) -> int:
    scheduler = IngestionScheduler(CrawlOrchestrator.from_config(config), config.daily_run_hour)
    try:
        scheduler.run_forever()
    except KeyboardInterrupt:
        scheduler.stop()
        print("\nScheduler stopped")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="job-ingest", description="Ingest job postings from ATS platforms and job boards"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_import = subparsers.add_parser("import-link", help="Import one job from its posting URL")
    p_import.add_argument("url", help="Job posting URL")
    p_import.add_argument("--user-id", help="Also save the job for this user")
    p_import.set_defaults(func=cmd_import_link)

    p_crawl = subparsers.add_parser("crawl", help="Bulk-crawl every configured company")
    p_crawl.set_defaults(func=cmd_crawl)

    p_daily = subparsers.add_parser(
        "ingest-daily", help="Company crawl plus Adzuna, Remotive and Programathor"
    )
    p_daily.set_defaults(func=cmd_ingest_daily)

    p_company = subparsers.add_parser("add-company", help="Register a company for crawling")
    p_company.add_argument("name", help="Company name (exact-match key)")
    p_company.add_argument(
        "--ats",
        required=True,
        choices=[
            ats for ats in build_default_registry().get_registered_types() if ats != AtsType.UNKNOWN.value
        ],
        help="ATS provider hosting the company's jobs",
    )
    p_company.add_argument("--career-url", required=True, help="Career page URL or board token")
    p_company.add_argument("--website", help="Company website")
    p_company.set_defaults(func=cmd_add_company)

    p_schedule = subparsers.add_parser("schedule", help="Run daily ingestion at DAILY_RUN_HOUR")
    p_schedule.set_defaults(func=cmd_schedule)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    return args.func(args, get_config())


if __name__ == "__main__":
    sys.exit(main())
