"""
Crawl Orchestrator - scheduled bulk ingestion

crawl_all_companies():
    For every company with an ATS provider and a career page URL, call that
    ATS's bulk listing API and ingest each job. Companies are processed one at
    a time; a failing company is logged and counted, never fatal.

run_daily_ingestion():
    The company crawl followed by each aggregator connector, each isolated.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from job_ingest.config import IngestConfig, get_config
from job_ingest.database import JobStore
from job_ingest.exceptions import UnsupportedSourceError
from job_ingest.jobs.job_ingestor import JobIngestor, build_source_key
from job_ingest.models import Company, JobSourceType
from job_ingest.scrapers.scraper_registry import ScraperRegistry, build_default_registry
from job_ingest.sources.adzuna_source import AdzunaSource
from job_ingest.sources.base_source import BaseJobSource
from job_ingest.sources.programathor_source import ProgramathorSource
from job_ingest.sources.remotive_source import RemotiveSource

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    """Counters for one crawl run, passed through the loop and returned"""

    processed: int = 0
    jobs_found: int = 0
    jobs_created: int = 0
    jobs_updated: int = 0
    job_errors: int = 0
    errors: int = 0
    skipped: int = 0
    failed_companies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def build_default_sources(config: IngestConfig) -> list[BaseJobSource]:
    """Aggregator connectors in daily-run order"""
    timeout = config.request_timeout_seconds
    return [
        AdzunaSource(
            app_id=config.adzuna_app_id,
            app_key=config.adzuna_app_key,
            country=config.adzuna_country,
            query=config.adzuna_query,
            where=config.adzuna_where,
            max_days_old=config.adzuna_max_days_old,
            results_per_page=config.adzuna_results_per_page,
            timeout=timeout,
        ),
        RemotiveSource(
            category=config.remotive_category, limit=config.remotive_limit, timeout=timeout
        ),
        ProgramathorSource(timeout=timeout),
    ]


class CrawlOrchestrator:
    """Drives the automated ingestion paths"""

    def __init__(
        self,
        store: JobStore,
        registry: ScraperRegistry,
        sources: list[BaseJobSource] | None = None,
        ingestor: JobIngestor | None = None,
    ):
        self.store = store
        self.registry = registry
        self.sources = sources or []
        self.ingestor = ingestor or JobIngestor(store)

    @classmethod
    def from_config(cls, config: IngestConfig | None = None) -> "CrawlOrchestrator":
        config = config or get_config()
        store = JobStore(config.database_path)
        return cls(
            store=store,
            registry=build_default_registry(timeout=config.request_timeout_seconds),
            sources=build_default_sources(config),
        )

    def crawl_all_companies(self) -> RunStats:
        """
        Bulk-crawl every crawlable company

        Returns:
            RunStats; processed counts every company attempted, errors counts
            companies whose listing or ingestion failed, skipped counts
            companies whose ATS has no bulk listing API
        """
        print("=" * 80)
        print(f"ATS COMPANY CRAWL - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print("=" * 80)

        stats = RunStats()
        companies = self.store.list_crawlable_companies()
        print(f"Crawling {len(companies)} companies\n")

        for i, company in enumerate(companies, 1):
            print(f"[{i}/{len(companies)}] {company.name} ({company.ats_provider})")
            stats.processed += 1

            try:
                self._crawl_company(company, stats)
            except UnsupportedSourceError as e:
                logger.warning("Skipping %s: %s", company.name, e)
                stats.skipped += 1
            except Exception as e:
                logger.error("Error crawling %s [%s]: %s", company.name, company.ats_provider, e)
                print(f"  ✗ Error: {e}")
                stats.errors += 1
                stats.failed_companies.append(company.name)

            self._touch_crawled_at(company)

        logger.info(
            "Crawl finished: %s processed, %s created, %s updated, %s errors, %s skipped",
            stats.processed,
            stats.jobs_created,
            stats.jobs_updated,
            stats.errors,
            stats.skipped,
        )
        return stats

    def _crawl_company(self, company: Company, stats: RunStats) -> None:
        lister = self.registry.get_lister((company.ats_provider or "").strip().lower())
        jobs = lister.list_jobs(company.career_page_url or "")
        stats.jobs_found += len(jobs)

        source_type = JobSourceType(lister.ats_type.value)
        created = updated = 0
        for scraped in jobs:
            # Attach to the crawled company row, whatever name the ATS reported
            scraped = scraped.model_copy(update={"company_name": company.name})
            try:
                result = self.ingestor.ingest(
                    scraped,
                    source_type=source_type,
                    source_key=build_source_key(scraped),
                    ats_type=lister.ats_type,
                )
            except Exception as e:
                logger.error("%s: failed to store %s: %s", company.name, scraped.apply_url, e)
                stats.job_errors += 1
                continue

            if result.created:
                created += 1
            else:
                updated += 1

        stats.jobs_created += created
        stats.jobs_updated += updated
        print(f"  ✓ {len(jobs)} jobs ({created} new, {updated} updated)")

    def _touch_crawled_at(self, company: Company) -> None:
        try:
            self.store.touch_company_crawled_at(company.id)
        except Exception as e:
            logger.error("Could not update last_crawled_at for %s: %s", company.name, e)

    def run_sources(self) -> list[dict[str, Any]]:
        """Run every aggregator connector in order; connectors never raise"""
        return [source.import_jobs(self.ingestor) for source in self.sources]

    def run_daily_ingestion(self) -> dict[str, Any]:
        """
        Scheduled entry point: company crawl, then each aggregator connector

        Returns:
            {"started_at", "finished_at", "companies": RunStats dict, "sources": [...]}
        """
        started_at = datetime.now().isoformat()
        logger.info("Starting daily ingestion")

        try:
            companies = self.crawl_all_companies().to_dict()
        except Exception as e:
            # Listing the companies themselves failed; connectors still run
            logger.error("Company crawl failed: %s", e)
            companies = {**RunStats(errors=1).to_dict(), "error": str(e)}

        report = {
            "started_at": started_at,
            "finished_at": None,
            "companies": companies,
            "sources": self.run_sources(),
        }
        report["finished_at"] = datetime.now().isoformat()

        logger.info("Daily ingestion finished")
        logger.debug("Daily ingestion report: %s", json.dumps(report, default=str))
        return report
