"""
Manual single-URL import

fetch -> classify -> scrape -> ingest, optionally saving the job for a user.
Unlike the batch paths, every error here reaches the caller: there is exactly
one source and no sibling work to protect.
"""

import logging
from dataclasses import dataclass
from urllib.parse import urlparse

from job_ingest.database import JobStore
from job_ingest.exceptions import InvalidImportRequest
from job_ingest.fetchers.html_fetcher import HtmlFetcher
from job_ingest.jobs.job_ingestor import JobIngestor, build_source_key
from job_ingest.models import Job, JobSourceType
from job_ingest.scrapers.scraper_registry import ScraperRegistry
from job_ingest.utils.ats_detector import detect_ats

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    created: bool
    job: Job


def validate_import_url(url: str | None) -> str:
    """Return the stripped URL, or raise InvalidImportRequest"""
    url = (url or "").strip()
    if not url:
        raise InvalidImportRequest("URL is required")

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidImportRequest(f"Not an http(s) URL: {url}")
    return url


class ImportService:
    """Imports one job posting from a pasted link"""

    def __init__(
        self,
        store: JobStore,
        fetcher: HtmlFetcher,
        registry: ScraperRegistry,
        ingestor: JobIngestor | None = None,
    ):
        self.store = store
        self.fetcher = fetcher
        self.registry = registry
        self.ingestor = ingestor or JobIngestor(store)

    def import_from_link(self, url: str, user_id: str | None = None) -> ImportResult:
        """
        Import a job from its posting URL

        Args:
            url: Job posting URL (http or https)
            user_id: When given, the job is added to that user's saved jobs

        Returns:
            ImportResult(created, job); created is False when the URL was imported before

        Raises:
            InvalidImportRequest: Missing or non-http URL
            TransientFetchError: Neither fetch tier produced the page
            UnsupportedSourceError: No strategy registered for the detected ATS
        """
        url = validate_import_url(url)

        html = self.fetcher.fetch(url)
        ats = detect_ats(url)
        scraper = self.registry.get_scraper(ats)
        logger.info("Importing %s with %s scraper (ats=%s)", url, scraper.name, ats.value)

        scraped = scraper.scrape(url, html)

        # Manual imports key off the request URL even if the page exposed a native id
        source_key = build_source_key(scraped, prefer_external_id=False)

        result = self.ingestor.ingest(
            scraped, source_type=JobSourceType.MANUAL, source_key=source_key, ats_type=ats
        )

        if user_id:
            self.store.save_job_for_user(user_id, result.job.id)

        logger.info(
            "%s job %s: %s @ %s",
            "Created" if result.created else "Updated",
            result.job.id,
            result.job.title,
            result.company.name,
        )
        return ImportResult(created=result.created, job=result.job)
