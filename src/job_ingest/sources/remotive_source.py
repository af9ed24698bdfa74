"""
Remotive connector - free remote-jobs API

API: GET https://remotive.com/api/remote-jobs?category=...&limit=...
Every listing is remote; listings restricted to other regions are dropped.
"""

import logging
from typing import Any

from job_ingest.exceptions import ParseError
from job_ingest.models import CONFIDENTIAL_COMPANY, PENDING_DESCRIPTION, JobSourceType, ScrapedJob
from job_ingest.sources.base_source import BaseJobSource
from job_ingest.utils.http_client import DEFAULT_TIMEOUT, http_get_json
from job_ingest.utils.location_filter import is_friendly_location
from job_ingest.utils.text_cleaning import clean_text, html_to_text, parse_datetime

logger = logging.getLogger(__name__)

REMOTIVE_API = "https://remotive.com/api/remote-jobs"


class RemotiveSource(BaseJobSource):
    source_type = JobSourceType.REMOTIVE

    def __init__(
        self, category: str = "software-dev", limit: int = 100, timeout: int = DEFAULT_TIMEOUT
    ):
        super().__init__(timeout=timeout)
        self.category = category
        self.limit = limit

    def fetch_listings(self) -> list[ScrapedJob]:
        data = http_get_json(
            REMOTIVE_API,
            params={"category": self.category, "limit": self.limit},
            timeout=self.timeout,
        )
        if not isinstance(data, dict) or not isinstance(data.get("jobs"), list):
            raise ParseError("Unexpected Remotive payload: no jobs list")

        listings = []
        filtered = 0
        for record in data["jobs"]:
            if not isinstance(record, dict):
                continue
            if not is_friendly_location(record.get("candidate_required_location")):
                filtered += 1
                continue
            listing = self._listing_from_record(record)
            if listing:
                listings.append(listing)

        logger.info("Remotive: %s accepted, %s filtered by location", len(listings), filtered)
        return listings

    def _listing_from_record(self, record: dict[str, Any]) -> ScrapedJob | None:
        job_id = record.get("id")
        title = clean_text(record.get("title"))
        apply_url = record.get("url")
        if job_id is None or not title or not apply_url:
            logger.debug("Skipping incomplete Remotive record %r", job_id)
            return None

        return ScrapedJob(
            title=title,
            description=html_to_text(record.get("description")) or PENDING_DESCRIPTION,
            location=record.get("candidate_required_location"),
            remote=True,
            apply_url=apply_url,
            company_name=clean_text(record.get("company_name")) or CONFIDENTIAL_COMPANY,
            posted_at=parse_datetime(record.get("publication_date")),
            external_id=str(job_id),
        )
