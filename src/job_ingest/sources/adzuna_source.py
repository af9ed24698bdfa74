"""
Adzuna connector - paid job search API keyed by app_id / app_key

API: GET https://api.adzuna.com/v1/api/jobs/{country}/search/1
Without credentials the connector is a no-op that logs a warning.
"""

import logging
from typing import Any

from job_ingest.exceptions import ConfigurationError, ParseError
from job_ingest.models import CONFIDENTIAL_COMPANY, JobSourceType, ScrapedJob
from job_ingest.sources.base_source import BaseJobSource
from job_ingest.utils.http_client import DEFAULT_TIMEOUT, http_get_json
from job_ingest.utils.text_cleaning import (
    has_remote_term,
    nested_text,
    parse_datetime,
    strip_tags,
)

logger = logging.getLogger(__name__)

ADZUNA_API = "https://api.adzuna.com/v1/api/jobs/{country}/search/1"
FALLBACK_DESCRIPTION = "See the original listing for full details."


class AdzunaSource(BaseJobSource):
    source_type = JobSourceType.ADZUNA

    def __init__(
        self,
        app_id: str | None,
        app_key: str | None,
        country: str = "br",
        query: str = "desenvolvedor programador software",
        where: str = "brasil",
        max_days_old: int = 15,
        results_per_page: int = 50,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        super().__init__(timeout=timeout)
        self.app_id = app_id
        self.app_key = app_key
        self.country = country
        self.query = query
        self.where = where
        self.max_days_old = max_days_old
        self.results_per_page = results_per_page

    def is_configured(self) -> bool:
        return bool(self.app_id and self.app_key)

    def fetch_listings(self) -> list[ScrapedJob]:
        if not self.is_configured():
            raise ConfigurationError("ADZUNA_APP_ID and ADZUNA_APP_KEY must both be set")

        params = {
            "app_id": self.app_id,
            "app_key": self.app_key,
            "results_per_page": self.results_per_page,
            # Adzuna matches any of the words in "what"
            "what": self.query,
            "where": self.where,
            "max_days_old": self.max_days_old,
        }
        data = http_get_json(
            ADZUNA_API.format(country=self.country), params=params, timeout=self.timeout
        )
        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise ParseError("Unexpected Adzuna payload: no results list")

        results = data["results"]
        if not results:
            logger.warning("Adzuna answered OK but returned no jobs for these filters")

        listings = []
        for record in results:
            listing = self._listing_from_record(record)
            if listing:
                listings.append(listing)
        return listings

    def _listing_from_record(self, record: Any) -> ScrapedJob | None:
        if not isinstance(record, dict):
            return None

        job_id = record.get("id")
        title = strip_tags(record.get("title"))
        apply_url = record.get("redirect_url")
        if job_id is None or not title or not apply_url:
            logger.debug("Skipping incomplete Adzuna record %r", job_id)
            return None

        # Adzuna returns a short snippet with stray <strong> highlight tags
        description = strip_tags(record.get("description"))

        return ScrapedJob(
            title=title,
            description=description or FALLBACK_DESCRIPTION,
            location=nested_text(record, "location", "display_name"),
            remote=has_remote_term(title, description),
            apply_url=apply_url,
            company_name=nested_text(record, "company", "display_name") or CONFIDENTIAL_COMPANY,
            posted_at=parse_datetime(record.get("created")),
            external_id=str(job_id),
        )
