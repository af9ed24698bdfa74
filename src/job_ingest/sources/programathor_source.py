"""
Programathor connector - HTML-scraped Brazilian developer job board

Listing page: https://programathor.com.br/jobs, one .cell-list card per job.
Job links look like /jobs/12345-backend-developer; the numeric prefix is the key.
"""

import logging
import re
from urllib.parse import urljoin

from bs4 import Tag

from job_ingest.models import CONFIDENTIAL_COMPANY, JobSourceType, ScrapedJob
from job_ingest.sources.base_source import BaseJobSource
from job_ingest.utils.field_extractors import make_soup
from job_ingest.utils.http_client import DEFAULT_TIMEOUT, http_get
from job_ingest.utils.text_cleaning import clean_text, has_remote_term

logger = logging.getLogger(__name__)

PROGRAMATHOR_BASE = "https://programathor.com.br"
PROGRAMATHOR_JOBS = f"{PROGRAMATHOR_BASE}/jobs"
JOB_ID_PATTERN = re.compile(r"/jobs/(\d+)")
CARD_DESCRIPTION = "Listed on Programathor. Open the link for the full requirements."


def extract_job_id(href: str | None) -> str | None:
    match = JOB_ID_PATTERN.search(href or "")
    return match.group(1) if match else None


class ProgramathorSource(BaseJobSource):
    source_type = JobSourceType.PROGRAMATHOR

    def __init__(self, url: str = PROGRAMATHOR_JOBS, timeout: int = DEFAULT_TIMEOUT):
        super().__init__(timeout=timeout)
        self.url = url

    def fetch_listings(self) -> list[ScrapedJob]:
        soup = make_soup(http_get(self.url, timeout=self.timeout).text)

        listings = []
        for card in soup.select(".cell-list"):
            listing = self._listing_from_card(card)
            if listing:
                listings.append(listing)

        logger.info("Programathor: %s cards parsed", len(listings))
        return listings

    def _listing_from_card(self, card: Tag) -> ScrapedJob | None:
        heading = card.select_one(".cell-list-content h3")
        link = card.find("a", href=True)
        title = clean_text(heading.get_text(" ")) if heading else ""
        href = link["href"] if link else None
        job_id = extract_job_id(href)
        if not title or not job_id:
            return None

        company_tag = card.select_one(".cell-list-content span")
        company = clean_text(company_tag.get_text(" ")) if company_tag else ""
        card_text = clean_text(card.get_text(" "))

        return ScrapedJob(
            title=title,
            description=CARD_DESCRIPTION,
            location=None,
            remote=has_remote_term(title, card_text),
            apply_url=urljoin(PROGRAMATHOR_BASE, href),
            company_name=company or CONFIDENTIAL_COMPANY,
            external_id=job_id,
        )
