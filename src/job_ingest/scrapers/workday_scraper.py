"""
Workday extraction strategy (reduced fidelity)

Workday pages are client-rendered and their description markup varies per
tenant, so only title, company and location are captured. The description is
left as PENDING_DESCRIPTION for the user to complete.
"""

import logging

from job_ingest.models import PENDING_DESCRIPTION, UNKNOWN_COMPANY, UNTITLED_POSITION, AtsType, ScrapedJob
from job_ingest.scrapers.base_scraper import BaseATSScraper
from job_ingest.utils.field_extractors import (
    company_from_url,
    extract_first,
    is_structured_remote,
    meta_content,
    page_title,
    select_text,
    structured,
    structured_location,
)
from job_ingest.utils.text_cleaning import has_remote_term

logger = logging.getLogger(__name__)


class WorkdayScraper(BaseATSScraper):
    """Extraction strategy for *.myworkdayjobs.com postings"""

    ats_type = AtsType.WORKDAY

    def scrape(self, url: str, html: str) -> ScrapedJob:
        soup, posting = self.parse_document(html)

        title = extract_first(
            soup,
            [
                structured(posting, "title"),
                select_text("[data-automation-id='jobPostingHeader']", max_len=200),
                select_text("h1", max_len=200),
                meta_content("og:title", strip_suffix=True),
                page_title(),
            ],
            default=UNTITLED_POSITION,
        )

        company = extract_first(
            soup,
            [
                structured(posting, "hiringOrganization", "name"),
                meta_content("og:site_name"),
                # acme.wd5.myworkdayjobs.com -> acme
                lambda _soup: company_from_url(url),
            ],
            default=UNKNOWN_COMPANY,
        )

        location = extract_first(
            soup,
            [
                select_text("[data-automation-id='locations']", max_len=120),
                structured_location(posting),
            ],
        )

        logger.debug("Workday: %s @ %s", title, company)

        return ScrapedJob(
            title=title,
            description=PENDING_DESCRIPTION,
            location=location,
            remote=is_structured_remote(posting) or has_remote_term(title, location),
            apply_url=url,
            company_name=company,
        )
