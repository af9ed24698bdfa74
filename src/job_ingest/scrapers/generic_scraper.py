"""
Generic extraction strategy - fallback for career pages on no recognised ATS

Captures only title, company and location. The full description is left for
the user to fill in by hand.
"""

import logging

from job_ingest.models import PENDING_DESCRIPTION, UNKNOWN_COMPANY, UNTITLED_POSITION, AtsType, ScrapedJob
from job_ingest.scrapers.base_scraper import BaseATSScraper
from job_ingest.utils.field_extractors import (
    company_from_url,
    extract_first,
    meta_content,
    page_title,
    page_title_suffix,
    select_text,
    structured,
)
from job_ingest.utils.text_cleaning import has_remote_term

logger = logging.getLogger(__name__)

LOCATION_SELECTORS = [".location", ".job-location", "[class*='location']"]


class GenericScraper(BaseATSScraper):
    """Best-effort minimal record for any job page"""

    ats_type = AtsType.UNKNOWN

    def scrape(self, url: str, html: str) -> ScrapedJob:
        soup, posting = self.parse_document(html)

        title = extract_first(
            soup,
            [
                structured(posting, "title"),
                select_text("h1", min_len=3, max_len=150),
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
                page_title_suffix(min_len=3, max_len=50),
                lambda _soup: company_from_url(url),
            ],
            default=UNKNOWN_COMPANY,
        )

        location = extract_first(
            soup, [select_text(sel, min_len=2, max_len=80) for sel in LOCATION_SELECTORS]
        )

        logger.info("GenericScraper: %s @ %s", title, company)

        return ScrapedJob(
            title=title,
            description=PENDING_DESCRIPTION,
            location=location,
            remote=has_remote_term(title, location),
            apply_url=url,
            company_name=company,
        )
