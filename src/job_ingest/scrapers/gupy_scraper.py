"""
Gupy extraction strategy

Bulk listing is a two-step lookup: the company's public career page embeds a
numeric careerPageId in its Next.js payload, and the portal API lists jobs by
that id.
"""

import logging
import re
from typing import Any

from job_ingest.exceptions import ParseError
from job_ingest.models import PENDING_DESCRIPTION, UNKNOWN_COMPANY, UNTITLED_POSITION, AtsType, ScrapedJob
from job_ingest.scrapers.base_scraper import BaseATSScraper
from job_ingest.utils.field_extractors import (
    body_text,
    company_from_url,
    extract_first,
    is_structured_remote,
    meta_content,
    page_title,
    select_block_text,
    select_text,
    structured,
    structured_description,
    structured_location,
)
from job_ingest.utils.http_client import http_get, http_get_json
from job_ingest.utils.text_cleaning import clean_text, has_remote_term, html_to_text, parse_datetime

logger = logging.getLogger(__name__)

GUPY_JOBS_API = "https://portal.api.gupy.io/api/v1/jobs"
CAREER_PAGE_ID_PATTERN = re.compile(r'"careerPageId"\s*:\s*(\d+)')
PAGE_SIZE = 100
MAX_PAGES = 20


def extract_career_page_id(html: str) -> str | None:
    match = CAREER_PAGE_ID_PATTERN.search(html or "")
    return match.group(1) if match else None


class GupyScraper(BaseATSScraper):
    """Extraction strategy for *.gupy.io career sites"""

    ats_type = AtsType.GUPY
    supports_listing = True

    def scrape(self, url: str, html: str) -> ScrapedJob:
        soup, posting = self.parse_document(html)

        title = extract_first(
            soup,
            [
                structured(posting, "title"),
                select_text("h1", max_len=200),
                meta_content("og:title", strip_suffix=True),
                page_title(),
            ],
            default=UNTITLED_POSITION,
        )

        description = extract_first(
            soup,
            [
                structured_description(posting),
                select_block_text(".description"),
                select_block_text("[data-testid='text-section']"),
                meta_content("og:description"),
                body_text(),
            ],
            default=PENDING_DESCRIPTION,
        )

        company = extract_first(
            soup,
            [
                structured(posting, "hiringOrganization", "name"),
                select_text(".job-company-name", max_len=100),
                meta_content("og:site_name"),
                # acme.gupy.io -> acme
                lambda _soup: company_from_url(url),
            ],
            default=UNKNOWN_COMPANY,
        )

        location = extract_first(
            soup,
            [
                structured_location(posting),
                select_text(".job-location", max_len=120),
                select_text("[data-testid='job-location']", max_len=120),
            ],
        )

        return ScrapedJob(
            title=title,
            description=description,
            location=location,
            remote=is_structured_remote(posting) or has_remote_term(description, location),
            apply_url=url,
            company_name=company,
            posted_at=parse_datetime(structured(posting, "datePosted")(soup)),
        )

    def list_jobs(self, identifier: str) -> list[ScrapedJob]:
        """
        All published jobs for a Gupy career site

        Args:
            identifier: Career site URL, e.g. https://acme.gupy.io/

        Returns:
            Jobs found, or [] when the page carries no careerPageId
        """
        career_url = identifier if "://" in identifier else f"https://{identifier}"
        page_html = http_get(career_url, timeout=self.timeout).text

        career_page_id = extract_career_page_id(page_html)
        if not career_page_id:
            logger.warning("No careerPageId found on %s, skipping Gupy listing", career_url)
            return []

        jobs: list[ScrapedJob] = []
        offset = 0
        for _ in range(MAX_PAGES):
            data = http_get_json(
                GUPY_JOBS_API,
                params={"careerPageId": career_page_id, "limit": PAGE_SIZE, "offset": offset},
                timeout=self.timeout,
            )
            if not isinstance(data, dict) or not isinstance(data.get("data"), list):
                raise ParseError(f"Unexpected Gupy payload for careerPageId {career_page_id}")

            batch = data["data"]
            for record in batch:
                job = self._job_from_record(record, career_url)
                if job:
                    jobs.append(job)

            pagination = data.get("pagination")
            total = pagination.get("total") if isinstance(pagination, dict) else None
            offset += len(batch)
            if len(batch) < PAGE_SIZE or (isinstance(total, int) and offset >= total):
                break

        logger.info("Gupy careerPageId %s: %s jobs", career_page_id, len(jobs))
        return jobs

    def _job_from_record(self, record: Any, career_url: str) -> ScrapedJob | None:
        if not isinstance(record, dict):
            return None

        job_id = record.get("id")
        title = clean_text(record.get("name"))
        apply_url = record.get("jobUrl") or (
            f"{career_url.rstrip('/')}/jobs/{job_id}" if job_id is not None else None
        )
        if job_id is None or not title or not apply_url:
            return None

        location = ", ".join(
            clean_text(str(record[key])) for key in ("city", "state", "country") if record.get(key)
        )
        workplace = str(record.get("workplaceType", "")).lower()
        remote = bool(record.get("isRemoteWork")) or workplace == "remote" or has_remote_term(
            location, title
        )

        company = (
            clean_text(record.get("careerPageName"))
            or company_from_url(career_url)
            or UNKNOWN_COMPANY
        )

        return ScrapedJob(
            title=title,
            description=html_to_text(record.get("description")) or PENDING_DESCRIPTION,
            location=location or None,
            remote=remote,
            apply_url=apply_url,
            company_name=company,
            posted_at=parse_datetime(record.get("publishedDate")),
            external_id=str(job_id),
        )
