"""
Lever extraction strategy

Lever posting pages title themselves "Company - Job Title", the reverse of
most boards, so the title and company fallbacks read <title> from opposite ends.
"""

import logging
from typing import Any
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from job_ingest.exceptions import ParseError
from job_ingest.models import PENDING_DESCRIPTION, UNKNOWN_COMPANY, UNTITLED_POSITION, AtsType, ScrapedJob
from job_ingest.scrapers.base_scraper import BaseATSScraper
from job_ingest.utils.field_extractors import (
    body_text,
    extract_first,
    is_structured_remote,
    meta_content,
    page_title,
    select_all_block_text,
    select_text,
    split_title,
    structured,
    structured_description,
    structured_location,
)
from job_ingest.utils.http_client import http_get_json
from job_ingest.utils.text_cleaning import (
    clean_text,
    has_remote_term,
    html_to_text,
    nested_text,
    parse_datetime,
)

logger = logging.getLogger(__name__)

LEVER_API = "https://api.lever.co/v0/postings/{site}"


def extract_site(identifier: str) -> str | None:
    """
    Lever site name from a jobs.lever.co URL, or the identifier itself if bare

    Examples:
        https://jobs.lever.co/acme            -> acme
        https://jobs.lever.co/acme/3f2c-...   -> acme
        acme                                  -> acme
    """
    identifier = (identifier or "").strip()
    if not identifier:
        return None

    if "/" not in identifier and "." not in identifier:
        return identifier

    parsed = urlparse(identifier if "://" in identifier else f"https://{identifier}")
    if "lever.co" not in (parsed.hostname or ""):
        return None

    segments = [s for s in parsed.path.split("/") if s]
    return segments[0] if segments else None


def _title_part(index: int):
    """Part of a "Company - Job Title" <title>, only when both parts are present"""

    def extractor(soup: BeautifulSoup) -> str | None:
        if soup.title is None:
            return None
        parts = split_title(soup.title.get_text())
        if len(parts) < 2:
            return None
        return parts[index]

    return extractor


class LeverScraper(BaseATSScraper):
    """Extraction strategy for jobs.lever.co postings"""

    ats_type = AtsType.LEVER
    supports_listing = True

    def scrape(self, url: str, html: str) -> ScrapedJob:
        soup, posting = self.parse_document(html)

        title = extract_first(
            soup,
            [
                structured(posting, "title"),
                select_text(".posting-headline h2", max_len=200),
                select_text("h2.title", max_len=200),
                _title_part(-1),
                meta_content("og:title"),
                page_title(),
            ],
            default=UNTITLED_POSITION,
        )

        description = extract_first(
            soup,
            [
                structured_description(posting),
                select_all_block_text(".section-wrapper .section"),
                select_all_block_text(".section-wrapper"),
                meta_content("og:description"),
                body_text(),
            ],
            default=PENDING_DESCRIPTION,
        )

        company = extract_first(
            soup,
            [
                structured(posting, "hiringOrganization", "name"),
                meta_content("og:site_name"),
                _title_part(0),
                lambda _soup: extract_site(url),
            ],
            default=UNKNOWN_COMPANY,
        )

        location = extract_first(
            soup,
            [
                structured_location(posting),
                select_text(".posting-categories .location", max_len=120),
                select_text(".location", max_len=120),
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
        All published postings for a Lever site

        Args:
            identifier: jobs.lever.co URL or bare site name
        """
        site = extract_site(identifier)
        if not site:
            raise ParseError(f"Cannot derive Lever site from {identifier!r}")

        data = http_get_json(LEVER_API.format(site=site), params={"mode": "json"}, timeout=self.timeout)
        if not isinstance(data, list):
            raise ParseError(f"Unexpected Lever payload for site {site}")

        jobs = []
        for record in data:
            job = self._job_from_record(record, site)
            if job:
                jobs.append(job)

        logger.info("Lever site %s: %s jobs", site, len(jobs))
        return jobs

    def _job_from_record(self, record: Any, site: str) -> ScrapedJob | None:
        if not isinstance(record, dict):
            return None

        job_id = record.get("id")
        title = clean_text(record.get("text"))
        apply_url = record.get("hostedUrl") or record.get("applyUrl")
        if not job_id or not title or not apply_url:
            logger.debug("Skipping incomplete Lever record on site %s: %r", site, job_id)
            return None

        location = nested_text(record, "categories", "location")
        description = self._description(record) or PENDING_DESCRIPTION
        remote = str(record.get("workplaceType", "")).lower() == "remote" or has_remote_term(
            location, title
        )

        return ScrapedJob(
            title=title,
            description=description,
            location=location,
            remote=remote,
            apply_url=apply_url,
            company_name=site,
            posted_at=parse_datetime(record.get("createdAt")),
            external_id=str(job_id),
        )

    @staticmethod
    def _description(record: dict[str, Any]) -> str:
        """Opening text, then each titled list section, then the closing text"""
        blocks = [record.get("descriptionPlain") or html_to_text(record.get("description"))]

        for section in record.get("lists") or []:
            if not isinstance(section, dict):
                continue
            heading = clean_text(section.get("text"))
            body = html_to_text(section.get("content"))
            if heading or body:
                blocks.append(f"{heading}\n{body}".strip())

        blocks.append(record.get("additionalPlain") or html_to_text(record.get("additional")))
        return "\n\n".join(block.strip() for block in blocks if block and block.strip())
