"""
Greenhouse extraction strategy

Single pages: boards.greenhouse.io / job-boards.greenhouse.io postings.
Bulk listing: the public Job Board API,
    GET https://boards-api.greenhouse.io/v1/boards/{token}/jobs?content=true
"""

import logging
from typing import Any
from urllib.parse import parse_qs, urlparse

from job_ingest.exceptions import ParseError
from job_ingest.models import PENDING_DESCRIPTION, UNKNOWN_COMPANY, UNTITLED_POSITION, AtsType, ScrapedJob
from job_ingest.scrapers.base_scraper import BaseATSScraper
from job_ingest.utils.field_extractors import (
    body_text,
    extract_first,
    is_structured_remote,
    meta_content,
    page_title,
    page_title_match,
    page_title_suffix,
    select_block_text,
    select_text,
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

GREENHOUSE_API = "https://boards-api.greenhouse.io/v1/boards/{token}/jobs"


def extract_board_token(identifier: str) -> str | None:
    """
    Board token from a Greenhouse URL, or the identifier itself if it is a bare token

    Examples:
        https://boards.greenhouse.io/acme              -> acme
        https://job-boards.greenhouse.io/acme/jobs/123 -> acme
        https://boards.greenhouse.io/embed/job_board?for=acme -> acme
        acme                                           -> acme
    """
    identifier = (identifier or "").strip()
    if not identifier:
        return None

    if "/" not in identifier and "." not in identifier:
        return identifier

    parsed = urlparse(identifier if "://" in identifier else f"https://{identifier}")
    if "greenhouse.io" not in (parsed.hostname or ""):
        return None

    for_param = parse_qs(parsed.query).get("for")
    if for_param:
        return for_param[0]

    segments = [s for s in parsed.path.split("/") if s]
    if segments and segments[0] not in ("embed", "v1"):
        return segments[0]
    return None


class GreenhouseScraper(BaseATSScraper):
    """Extraction strategy for Greenhouse-hosted job boards"""

    ats_type = AtsType.GREENHOUSE
    supports_listing = True

    def scrape(self, url: str, html: str) -> ScrapedJob:
        soup, posting = self.parse_document(html)

        title = extract_first(
            soup,
            [
                structured(posting, "title"),
                select_text("h1", max_len=200),
                select_text(".app-title"),
                meta_content("og:title", strip_suffix=True),
                page_title(),
            ],
            default=UNTITLED_POSITION,
        )

        description = extract_first(
            soup,
            [
                structured_description(posting),
                select_block_text("#content"),
                select_block_text(".job__description"),
                select_block_text(".content"),
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
                # "Job Application for Senior Engineer at Acme"
                page_title_match(r"\bat\s+(.+)$"),
                page_title_suffix(),
                lambda _soup: extract_board_token(url),
            ],
            default=UNKNOWN_COMPANY,
        )

        location = extract_first(
            soup,
            [
                structured_location(posting),
                select_text(".location", max_len=120),
                select_text(".job__location", max_len=120),
                select_text("[data-mapped='true']", max_len=120),
            ],
        )

        posted_at = parse_datetime(
            extract_first(
                soup,
                [
                    structured(posting, "datePosted"),
                    meta_content("article:published_time"),
                ],
            )
        )

        return ScrapedJob(
            title=title,
            description=description,
            location=location,
            remote=is_structured_remote(posting) or has_remote_term(description, location),
            apply_url=url,
            company_name=company,
            posted_at=posted_at,
        )

    def list_jobs(self, identifier: str) -> list[ScrapedJob]:
        """
        All open jobs on a Greenhouse board

        Args:
            identifier: Board URL or bare board token

        Raises:
            ParseError: No board token could be derived, or the payload has no job list
            TransientFetchError: API unreachable or returned non-2xx
        """
        token = extract_board_token(identifier)
        if not token:
            raise ParseError(f"Cannot derive Greenhouse board token from {identifier!r}")

        data = http_get_json(
            GREENHOUSE_API.format(token=token), params={"content": "true"}, timeout=self.timeout
        )
        if not isinstance(data, dict) or not isinstance(data.get("jobs"), list):
            raise ParseError(f"Unexpected Greenhouse payload for board {token}")

        jobs = []
        for record in data["jobs"]:
            job = self._job_from_record(record, token)
            if job:
                jobs.append(job)

        logger.info("Greenhouse board %s: %s jobs", token, len(jobs))
        return jobs

    def _job_from_record(self, record: Any, token: str) -> ScrapedJob | None:
        """Map one Job Board API record, None if it lacks id/title/url"""
        if not isinstance(record, dict):
            return None

        job_id = record.get("id")
        title = clean_text(record.get("title"))
        apply_url = record.get("absolute_url")
        if job_id is None or not title or not apply_url:
            logger.debug("Skipping incomplete Greenhouse record on board %s: %r", token, job_id)
            return None

        location = nested_text(record, "location", "name")
        description = html_to_text(record.get("content"), unescape=True) or PENDING_DESCRIPTION

        return ScrapedJob(
            title=title,
            description=description,
            location=location,
            remote=has_remote_term(location, title),
            apply_url=apply_url,
            company_name=clean_text(record.get("company_name")) or token,
            posted_at=parse_datetime(record.get("first_published") or record.get("updated_at")),
            external_id=str(job_id),
        )
