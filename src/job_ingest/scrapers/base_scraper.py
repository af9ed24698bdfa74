"""
Base scraper class - all ATS extraction strategies inherit from this
"""

from abc import ABC, abstractmethod
from typing import Any

from bs4 import BeautifulSoup

from job_ingest.exceptions import UnsupportedSourceError
from job_ingest.models import AtsType, ScrapedJob
from job_ingest.utils.field_extractors import find_job_posting, make_soup, strip_noise
from job_ingest.utils.http_client import DEFAULT_TIMEOUT


class BaseATSScraper(ABC):
    """
    Abstract base class for per-ATS extraction strategies

    Every strategy parses a single fetched page. Strategies for ATS platforms
    with a public listing API also override list_jobs() and set
    supports_listing = True.
    """

    ats_type: AtsType = AtsType.UNKNOWN
    supports_listing: bool = False

    def __init__(self, timeout: int = DEFAULT_TIMEOUT):
        self.name = self.__class__.__name__.replace("Scraper", "").lower()
        self.timeout = timeout

    @abstractmethod
    def scrape(self, url: str, html: str) -> ScrapedJob:
        """
        Parse one already-fetched job posting

        Never raises on unexpected markup: each field falls back to a
        placeholder or None.

        Args:
            url: URL the HTML was fetched from (becomes apply_url)
            html: Page HTML

        Returns:
            ScrapedJob for the posting
        """

    def list_jobs(self, identifier: str) -> list[ScrapedJob]:
        """
        Enumerate every open posting for a company via the ATS API

        Args:
            identifier: Career page URL or board token stored on the company

        Returns:
            List of ScrapedJob objects with external_id set

        Raises:
            UnsupportedSourceError: This ATS has no bulk listing API
        """
        raise UnsupportedSourceError(self.ats_type.value, capability="list_jobs")

    # Helper methods available to all scrapers

    def parse_document(self, html: str) -> tuple[BeautifulSoup, dict[str, Any]]:
        """
        Parse HTML into a noise-free soup plus any JSON-LD JobPosting

        Returns:
            Tuple of (soup without script/style/nav/footer, JobPosting dict or {})
        """
        soup = make_soup(html)
        posting = find_job_posting(soup)
        return strip_noise(soup), posting
