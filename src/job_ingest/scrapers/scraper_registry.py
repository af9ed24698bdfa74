"""
Scraper registry - routes ATS classifier results to extraction strategies
"""

import logging

from job_ingest.exceptions import UnsupportedSourceError
from job_ingest.models import AtsType
from job_ingest.scrapers.base_scraper import BaseATSScraper
from job_ingest.scrapers.generic_scraper import GenericScraper
from job_ingest.scrapers.greenhouse_scraper import GreenhouseScraper
from job_ingest.scrapers.gupy_scraper import GupyScraper
from job_ingest.scrapers.lever_scraper import LeverScraper
from job_ingest.scrapers.workday_scraper import WorkdayScraper
from job_ingest.utils.http_client import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class ScraperRegistry:
    """Maps each AtsType to the strategy that handles it"""

    def __init__(self):
        self.scrapers: dict[AtsType, BaseATSScraper] = {}

    def register(self, scraper: BaseATSScraper) -> None:
        """Register a strategy under its ats_type, replacing any previous one"""
        self.scrapers[scraper.ats_type] = scraper
        logger.debug("Registered scraper: %s -> %s", scraper.ats_type.value, scraper.name)

    def get_scraper(self, ats: AtsType | str) -> BaseATSScraper:
        """
        Strategy for a classifier result

        Raises:
            UnsupportedSourceError: Nothing registered for this tag
        """
        try:
            ats_type = AtsType(ats)
        except ValueError as e:
            raise UnsupportedSourceError(str(ats)) from e

        scraper = self.scrapers.get(ats_type)
        if scraper is None:
            raise UnsupportedSourceError(ats_type.value)
        return scraper

    def get_lister(self, ats: AtsType | str) -> BaseATSScraper:
        """
        Strategy for a provider tag, restricted to ones with a bulk listing API

        Raises:
            UnsupportedSourceError: Unknown tag, or a strategy without list_jobs
        """
        scraper = self.get_scraper(ats)
        if not scraper.supports_listing:
            raise UnsupportedSourceError(scraper.ats_type.value, capability="list_jobs")
        return scraper

    def get_registered_types(self) -> list[str]:
        return [ats.value for ats in self.scrapers]


def build_default_registry(timeout: int = DEFAULT_TIMEOUT) -> ScraperRegistry:
    """Registry with every built-in strategy; unknown URLs go to GenericScraper"""
    registry = ScraperRegistry()
    for scraper in (
        GreenhouseScraper(timeout=timeout),
        LeverScraper(timeout=timeout),
        WorkdayScraper(timeout=timeout),
        GupyScraper(timeout=timeout),
        GenericScraper(timeout=timeout),
    ):
        registry.register(scraper)
    return registry
