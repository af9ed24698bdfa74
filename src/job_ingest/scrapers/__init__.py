"""Per-ATS extraction strategies and the registry that dispatches to them"""

from job_ingest.scrapers.base_scraper import BaseATSScraper
from job_ingest.scrapers.generic_scraper import GenericScraper
from job_ingest.scrapers.greenhouse_scraper import GreenhouseScraper
from job_ingest.scrapers.gupy_scraper import GupyScraper
from job_ingest.scrapers.lever_scraper import LeverScraper
from job_ingest.scrapers.scraper_registry import ScraperRegistry, build_default_registry
from job_ingest.scrapers.workday_scraper import WorkdayScraper

__all__ = [
    "BaseATSScraper",
    "GenericScraper",
    "GreenhouseScraper",
    "GupyScraper",
    "LeverScraper",
    "ScraperRegistry",
    "WorkdayScraper",
    "build_default_registry",
]
