"""
Base class for aggregator connectors

Connectors pull listings straight from a job board's own API or HTML and
bypass ATS detection. Each listing is keyed by the board's native id and
tagged with the board's own source type.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from job_ingest.jobs.job_ingestor import JobIngestor, build_source_key
from job_ingest.models import AtsType, JobSourceType, ScrapedJob
from job_ingest.utils.http_client import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class BaseJobSource(ABC):
    """Template for a connector: fetch_listings() + import_jobs()"""

    source_type: JobSourceType

    def __init__(self, timeout: int = DEFAULT_TIMEOUT):
        self.name = self.source_type.value
        self.timeout = timeout

    def is_configured(self) -> bool:
        """False when required credentials are missing; the connector then no-ops"""
        return True

    @abstractmethod
    def fetch_listings(self) -> list[ScrapedJob]:
        """
        Pull one batch of listings, already filtered and normalized

        Every returned ScrapedJob must carry external_id.
        """

    def import_jobs(self, ingestor: JobIngestor) -> dict[str, Any]:
        """
        Fetch and upsert one batch

        Never raises: a failure of the whole connector is logged and counted,
        and a single bad listing does not stop the rest.

        Returns:
            Stats dictionary for this connector
        """
        stats: dict[str, Any] = {
            "source": self.name,
            "fetched": 0,
            "jobs_created": 0,
            "jobs_updated": 0,
            "errors": 0,
        }

        if not self.is_configured():
            logger.warning("%s connector is not configured, skipping", self.name)
            stats["skipped"] = True
            return stats

        logger.info("Fetching listings from %s", self.name)
        try:
            listings = self.fetch_listings()
        except Exception as e:
            logger.error("%s connector failed: %s", self.name, e)
            stats["errors"] += 1
            return stats

        stats["fetched"] = len(listings)

        for scraped in listings:
            try:
                result = ingestor.ingest(
                    scraped,
                    source_type=self.source_type,
                    source_key=build_source_key(scraped),
                    ats_type=AtsType.UNKNOWN,
                )
            except Exception as e:
                logger.error("%s: failed to store %r: %s", self.name, scraped.external_id, e)
                stats["errors"] += 1
                continue

            if result.created:
                stats["jobs_created"] += 1
            else:
                stats["jobs_updated"] += 1

        logger.info(
            "%s: %s fetched, %s created, %s updated, %s errors",
            self.name,
            stats["fetched"],
            stats["jobs_created"],
            stats["jobs_updated"],
            stats["errors"],
        )
        return stats
