"""
Job Ingestor - normalizes ScrapedJob records into Company + Job rows

Every ingestion path (manual import, ATS crawl, aggregator connectors) funnels
through JobIngestor.ingest(), so identity and update rules live in one place:

- Company: exact-name get-or-create, existing rows never modified here
- Job: unique on (source_type, source_key); re-ingestion refreshes title,
  description, location, remote and posted_at only
"""

import logging
from dataclasses import dataclass

from job_ingest.database import JobStore
from job_ingest.models import AtsType, Company, Job, JobSourceType, ScrapedJob

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    job: Job
    company: Company
    created: bool


def build_source_key(scraped: ScrapedJob, prefer_external_id: bool = True) -> str:
    """
    Second half of the job identity key

    Bulk/API sources key off the native id; manual imports (and any API record
    without an id) key off the URL.
    """
    if prefer_external_id and scraped.external_id:
        return scraped.external_id
    return f"url:{scraped.apply_url}"


class JobIngestor:
    """Idempotent create-or-update of scraped jobs"""

    def __init__(self, store: JobStore):
        self.store = store

    def ingest(
        self,
        scraped: ScrapedJob,
        source_type: JobSourceType | str,
        source_key: str,
        ats_type: AtsType | str = AtsType.UNKNOWN,
    ) -> IngestResult:
        """
        Upsert the company and the job for one scraped record

        Args:
            scraped: Normalized record from a scraper or connector
            source_type: Ingestion path tag (first half of the identity key)
            source_key: Identity within that source type
            ats_type: Extraction strategy that produced the record

        Returns:
            IngestResult with the stored job, its company and whether the job was new
        """
        source_type = JobSourceType(source_type).value
        ats_type = AtsType(ats_type).value

        company = self.store.upsert_company(scraped.company_name, website=scraped.company_website)

        posted_at = scraped.posted_at.isoformat() if scraped.posted_at else None
        remote = bool(scraped.remote)

        update_fields = {
            "title": scraped.title,
            "description": scraped.description,
            "location": scraped.location,
            "remote": remote,
            "posted_at": posted_at,
        }
        create_fields = {
            **update_fields,
            "ats_type": ats_type,
            "apply_url": scraped.apply_url,
            "company_id": company.id,
        }

        job, created = self.store.upsert_job(source_type, source_key, create_fields, update_fields)

        if created:
            logger.debug("Created job %s (%s:%s) %s", job.id, source_type, source_key, job.title)
        else:
            logger.debug("Updated job %s (%s:%s)", job.id, source_type, source_key)

        return IngestResult(job=job, company=company, created=created)
