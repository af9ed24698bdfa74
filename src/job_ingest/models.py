"""
Data models for job ingestion

ScrapedJob is the transient contract every extraction strategy and aggregator
connector produces. Company and Job mirror the persisted rows.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

# Placeholder values used when a field cannot be extracted
UNTITLED_POSITION = "Untitled Position"
UNKNOWN_COMPANY = "Unknown Company"
CONFIDENTIAL_COMPANY = "Confidential"
PENDING_DESCRIPTION = 'Description pending. Click "Edit" to add the full job description.'


class AtsType(str, Enum):
    """Extraction strategy that produced a job ("unknown" for aggregator sources)"""

    GREENHOUSE = "greenhouse"
    LEVER = "lever"
    WORKDAY = "workday"
    GUPY = "gupy"
    UNKNOWN = "unknown"


class JobSourceType(str, Enum):
    """Ingestion path a job arrived through; first half of the job identity key"""

    MANUAL = "manual"
    GREENHOUSE = "greenhouse"
    LEVER = "lever"
    GUPY = "gupy"
    ADZUNA = "adzuna"
    REMOTIVE = "remotive"
    PROGRAMATHOR = "programathor"


class ScrapedJob(BaseModel):
    """
    Normalized output of every scraper and connector

    Nothing here is persisted directly; JobIngestor turns it into Company and Job rows.
    """

    title: str = Field(..., description="Job title")
    description: str = Field(..., description="Free-text description or PENDING_DESCRIPTION")
    location: str | None = Field(None, description="Job location as displayed by the source")
    remote: bool | None = Field(None, description="Remote flag, None when the source is silent")
    apply_url: str = Field(..., description="URL the candidate applies through")
    company_name: str = Field(..., description="Company name, exact-match key for upserts")
    company_website: str | None = Field(None, description="Company website if known")
    posted_at: datetime | None = Field(None, description="Best-effort posting date")
    external_id: str | None = Field(
        None, description="Native id from the source API, used as the bulk source key"
    )

    @field_validator("title", "company_name")
    @classmethod
    def strip_required(cls, v: str) -> str:
        """Collapse surrounding whitespace on identity-bearing fields"""
        return v.strip()

    @field_validator("location")
    @classmethod
    def empty_location_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


@dataclass
class Company:
    """Persisted company row"""

    id: int
    name: str
    website: str | None = None
    ats_provider: str | None = None
    career_page_url: str | None = None
    last_crawled_at: str | None = None
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "website": self.website,
            "ats_provider": self.ats_provider,
            "career_page_url": self.career_page_url,
            "last_crawled_at": self.last_crawled_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class Job:
    """Persisted job row, unique on (source_type, source_key)"""

    id: int
    source_type: str
    source_key: str
    ats_type: str
    title: str
    description: str
    location: str | None
    remote: bool
    apply_url: str
    company_id: int
    posted_at: str | None = None
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "source_type": self.source_type,
            "source_key": self.source_key,
            "ats_type": self.ats_type,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "remote": self.remote,
            "apply_url": self.apply_url,
            "company_id": self.company_id,
            "posted_at": self.posted_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
