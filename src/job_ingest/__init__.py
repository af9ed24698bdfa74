"""
job_ingest - ingest job postings from ATS platforms and job aggregators

Scraped postings are normalized into a single record shape and upserted into
a sqlite store keyed by (source type, source key), so repeated or overlapping
runs never create duplicate rows.
"""

__version__ = "0.1.0"
