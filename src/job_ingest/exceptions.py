"""
Exception hierarchy for job ingestion

Per-source failures are caught at the orchestrator and connector boundaries
and turned into counters. Only the manual import path lets them reach its caller.
"""


class IngestionError(Exception):
    """Base class for all ingestion errors"""


class TransientFetchError(IngestionError):
    """Network failure, timeout or non-2xx response from a single source"""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class ParseError(IngestionError):
    """Source returned a payload whose structure we do not recognise"""


class UnsupportedSourceError(IngestionError):
    """No extraction strategy (or no bulk listing) exists for a classifier result"""

    def __init__(self, ats_type: str, capability: str = "scrape"):
        self.ats_type = ats_type
        self.capability = capability
        super().__init__(f"Unsupported source '{ats_type}' for {capability}")


class ConfigurationError(IngestionError):
    """Required provider configuration (e.g. API credentials) is missing"""


class InvalidImportRequest(IngestionError):
    """Manual import request is malformed (missing or non-http URL)"""
