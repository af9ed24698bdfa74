"""
Two-tier HTML fetcher

Tier 1 is a plain GET with a browser user agent. When that yields nothing,
or a document shorter than min_length (a block page or a JS shell), the URL
is rendered once with Playwright.
"""

import logging

from job_ingest.config import DEFAULT_USER_AGENT
from job_ingest.exceptions import TransientFetchError
from job_ingest.fetchers.playwright_renderer import PlaywrightRenderer
from job_ingest.utils.http_client import http_get

logger = logging.getLogger(__name__)

# Below this many characters a page is assumed to be a shell or a block page
MIN_HTML_LENGTH = 2000


def needs_render(html: str | None, min_length: int = MIN_HTML_LENGTH) -> bool:
    """Escalation predicate: empty or implausibly short static HTML"""
    return not html or len(html) < min_length


class HtmlFetcher:
    """Fetch job posting HTML, escalating to a headless render when needed"""

    def __init__(
        self,
        timeout: int = 15,
        min_length: int = MIN_HTML_LENGTH,
        renderer: PlaywrightRenderer | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.timeout = timeout
        self.min_length = min_length
        self.renderer = renderer or PlaywrightRenderer()
        self.user_agent = user_agent

    def fetch_static(self, url: str) -> str | None:
        """Plain GET. None on any fetch failure so the caller can escalate."""
        try:
            response = http_get(url, headers={"User-Agent": self.user_agent}, timeout=self.timeout)
        except TransientFetchError as e:
            logger.info("Static fetch failed for %s (%s), will try rendering", url, e.reason)
            return None
        return response.text

    def fetch(self, url: str) -> str:
        """
        Fetch HTML for url

        Returns:
            Static HTML when it passes the size check, otherwise rendered HTML

        Raises:
            TransientFetchError: Both tiers failed to produce any content
        """
        html = self.fetch_static(url)
        if not needs_render(html, self.min_length):
            return html  # type: ignore[return-value]

        logger.info(
            "Static HTML for %s is %s chars (< %s), escalating to headless render",
            url,
            len(html or ""),
            self.min_length,
        )

        try:
            rendered = self.renderer.render(url)
        except TransientFetchError:
            if html:
                logger.warning("Render failed for %s, using short static HTML", url)
                return html
            raise

        if rendered:
            return rendered
        if html:
            return html
        raise TransientFetchError(url, "empty_document")
