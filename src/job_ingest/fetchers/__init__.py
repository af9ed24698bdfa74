"""Page fetchers: plain HTTP with a Playwright render fallback"""

from job_ingest.fetchers.html_fetcher import MIN_HTML_LENGTH, HtmlFetcher, needs_render
from job_ingest.fetchers.playwright_renderer import PlaywrightRenderer

__all__ = ["HtmlFetcher", "PlaywrightRenderer", "MIN_HTML_LENGTH", "needs_render"]
