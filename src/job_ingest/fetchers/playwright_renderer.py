"""
Playwright-based page renderer

Second fetch tier for client-rendered or bot-guarded pages. Each render
launches its own Chromium instance and always closes it, even when
navigation or rendering fails.
"""

import logging

from job_ingest.config import DEFAULT_USER_AGENT
from job_ingest.exceptions import TransientFetchError

logger = logging.getLogger(__name__)


class PlaywrightRenderer:
    """Render a URL in headless Chromium and return the final document HTML"""

    def __init__(
        self,
        timeout_ms: int = 60000,
        headless: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """
        Args:
            timeout_ms: Navigation timeout in milliseconds
            headless: Run browser in headless mode (default: True)
            user_agent: User agent for the rendering page
        """
        self.name = "playwright_renderer"
        self.timeout_ms = timeout_ms
        self.headless = headless
        self.user_agent = user_agent

    def render(self, url: str) -> str:
        """
        Navigate to url, wait for network to go idle, return page.content()

        Raises:
            TransientFetchError: Browser failed to launch, navigate or render
        """
        from playwright.sync_api import sync_playwright

        logger.info("Rendering %s with Playwright (headless=%s)", url, self.headless)

        try:
            with sync_playwright() as playwright:
                browser = playwright.chromium.launch(headless=self.headless)
                try:
                    page = browser.new_page(user_agent=self.user_agent)
                    page.goto(url, wait_until="networkidle", timeout=self.timeout_ms)
                    return page.content()
                finally:
                    browser.close()
        except TransientFetchError:
            raise
        except Exception as e:
            logger.error("Playwright error rendering %s: %s", url, e)
            raise TransientFetchError(url, f"render_error: {str(e)[:100]}") from e
