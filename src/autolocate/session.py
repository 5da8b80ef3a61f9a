"""
Browser Session - Launch Playwright with the configured browser settings.

One session per test: a Playwright driver, a browser, one context and one
page. The console helpers are installed on the context so every page and
navigation has them.

Example:
    >>> async with BrowserSession(settings.browser) as session:
    ...     await session.page.goto("https://example.com")
"""

from typing import Any, Dict, Optional
import logging

from playwright.async_api import async_playwright

from autolocate.config.settings import BrowserSettings
from autolocate.exceptions import BrowserLaunchError, SessionError
from autolocate.harness.console_helpers import CONSOLE_HELPERS_JS

logger = logging.getLogger(__name__)


class BrowserSession:
    """
    Owns the Playwright driver, browser, context and page for one test.

    Args:
        settings: Browser launch settings
    """

    def __init__(self, settings: Optional[BrowserSettings] = None):
        self.settings = settings or BrowserSettings()
        self._playwright: Any = None
        self._browser: Any = None
        self._context: Any = None
        self._page: Any = None

    @property
    def page(self) -> Any:
        if self._page is None:
            raise SessionError("Browser session not started. Call start() first.")
        return self._page

    @property
    def is_started(self) -> bool:
        return self._page is not None

    def launch_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``BrowserType.launch``."""
        s = self.settings
        options: Dict[str, Any] = {"headless": s.headless, "slow_mo": s.slow_mo}
        if s.launch_args and s.browser_type == "chromium":
            options["args"] = list(s.launch_args)
        return options

    def context_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``Browser.new_context``."""
        s = self.settings
        options: Dict[str, Any] = {
            "viewport": {"width": s.viewport_width, "height": s.viewport_height},
            "ignore_https_errors": s.ignore_https_errors,
        }
        if s.user_agent:
            options["user_agent"] = s.user_agent
        if s.base_url:
            options["base_url"] = s.base_url
        return options

    async def start(self) -> Any:
        """
        Launch the browser and open a page.

        Returns:
            The Playwright page

        Raises:
            BrowserLaunchError: When Playwright or the browser fails to start
        """
        s = self.settings
        try:
            self._playwright = await async_playwright().start()
            self._playwright.selectors.set_test_id_attribute(s.test_id_attribute)
            launcher = getattr(self._playwright, s.browser_type)
            self._browser = await launcher.launch(**self.launch_options())
            self._context = await self._browser.new_context(**self.context_options())
            await self._context.add_init_script(script=CONSOLE_HELPERS_JS)
            self._page = await self._context.new_page()
        except Exception as e:
            await self.close()
            raise BrowserLaunchError(f"Failed to launch browser: {e}", browser_type=s.browser_type) from e

        logger.info(f"Launched {s.browser_type} browser (headless={s.headless}, slow_mo={s.slow_mo})")
        return self._page

    async def close(self) -> None:
        """Close page, context, browser and driver; each step is best-effort."""
        for name in ("_page", "_context", "_browser"):
            resource = getattr(self, name)
            if resource is not None:
                try:
                    await resource.close()
                except Exception as e:
                    logger.debug(f"Closing {name.lstrip('_')} failed: {e}")
                setattr(self, name, None)

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.debug(f"Stopping Playwright failed: {e}")
            self._playwright = None
            logger.info("Browser closed")

    async def __aenter__(self) -> "BrowserSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
