"""
Tests for BrowserSession with a mocked Playwright driver.
"""

import pytest

from autolocate import session as session_module
from autolocate.config import BrowserSettings
from autolocate.exceptions import BrowserLaunchError, SessionError
from autolocate.harness.console_helpers import CONSOLE_HELPERS_JS
from autolocate.session import BrowserSession


class MockClosable:
    def __init__(self, log, name):
        self.log = log
        self.name = name

    async def close(self):
        self.log.append(f"close {self.name}")


class MockContext(MockClosable):
    def __init__(self, log, options):
        super().__init__(log, "context")
        self.options = options
        self.init_scripts = []

    async def add_init_script(self, script=None, path=None):
        self.init_scripts.append(script)

    async def new_page(self):
        return MockClosable(self.log, "page")


class MockBrowser(MockClosable):
    def __init__(self, log, options):
        super().__init__(log, "browser")
        self.options = options
        self.contexts = []

    async def new_context(self, **options):
        context = MockContext(self.log, options)
        self.contexts.append(context)
        return context


class MockBrowserType:
    def __init__(self, log, error=None):
        self.log = log
        self.error = error
        self.browsers = []

    async def launch(self, **options):
        if self.error:
            raise self.error
        browser = MockBrowser(self.log, options)
        self.browsers.append(browser)
        return browser


class MockSelectors:
    def __init__(self):
        self.test_id_attribute = None

    def set_test_id_attribute(self, name):
        self.test_id_attribute = name


class MockPlaywright:
    def __init__(self, launch_error=None):
        self.log = []
        self.selectors = MockSelectors()
        self.chromium = MockBrowserType(self.log, launch_error)
        self.firefox = MockBrowserType(self.log, launch_error)
        self.webkit = MockBrowserType(self.log, launch_error)

    async def stop(self):
        self.log.append("stop")


class MockPlaywrightStarter:
    def __init__(self, playwright):
        self.playwright = playwright

    async def start(self):
        return self.playwright


@pytest.fixture
def driver(monkeypatch):
    playwright = MockPlaywright()
    monkeypatch.setattr(session_module, "async_playwright", lambda: MockPlaywrightStarter(playwright))
    return playwright


class TestBrowserSession:
    """Test launching and closing the browser."""

    @pytest.mark.asyncio
    async def test_start_applies_settings(self, driver):
        settings = BrowserSettings(
            headless=True, slow_mo=0, viewport_width=1280, viewport_height=720,
            base_url="https://example.com", test_id_attribute="data-qa",
        )
        session = BrowserSession(settings)

        page = await session.start()

        assert session.is_started
        assert session.page is page
        browser = driver.chromium.browsers[0]
        assert browser.options["headless"] is True
        assert browser.options["slow_mo"] == 0
        assert "--start-maximized" in browser.options["args"]
        context = browser.contexts[0]
        assert context.options["viewport"] == {"width": 1280, "height": 720}
        assert context.options["base_url"] == "https://example.com"
        assert context.init_scripts == [CONSOLE_HELPERS_JS]
        assert driver.selectors.test_id_attribute == "data-qa"

    @pytest.mark.asyncio
    async def test_non_chromium_gets_no_chromium_args(self, driver):
        session = BrowserSession(BrowserSettings(browser_type="firefox"))

        await session.start()

        assert "args" not in driver.firefox.browsers[0].options

    @pytest.mark.asyncio
    async def test_close_is_ordered_and_idempotent(self, driver):
        session = BrowserSession(BrowserSettings())
        await session.start()

        await session.close()
        await session.close()

        assert driver.log == ["close page", "close context", "close browser", "stop"]
        assert not session.is_started

    @pytest.mark.asyncio
    async def test_context_manager(self, driver):
        async with BrowserSession(BrowserSettings()) as session:
            assert session.is_started

        assert driver.log[-1] == "stop"

    @pytest.mark.asyncio
    async def test_launch_failure(self, monkeypatch):
        playwright = MockPlaywright(launch_error=RuntimeError("Executable doesn't exist"))
        monkeypatch.setattr(session_module, "async_playwright", lambda: MockPlaywrightStarter(playwright))
        session = BrowserSession(BrowserSettings(browser_type="webkit"))

        with pytest.raises(BrowserLaunchError) as exc_info:
            await session.start()

        assert exc_info.value.browser_type == "webkit"
        assert "Executable doesn't exist" in str(exc_info.value)
        assert playwright.log == ["stop"]

    def test_page_before_start(self):
        with pytest.raises(SessionError):
            BrowserSession().page

    def test_options_without_optional_values(self):
        session = BrowserSession(BrowserSettings(user_agent=None, launch_args=[]))

        assert "user_agent" not in session.context_options()
        assert "base_url" not in session.context_options()
        assert "args" not in session.launch_options()
