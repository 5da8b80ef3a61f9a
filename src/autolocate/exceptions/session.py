"""
Browser session and harness exceptions.
"""

from autolocate.exceptions.base import AutolocateError


class SessionError(AutolocateError):
    """Base exception for browser session errors."""
    pass


class BrowserLaunchError(SessionError):
    """
    Error launching the browser.

    Raised when Playwright fails to start the configured browser, which
    could be due to:
    - Missing browser binaries (run ``playwright install``)
    - Invalid launch arguments
    """

    def __init__(self, message: str, browser_type: str | None = None):
        super().__init__(message, {"browser_type": browser_type})
        self.browser_type = browser_type


class HarnessStateError(AutolocateError):
    """
    Invalid step harness transition.

    Raised when, for example, a step is run after the test has finished.
    """

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot move harness from {current} to {requested}",
            {"current": current, "requested": requested},
        )
        self.current = current
        self.requested = requested
