"""
autolocate - Hint-based element resolution for Playwright tests.

Fill, click and wait for elements by what a person would call them
("Username", "Login", /password/i) instead of brittle selectors, with
ranked locator suggestions and a step/failure harness for debugging.

Example:
    >>> from autolocate import AutoActions
    >>> actions = AutoActions()
    >>> await actions.auto_fill(page, re.compile("username", re.I), "test18")
    >>> await actions.auto_click(page, "Login")
"""

__version__ = "0.1.0"

# Public API exports
from autolocate.config.settings import Settings
from autolocate.engine.actions import AutoActions
from autolocate.engine.resolver import LocatorResolver
from autolocate.engine.run_context import RunContext
from autolocate.engine.suggestions import LocatorSuggester, LocatorSuggestion
from autolocate.harness.step import HarnessState, StepHarness
from autolocate.session import BrowserSession

__all__ = [
    "AutoActions",
    "LocatorResolver",
    "RunContext",
    "LocatorSuggester",
    "LocatorSuggestion",
    "HarnessState",
    "StepHarness",
    "BrowserSession",
    "Settings",
    "__version__",
]
