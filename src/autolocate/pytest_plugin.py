"""
Pytest plugin - Fixtures for hint-based Playwright tests.

Registered through the ``pytest11`` entry point, so installing the package
is enough. A test asks for the helpers it needs:

    async def test_login(page, auto_fill, auto_click, auto_expect_visible, debug_step):
        await page.goto("https://example.com/login")
        await debug_step(page, "Fill credentials")
        await auto_fill(page, re.compile("username", re.I), "test18")
        await auto_fill(page, re.compile("password", re.I), "test123")
        await auto_click(page, "Login")
        await auto_expect_visible(page, "Welcome")

The ``page`` fixture hands the test outcome to the step harness: a passing
test closes the browser, a failing one captures a DOM snapshot and a
screenshot first (and, with ``--autolocate-interactive`` or ``PWDEBUG``,
keeps the browser open for inspection).
"""

from functools import partial
from typing import Any, AsyncGenerator, Callable, Dict
import logging

import pytest
import pytest_asyncio

from autolocate.config import Settings, load_config
from autolocate.engine.actions import AutoActions
from autolocate.engine.instruction_parser import (
    SmartActionRunner,
    fix_common_issues as _fix_common_issues,
    understand_prompt as _understand_prompt,
)
from autolocate.engine.page_analysis import (
    analyze_page_structure as _analyze_page_structure,
    generate_smart_locators as _generate_smart_locators,
)
from autolocate.engine.run_context import RunContext
from autolocate.engine.suggestions import (
    LocatorSuggester,
    replace_dummy_locators as _replace_dummy_locators,
    suggest_dummy_replacements as _suggest_dummy_replacements,
)
from autolocate.harness.step import StepHarness
from autolocate.session import BrowserSession

logger = logging.getLogger(__name__)


def pytest_addoption(parser):
    """Add autolocate command-line options to pytest."""
    group = parser.getgroup("autolocate", "hint-based Playwright locators")
    group.addoption(
        "--autolocate-config", action="store", default=None,
        help="Path to an autolocate YAML config file",
    )
    group.addoption(
        "--autolocate-headless", action="store_true", default=False,
        help="Run the browser headless",
    )
    group.addoption(
        "--autolocate-interactive", action="store_true", default=False,
        help="On failure keep the browser open and suspend for inspection",
    )
    group.addoption(
        "--autolocate-artifacts-dir", action="store", default=None,
        help="Directory for failure DOM snapshots and screenshots",
    )


@pytest.hookimpl(hookwrapper=True, tryfirst=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase's report (and the call exception) on the test item."""
    outcome = yield
    rep = outcome.get_result()
    setattr(item, f"rep_{rep.when}", rep)
    if rep.when == "call" and call.excinfo is not None:
        item.autolocate_error = call.excinfo.value


def settings_overrides(config: Any) -> Dict[str, Any]:
    """Settings overrides from pytest command-line options."""
    overrides: Dict[str, Any] = {}
    if config.getoption("autolocate_headless"):
        overrides.setdefault("browser", {})["headless"] = True
    if config.getoption("autolocate_interactive"):
        overrides.setdefault("harness", {})["interactive_on_failure"] = True
    artifacts = config.getoption("autolocate_artifacts_dir")
    if artifacts:
        overrides.setdefault("harness", {})["artifacts_dir"] = artifacts
    return overrides


def phase_failed(node: Any) -> bool:
    """Whether the setup or call phase of a test failed."""
    for when in ("setup", "call"):
        rep = getattr(node, f"rep_{when}", None)
        if rep is not None and rep.failed:
            return True
    return False


# =============================================================================
# Core fixtures
# =============================================================================

@pytest.fixture
def autolocate_settings(request) -> Settings:
    """Settings from config file, environment and pytest options."""
    return load_config(
        config_path=request.config.getoption("autolocate_config"),
        **settings_overrides(request.config),
    )


@pytest.fixture
def run_context(request, autolocate_settings: Settings) -> RunContext:
    """Memory scoped to the current test."""
    return RunContext(
        run_id=request.node.nodeid,
        max_learned=autolocate_settings.resolver.max_learned,
    )


@pytest.fixture
def auto_actions(autolocate_settings: Settings, run_context: RunContext) -> AutoActions:
    return AutoActions(settings=autolocate_settings, run_context=run_context)


@pytest_asyncio.fixture
async def browser_session(autolocate_settings: Settings) -> AsyncGenerator[BrowserSession, None]:
    """A launched browser with one page."""
    session = BrowserSession(autolocate_settings.browser)
    await session.start()
    yield session
    await session.close()


@pytest.fixture
def step_harness(autolocate_settings: Settings, browser_session: BrowserSession) -> StepHarness:
    return StepHarness(autolocate_settings.harness, close=browser_session.close)


@pytest_asyncio.fixture
async def page(request, browser_session: BrowserSession, step_harness: StepHarness):
    """
    The Playwright page for the test.

    On teardown the test outcome drives the harness to PASSED or FAILED.
    """
    yield browser_session.page

    failed = phase_failed(request.node)
    error = getattr(request.node, "autolocate_error", None)
    await step_harness.finish(browser_session.page, failed=failed, error=error)


# =============================================================================
# Action fixtures
# =============================================================================

@pytest.fixture
def auto_fill(auto_actions: AutoActions) -> Callable:
    """``await auto_fill(page, hint, value)``"""
    return auto_actions.auto_fill


@pytest.fixture
def auto_click(auto_actions: AutoActions) -> Callable:
    """``await auto_click(page, hint)``"""
    return auto_actions.auto_click


@pytest.fixture
def auto_expect_visible(auto_actions: AutoActions) -> Callable:
    """``await auto_expect_visible(page, hint, timeout_ms=20000)``"""
    return auto_actions.auto_expect_visible


@pytest.fixture
def debug_step(step_harness: StepHarness) -> Callable:
    """``await debug_step(page, "label")``"""
    return step_harness.debug_step


@pytest.fixture
def smart_action(auto_actions: AutoActions) -> Callable:
    """``await smart_action(page, 'click "Login"')``"""
    return SmartActionRunner(auto_actions).run


@pytest.fixture
def fix_common_issues() -> Callable:
    """``await fix_common_issues(page, error)``"""
    return _fix_common_issues


# =============================================================================
# Suggestion and analysis fixtures
# =============================================================================

@pytest.fixture
def locator_suggester(autolocate_settings: Settings) -> LocatorSuggester:
    return LocatorSuggester(max_matches=autolocate_settings.resolver.max_suggestion_matches)


@pytest.fixture
def suggest_locators(locator_suggester: LocatorSuggester) -> Callable:
    """``await suggest_locators(page, hint)``"""
    return locator_suggester.suggest


@pytest.fixture
def suggest_dummy_replacements(locator_suggester: LocatorSuggester) -> Callable:
    """``await suggest_dummy_replacements(page, test_code)``"""
    return partial(_suggest_dummy_replacements, suggester=locator_suggester)


@pytest.fixture
def replace_dummy_locators(auto_actions: AutoActions, locator_suggester: LocatorSuggester) -> Callable:
    """``await replace_dummy_locators(page, test_code)``"""
    async def replace(page: Any, text: str) -> str:
        await auto_actions.waiter.ensure_ready(page)
        return await _replace_dummy_locators(page, text, suggester=locator_suggester)
    return replace


@pytest.fixture
def learn_from_test(run_context: RunContext) -> Callable:
    """``learn_from_test(test_code)``; returns the number of locators learned"""
    def learn(code: str) -> int:
        learned = run_context.learner.learn_from_test(code)
        logger.info(f"Learned {learned} locator(s) from test code")
        return learned
    return learn


@pytest.fixture
def understand_prompt() -> Callable:
    """``understand_prompt(prompt)``"""
    return _understand_prompt


@pytest.fixture
def analyze_page_structure() -> Callable:
    """``await analyze_page_structure(page)``"""
    return _analyze_page_structure


@pytest.fixture
def generate_smart_locators() -> Callable:
    """``await generate_smart_locators(page, hint)``"""
    return _generate_smart_locators
