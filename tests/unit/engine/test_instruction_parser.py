"""
Tests for the instruction parser - pattern matching and the smart action runner.
"""

import pytest

from autolocate.config import ResolverSettings, Settings
from autolocate.engine import instruction_parser
from autolocate.engine.actions import AutoActions
from autolocate.engine.instruction_parser import (
    ActionType,
    SmartActionRunner,
    TestAction,
    extract_description,
    extract_test_name,
    fix_common_issues,
    is_recoverable,
    understand_prompt,
)
from autolocate.exceptions import ElementNotFoundError, VisibilityTimeoutError

from .fakes import FakeElement, FakePage


class TestPatternMatching:
    """Test phrase recognition."""

    def test_navigation(self):
        reqs = understand_prompt("go to https://example.com/login")

        assert len(reqs.actions) == 1
        assert reqs.actions[0].type is ActionType.NAVIGATE
        assert reqs.actions[0].url == "https://example.com/login"

    def test_login_expands_to_two_fills(self):
        reqs = understand_prompt("login with username test18 and password test123")

        assert [(a.type, a.target, a.value) for a in reqs.actions] == [
            (ActionType.FILL, "username", "test18"),
            (ActionType.FILL, "password", "test123"),
        ]

    @pytest.mark.parametrize("instruction,expected_target", [
        ('click "Sign in"', "Sign in"),
        ("Click on 'Submit'", "Submit"),
    ])
    def test_click(self, instruction, expected_target):
        reqs = understand_prompt(instruction)

        assert reqs.actions[0].type is ActionType.CLICK
        assert reqs.actions[0].target == expected_target

    def test_enter_into(self):
        reqs = understand_prompt('enter "hello world" into the search box.')

        action = reqs.actions[0]
        assert action.type is ActionType.FILL
        assert action.value == "hello world"
        assert action.target == "search box"

    def test_verify(self):
        reqs = understand_prompt('verify that "Welcome" is successfully displayed')

        action = reqs.actions[0]
        assert action.type is ActionType.VERIFY
        assert action.target == "Welcome"
        assert action.expected == "displayed"

    def test_wait_for(self):
        reqs = understand_prompt('wait for the "Dashboard"')

        assert reqs.actions[0].type is ActionType.WAIT
        assert reqs.actions[0].target == "Dashboard"

    def test_unrecognised_prompt(self):
        assert understand_prompt("make it pop").actions == []

    def test_actions_in_prompt_order(self):
        prompt = (
            'wait for "Home"\n'
            "go to https://example.com\n"
            'click "Products"\n'
            'click "Add to cart"\n'
            'verify "Cart (1)" is displayed\n'
        )

        reqs = understand_prompt(prompt)

        assert [a.type for a in reqs.actions] == [
            ActionType.WAIT,
            ActionType.NAVIGATE,
            ActionType.CLICK,
            ActionType.CLICK,
            ActionType.VERIFY,
        ]
        assert reqs.actions[3].target == "Add to cart"


class TestPromptMetadata:
    """Test name and description extraction."""

    def test_test_name(self):
        assert extract_test_name("Write a test for 'Checkout flow'") == "Checkout flow"

    def test_default_name(self):
        assert extract_test_name('click "Go"') == "Generated Test"

    def test_description_is_first_line(self):
        assert extract_description("\n  Log in as admin  \nthen logout") == "Log in as admin"

    def test_default_description(self):
        assert extract_description("   ") == "Automated test generated from requirements"


class TestRecovery:
    """Test error classification and recovery."""

    def test_recoverable_errors(self):
        assert is_recoverable(ElementNotFoundError("missing", hint="'x'"))
        assert is_recoverable(VisibilityTimeoutError("'x'", 100, 120))
        assert is_recoverable(RuntimeError("Timeout 3000ms exceeded"))
        assert not is_recoverable(ValueError("bad value"))

    @pytest.mark.asyncio
    async def test_fix_common_issues_waits_for_network_idle(self):
        class MockPage:
            def __init__(self):
                self.states = []

            async def wait_for_load_state(self, state="load", timeout=None):
                self.states.append(state)

        page = MockPage()

        assert await fix_common_issues(page, RuntimeError("element not found")) is True
        assert page.states == ["networkidle"]

    @pytest.mark.asyncio
    async def test_fix_common_issues_ignores_other_errors(self):
        assert await fix_common_issues(object(), KeyError("nope")) is False


class NavigablePage(FakePage):
    """FakePage that records navigation."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.visited = []

    async def goto(self, url, **kwargs):
        self.visited.append(url)


class TestSmartActionRunner:
    """Test running parsed actions through AutoActions."""

    @pytest.fixture
    def runner(self):
        settings = Settings(resolver=ResolverSettings(visible_poll_ms=20, visible_check_ms=50))
        runner = SmartActionRunner(AutoActions(settings=settings))
        runner.SETTLE_MS = 0
        return runner

    @pytest.mark.asyncio
    async def test_runs_actions_in_order(self, runner):
        username = FakeElement(tag="input", type="text", label="Username")
        password = FakeElement(tag="input", type="password")
        login = FakeElement(tag="button", text="Login")
        page = NavigablePage([username, password, login])

        reqs = await runner.run(
            page,
            "go to https://example.com\nlogin with username jane and password s3cret\nclick \"Login\"",
        )

        assert len(reqs.actions) == 4
        assert page.visited == ["https://example.com"]
        assert username.value == "jane"
        assert password.value == "s3cret"
        assert login.clicks == 1

    @pytest.mark.asyncio
    async def test_verify_uses_expect(self, runner, monkeypatch):
        checked = []

        class Assertions:
            def __init__(self, locator):
                self.locator = locator

            async def to_be_visible(self):
                checked.append(self.locator)

        monkeypatch.setattr(instruction_parser, "expect", Assertions)
        heading = FakeElement(tag="h1", text="Welcome")
        page = NavigablePage([heading])

        await runner.execute(page, TestAction(ActionType.VERIFY, target="Welcome"))

        assert checked[0].elements == [heading]

    @pytest.mark.asyncio
    async def test_recoverable_failure_retried_once(self, runner):
        page = NavigablePage([])
        settled = []

        async def wait_for_load_state(state="load", timeout=None):
            if state == "networkidle" and timeout is None:
                settled.append(state)
                page.elements.append(FakeElement(tag="button", text="Late"))

        page.wait_for_load_state = wait_for_load_state

        await runner.run(page, 'click "Late"')

        assert settled == ["networkidle"]
        assert page.elements[0].clicks == 1

    @pytest.mark.asyncio
    async def test_unrecoverable_failure_propagates(self, runner):
        page = NavigablePage([FakeElement(tag="button", text="Boom", click_error=ValueError("x"),
                                          dispatch_error=ValueError("y"))])

        with pytest.raises(Exception) as exc_info:
            await runner.run(page, 'click "Boom"')

        assert "Could not click" in str(exc_info.value)
