"""
Instruction Parser - Turn a plain-English test description into actions.

Pattern matching only. Recognised phrases:
- go to https://example.com
- login with username X and password Y
- click "Sign in"
- enter "hello" into the search box
- verify "Welcome" is displayed
- wait for "Dashboard"

Actions come out in the order they appear in the prompt.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple, TYPE_CHECKING
import asyncio
import logging
import re

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import expect

from autolocate.exceptions import ElementNotFoundError, VisibilityTimeoutError

if TYPE_CHECKING:
    from autolocate.engine.actions import AutoActions

logger = logging.getLogger(__name__)


class ActionType(Enum):
    """Kinds of action a prompt can describe."""
    NAVIGATE = "navigate"
    CLICK = "click"
    FILL = "fill"
    WAIT = "wait"
    VERIFY = "verify"


@dataclass
class TestAction:
    """One action extracted from a prompt."""
    __test__ = False

    type: ActionType
    target: Optional[str] = None
    value: Optional[str] = None
    url: Optional[str] = None
    expected: Optional[str] = None


@dataclass
class TestRequirements:
    """Everything understood from a prompt."""
    __test__ = False

    actions: List[TestAction] = field(default_factory=list)
    test_name: str = "Generated Test"
    description: str = ""


DEFAULT_TEST_NAME = "Generated Test"
DEFAULT_DESCRIPTION = "Automated test generated from requirements"

TEST_NAME = re.compile(r'test (?:for )?["\']?([^"\'\n]+)["\']?', re.I)


def _clean(text: str) -> str:
    return text.strip().rstrip(".").strip()


# (regex, builder) pairs; a builder returns the actions for one match
PATTERNS: List[Tuple[re.Pattern, Callable[[re.Match], List[TestAction]]]] = [
    (re.compile(r'go to (https?://\S+)', re.I),
     lambda m: [TestAction(ActionType.NAVIGATE, url=m.group(1))]),

    (re.compile(r'login with username:?\s*(\S+)\s+and password:?\s*(\S+)', re.I),
     lambda m: [
         TestAction(ActionType.FILL, target="username", value=m.group(1)),
         TestAction(ActionType.FILL, target="password", value=m.group(2)),
     ]),

    (re.compile(r'click (?:on )?["\']([^"\']+)["\']', re.I),
     lambda m: [TestAction(ActionType.CLICK, target=m.group(1))]),

    (re.compile(r'enter ["\']([^"\']+)["\'] into (?:the )?([^"\'\n]+)', re.I),
     lambda m: [TestAction(ActionType.FILL, target=_clean(m.group(2)), value=m.group(1))]),

    (re.compile(r'verify (?:that )?["\']([^"\']+)["\'] (?:is|are) (?:successfully )?([^"\'\n]+)', re.I),
     lambda m: [TestAction(ActionType.VERIFY, target=m.group(1), expected=_clean(m.group(2)))]),

    (re.compile(r'wait for (?:the )?["\']([^"\']+)["\']', re.I),
     lambda m: [TestAction(ActionType.WAIT, target=m.group(1))]),
]


def extract_test_name(prompt: str) -> str:
    match = TEST_NAME.search(prompt)
    return _clean(match.group(1)) if match else DEFAULT_TEST_NAME


def extract_description(prompt: str) -> str:
    for line in prompt.splitlines():
        if line.strip():
            return line.strip()
    return DEFAULT_DESCRIPTION


def understand_prompt(prompt: str) -> TestRequirements:
    """
    Parse a prompt into test requirements.

    Args:
        prompt: Free-form description of a test

    Returns:
        TestRequirements with actions in prompt order

    Example:
        >>> reqs = understand_prompt('go to https://example.com and click "Login"')
        >>> [a.type.value for a in reqs.actions]
        ['navigate', 'click']
    """
    found: List[Tuple[int, int, List[TestAction]]] = []
    for order, (pattern, build) in enumerate(PATTERNS):
        for match in pattern.finditer(prompt):
            found.append((match.start(), order, build(match)))

    actions: List[TestAction] = []
    for _, _, built in sorted(found, key=lambda item: (item[0], item[1])):
        actions.extend(built)

    logger.debug(f"Understood {len(actions)} action(s) from prompt")
    return TestRequirements(
        actions=actions,
        test_name=extract_test_name(prompt),
        description=extract_description(prompt),
    )


def is_recoverable(error: BaseException) -> bool:
    """Whether an error looks like a page that had not settled yet."""
    if isinstance(error, (ElementNotFoundError, VisibilityTimeoutError, PlaywrightTimeoutError)):
        return True
    message = str(error).lower()
    return "element not found" in message or "timeout" in message


async def fix_common_issues(page: Any, error: BaseException) -> bool:
    """
    Try to recover from a failed action.

    Returns:
        True when a recovery step ran and the action is worth retrying
    """
    if not is_recoverable(error):
        return False
    logger.info(f"Element not found or timed out, waiting for network idle: {error}")
    try:
        await page.wait_for_load_state("networkidle")
        return True
    except Exception as e:
        logger.debug(f"Network idle wait failed: {e}")
        return False


class SmartActionRunner:
    """
    Run a plain-English instruction through the action façade.

    Usage:
        runner = SmartActionRunner(actions)
        await runner.run(page, 'enter "jane" into username, click "Login"')
    """

    WAIT_TIMEOUT_MS = 10000
    SETTLE_MS = 500

    def __init__(self, actions: "AutoActions"):
        self.actions = actions

    async def run(self, page: Any, instruction: str) -> TestRequirements:
        """
        Execute every action in the instruction, in order.

        A recoverable failure gets one recovery step and one retry; anything
        else propagates.
        """
        logger.info(f"Smart action: {instruction}")
        requirements = understand_prompt(instruction)

        for action in requirements.actions:
            logger.info(f"Executing {action.type.value} on {action.target or action.url!r}")
            try:
                await self.execute(page, action)
            except Exception as e:
                if not await fix_common_issues(page, e):
                    raise
                await self.execute(page, action)
            await asyncio.sleep(self.SETTLE_MS / 1000)

        return requirements

    async def execute(self, page: Any, action: TestAction) -> None:
        """Execute a single action."""
        if action.type is ActionType.NAVIGATE:
            if action.url:
                await page.goto(action.url)
                await self.actions.waiter.ensure_ready(page)
        elif action.type is ActionType.CLICK:
            if action.target:
                await self.actions.auto_click(page, action.target)
        elif action.type is ActionType.FILL:
            if action.target and action.value is not None:
                await self.actions.auto_fill(page, action.target, action.value)
        elif action.type is ActionType.WAIT:
            if action.target:
                await self.actions.auto_expect_visible(
                    page, action.target, timeout_ms=self.WAIT_TIMEOUT_MS
                )
        elif action.type is ActionType.VERIFY:
            if action.target:
                locator = await self.actions.auto_expect_visible(page, action.target)
                await expect(locator).to_be_visible()
